"""
Calling a chat model.

A chat model is a runnable and offers the calls of the runnable
interface:

- invoke: one call, returns an AIMessage whose .content is the text
- batch: one call for each input of a list, run concurrently
- stream: returns the response in chunks as they are generated
- astream_log: streams the response together with the intermediate
    results of each step of a chain, as JSON patches of the run state

A StrOutputParser piped after the model extracts the text of the
response, so that the chain returns a string instead of a message.

When the model may fail (API errors, unexpected output), the chain
can be given fallbacks: the `fallback_chat` example first calls a
chain built on the error client, which always fails, and then the
same chain with a working fallback.

Run with:
    python -m lcnotes.examples.invocation
"""

import asyncio
from collections.abc import Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.tracers.log_stream import RunLogPatch

from lcnotes.language_models.models import (
    create_model,
    create_error_model,
)
from lcnotes.language_models.runnables import (
    create_chain,
    create_fallback_chain,
)
from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)


def invoke_chat(
    model: BaseChatModel | None = None,
    text: str = "Tell me a joke about artificial intelligence",
    logger: LoggerBase = logger,
) -> str:
    """Direct call of the model, reading the content of the message"""
    if model is None:
        model = create_model()
    response = model.invoke([HumanMessage(text)])
    logger.info(f"invoke chat: {response.content}")
    return str(response.content)


def invoke_parsed_chat(
    model: BaseChatModel | None = None,
    text: str = "Tell me a joke",
    logger: LoggerBase = logger,
) -> str:
    """Call through a chain with a string output parser"""
    if model is None:
        model = create_model()
    chain = create_chain(model)
    response: str = chain.invoke([HumanMessage(text)])
    logger.info(f"invoke chat: {response}")
    return response


def batch_chat(
    model: BaseChatModel | None = None,
    questions: Sequence[str] = (
        "What is your name?",
        "What is your age?",
    ),
    logger: LoggerBase = logger,
) -> list[str]:
    """One call per question, the responses in the same order"""
    if model is None:
        model = create_model()
    chain = create_chain(model)
    responses: list[str] = chain.batch(
        [[HumanMessage(question)] for question in questions]
    )
    logger.info(f"batch chat: {responses}")
    return responses


async def stream_chat(
    model: BaseChatModel | None = None,
    text: str = "Hi!",
    logger: LoggerBase = logger,
) -> list[str]:
    """The response as a list of the streamed chunks"""
    if model is None:
        model = create_model()
    chain = create_chain(model)
    chunks: list[str] = []
    async for chunk in chain.astream([HumanMessage(text)]):
        logger.info(f"stream chat: {chunk}")
        chunks.append(chunk)
    return chunks


async def stream_log_chat(
    model: BaseChatModel | None = None,
    text: str = "Hi!",
    logger: LoggerBase = logger,
) -> list[RunLogPatch]:
    """The log patches of the run, including intermediate steps"""
    if model is None:
        model = create_model()
    chain = create_chain(model)
    patches: list[RunLogPatch] = []
    async for patch in chain.astream_log([HumanMessage(text)]):
        logger.info(f"streamLog chat: {patch}")
        patches.append(patch)
    return patches


def fallback_chat(
    model: BaseChatModel | None = None,
    error_model: BaseChatModel | None = None,
    logger: LoggerBase = logger,
) -> str:
    """
    Shows a chain failing, and the same chain recovering through a
    fallback.

    Returns:
        the response obtained from the fallback
    """
    if model is None:
        model = create_model()
    if error_model is None:
        error_model = create_error_model()

    failing_chain = create_chain(error_model)
    try:
        failing_chain.invoke([HumanMessage("Hi, tell me first!")])
    except Exception as e:
        logger.error(f"chain without fallback failed: {e}")

    chain_with_fallback = create_fallback_chain(
        failing_chain, [create_chain(model)]
    )
    response: str = chain_with_fallback.invoke(
        [HumanMessage("Hi, tell me second!")]
    )
    logger.info(f"fallback chat: {response}")
    return response


async def main() -> None:
    invoke_chat()
    invoke_parsed_chat()
    batch_chat()
    await stream_chat()
    await stream_log_chat()
    fallback_chat()


if __name__ == "__main__":
    asyncio.run(main())
