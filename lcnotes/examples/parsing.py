"""
Output parsers.

- StrOutputParser returns the text (.content) of the model response.
- A structured parser guides the model to answer with a JSON object
    with the given fields (here answer, evidence, confidence), and
    returns it as a dictionary. The format instructions of the parser
    are inserted into the prompt through an {instructions} variable.
- A list parser asks for comma separated values and returns a list.
- A schema parser validates the answer against a pydantic model.
    When the model does not respect the schema, an output-fixing
    parser sends the output and the validation error back to the
    model to correct it. Only the format can be corrected this way,
    not the facts.

Run with:
    python -m lcnotes.examples.parsing
"""

from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.prompts import PromptTemplate

from lcnotes.language_models.models import create_model
from lcnotes.language_models.parsers import (
    ScoredAnswer,
    create_fixing_parser,
    create_list_parser,
    create_schema_parser,
    create_structured_parser,
)
from lcnotes.language_models.prompts import prompt_library
from lcnotes.language_models.runnables import create_chain
from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)


def string_output(
    model: BaseChatModel | None = None,
    text: str = "How are you?",
    logger: LoggerBase = logger,
) -> str:
    if model is None:
        model = create_model()
    response: str = create_chain(model).invoke([HumanMessage(text)])
    logger.info(f"output parser response: {response}")
    return response


def structured_output(
    model: BaseChatModel | None = None,
    question: str = "Please tell me about the history of Toei Company",
    logger: LoggerBase = logger,
) -> dict[str, Any]:
    """The answer as a dictionary with answer, evidence, confidence"""
    if model is None:
        model = create_model()
    parser = create_structured_parser(
        {
            'answer': "the answer to the user's question",
            'evidence': "the evidence your answer relies on",
            'confidence': "your confidence in the answer",
        }
    )
    logger.info(
        f"structured output instructions: {parser.get_format_instructions()}"
    )
    prompt = PromptTemplate.from_template(
        prompt_library["instructed_question"].prompt
    )
    chain = create_chain(model, prompt, parser)
    response: dict[str, Any] = chain.invoke(
        {
            'question': question,
            'instructions': parser.get_format_instructions(),
        }
    )
    logger.info(f"structured output parser response: {response}")
    return response


def list_output(
    model: BaseChatModel | None = None,
    count: int = 5,
    area: str = "Japanese animation studios",
    logger: LoggerBase = logger,
) -> list[str]:
    if model is None:
        model = create_model()
    parser = create_list_parser()
    prompt = PromptTemplate.from_template(
        prompt_library["listing"].prompt
    )
    chain = create_chain(model, prompt, parser)
    response: list[str] = chain.invoke(
        {
            'count': count,
            'area': area,
            'instructions': parser.get_format_instructions(),
        }
    )
    logger.info(f"comma separated list output parser response: {response}")
    return response


def schema_output(
    model: BaseChatModel | None = None,
    question: str = "In which year was Kyoto Animation founded?",
    logger: LoggerBase = logger,
) -> ScoredAnswer:
    """An answer validated by the ScoredAnswer schema"""
    if model is None:
        model = create_model()
    parser = create_schema_parser(ScoredAnswer)
    prompt = PromptTemplate.from_template(
        prompt_library["instructed_question"].prompt
    )
    chain = create_chain(model, prompt, parser)
    response: ScoredAnswer = chain.invoke(
        {
            'question': question,
            'instructions': parser.get_format_instructions(),
        }
    )
    logger.info(f"schema response: {response}")
    return response


def fixed_output(
    completion: str,
    model: BaseChatModel | None = None,
    logger: LoggerBase = logger,
) -> ScoredAnswer:
    """
    Parses a completion with the ScoredAnswer schema, asking the
    model to correct it if it does not comply.
    """
    if model is None:
        model = create_model()
    parser = create_fixing_parser(
        model, create_schema_parser(ScoredAnswer)
    )
    response: ScoredAnswer = parser.parse(completion)
    logger.info(f"fixed response: {response}")
    return response


if __name__ == "__main__":
    string_output()
    structured_output()
    list_output()
    answer = schema_output()
    # an answer out of the schema, corrected by the model
    fixed_output(
        '{"answer": "%s", "confidence": "very high"}' % answer.answer
    )
