"""
Assembly of LangChain chains.

A chain is a sequence of runnables combined with the pipe operator,
typically a prompt template, a chat model and an output parser. The
chain itself is a runnable, called with .invoke/.batch/.stream and
their async counterparts.

- create_chain: prompt | model | parser, the parser defaulting to a
    string parser that extracts the content of the model response
- create_fallback_chain: a runnable that calls the fallbacks in turn
    when the primary runnable raises
- create_runnable: a chain from a prompt of the prompt library and
    the configured primary model. These chains are memoized in the
    `runnable_library` repository.

Example:
    ```python
    from lcnotes.language_models.models import (
        create_model,
        create_error_model,
    )
    failing = create_chain(create_error_model())
    working = create_chain(create_model())
    chain = create_fallback_chain(failing, [working])
    response = chain.invoke([HumanMessage("Hi!")])  # from working
    ```

Expected behaviour:
    This module raises exceptions from LangChain and itself.
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import (
    BaseOutputParser,
    StrOutputParser,
)
from langchain_core.prompts import BasePromptTemplate
from langchain_core.runnables import Runnable, RunnableWithFallbacks

from lcnotes.config.config import (
    EnvironmentConfig,
    LanguageModelSettings,
    Settings,
    get_environment,
)
from .lazy_dict import LazyLoadingDict
from .models import ClientSpec, create_model_from_spec
from .prompts import (
    PromptDefinition,
    chat_prompt_from_definition,
    prompt_library,
)


def create_chain(
    model: BaseChatModel,
    prompt: BasePromptTemplate | None = None,
    parser: BaseOutputParser | None = None,  # type: ignore[type-arg]
    name: str | None = None,
) -> Runnable:  # type: ignore[type-arg]
    """
    Pipe a prompt, a chat model and an output parser.

    Args:
        model: the chat model
        prompt: the prompt template. If None, the chain takes the
            input of the model (a string or a list of messages).
        parser: the output parser. Defaults to a string parser.
        name: the name of the chain

    Returns:
        the chain, a runnable
    """
    if parser is None:
        parser = StrOutputParser()
    chain: Runnable = model | parser  # type: ignore
    if prompt is not None:
        chain = prompt | chain  # type: ignore
    if name is not None:
        chain.name = name
    return chain


def create_fallback_chain(
    primary: Runnable,  # type: ignore[type-arg]
    fallbacks: Sequence[Runnable],  # type: ignore[type-arg]
    exceptions: tuple[type[BaseException], ...] = (Exception,),
) -> RunnableWithFallbacks:  # type: ignore[type-arg]
    """
    Wrap a runnable with fallbacks.

    When the primary runnable raises one of the given exceptions, the
    fallbacks are called in order with the same input, and the
    response of the first one that succeeds is returned. If all
    fail, the exception of the primary runnable is raised. Other
    exceptions propagate immediately.

    Args:
        primary: the runnable called first
        fallbacks: the runnables called on failure
        exceptions: the exceptions that trigger the fallbacks

    Raises:
        ValueError: if no fallback is given
    """
    if not fallbacks:
        raise ValueError("At least one fallback runnable is required")
    return primary.with_fallbacks(
        list(fallbacks), exceptions_to_handle=exceptions
    )


class RunnableDefinition(BaseModel):
    """Groups together all properties that define a library chain"""

    prompt_name: str
    spec: ClientSpec
    system_prompt_override: str | None = None

    # required for hashability
    model_config = ConfigDict(frozen=True, extra='forbid')


def _create_runnable(
    definition: RunnableDefinition,
) -> Runnable:  # type: ignore[type-arg]
    """Assembles a chain with a prompt from the prompt library and
    the chat model of the client specification."""
    prompt_definition: PromptDefinition = prompt_library[
        definition.prompt_name
    ]
    if definition.system_prompt_override is not None:
        prompt_definition = prompt_definition.model_copy(
            update={
                'system_prompt': definition.system_prompt_override
            }
        )

    spec = definition.spec
    return create_chain(
        create_model_from_spec(spec),
        chat_prompt_from_definition(prompt_definition),
        name=f"{definition.prompt_name}:{spec.source}/{spec.model_name}",
    )


# project-wide repository of chains
runnable_library: LazyLoadingDict[RunnableDefinition, Runnable] = (  # type: ignore[type-arg]
    LazyLoadingDict(_create_runnable)
)


def create_runnable(
    prompt_name: str,
    settings: LanguageModelSettings | None = None,
    config: EnvironmentConfig | None = None,
    system_prompt: str | None = None,
) -> Runnable:  # type: ignore[type-arg]
    """
    Create a chain from a named prompt and the primary model.

    Args:
        prompt_name: the name of a prompt in the prompt library
        settings: the model parameters, defaulting to the primary
            section of config.toml
        config: the connection record, defaulting to the environment
        system_prompt: replaces the system prompt of the definition

    Returns:
        a runnable taking a dictionary with the prompt variables and
            returning the response text. The name of the runnable is
            "{prompt_name}:{source}/{model_name}".

    Raises:
        ValueError: if the prompt name is not in the library

    Example:
        ```python
        translator = create_runnable("translator")
        response = translator.invoke({
            'source_lang': "English",
            'target_lang': "Italian",
            'text': "Hello, world!",
        })
        ```
    """
    if config is None:
        config = get_environment()
    if settings is None:
        settings = Settings().primary
    definition = RunnableDefinition(
        prompt_name=prompt_name,
        spec=ClientSpec.from_config(config, settings),
        system_prompt_override=system_prompt,
    )
    return runnable_library[definition]
