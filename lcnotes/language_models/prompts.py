"""
Prompt definitions and prompt composition.

The module keeps a library of named prompt definitions, each made of
a human prompt template and an optional system prompt:

    - "greeting": a template without variables
    - "translator": translation from {source_lang} to {target_lang}
    - "instructed_question": a {question} followed by the format
        {instructions} of an output parser
    - "listing": a list of {count} items of {area}, with format
        {instructions}

The definitions are retrieved from the module-level dictionary
`prompt_library`, and new definitions may be added with
`create_prompt`.

**Example**:

    ```python
    from lcnotes.language_models.prompts import (
        prompt_library,
        create_prompt,
    )
    definition = prompt_library["translator"]

    create_prompt("Summarize this text: {text}", "summarizer")
    definition = prompt_library["summarizer"]
    ```

Templates use the f-string syntax of LangChain: variables are in
single braces, and literal braces are doubled ({{ and }}).

Prompts may be composed in stages with `format_pipeline_prompt`: the
text produced by each stage is bound to the name of the stage and is
available to the following stages and to the final prompt.

**Example**:

    ```python
    from langchain_core.prompts import PromptTemplate
    stages = [
        PipelineStage("info", PromptTemplate.from_template(
            "name: {name}, age: {age}")),
        PipelineStage("task", PromptTemplate.from_template(
            "{name} would like to eat {food}")),
    ]
    final = PromptTemplate.from_template("Guest: {info}. Request: {task}")
    text = format_pipeline_prompt(
        final, stages, name="Ann", age=32, food="soup"
    )
    ```
"""

from collections.abc import Sequence
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict
from langchain_core.prompts import (
    BasePromptTemplate,
    ChatPromptTemplate,
    HumanMessagePromptTemplate,
    SystemMessagePromptTemplate,
)

from .lazy_dict import LazyLoadingDict


class PromptDefinition(BaseModel):
    """Groups the prompts that define a chat"""

    name: str
    prompt: str
    system_prompt: str | None = None

    model_config = ConfigDict(frozen=True, extra='forbid')


PromptNames = Literal[
    "greeting",
    "translator",
    "instructed_question",
    "listing",
]


def _create_prompts(prompt_name: PromptNames) -> PromptDefinition:
    match prompt_name:
        case "greeting":
            return PromptDefinition(
                name=prompt_name,
                prompt="Hello, World!",
            )
        case "translator":
            return PromptDefinition(
                name=prompt_name,
                prompt="Please translate this text: {text}",
                system_prompt="You are a professional translator. "
                "Your task is to translate text from {source_lang} "
                "to {target_lang}.",
            )
        case "instructed_question":
            return PromptDefinition(
                name=prompt_name,
                prompt="Answer the user's question as well as you can."
                "\n{instructions}\n{question}",
            )
        case "listing":
            return PromptDefinition(
                name=prompt_name,
                prompt="List {count} {area} that you know of."
                "\n{instructions}",
            )
        case _:  # do not remove this
            raise ValueError(f"Invalid prompt: {prompt_name}")


# a module-level dictionary of the prompt definitions
prompt_library: LazyLoadingDict[str, PromptDefinition] = (
    LazyLoadingDict(_create_prompts)  # type: ignore
)


def create_prompt(
    prompt_template: str,
    prompt_name: str,
    system_prompt: str | None = None,
) -> None:
    """
    Adds a custom prompt definition to the prompt library.

    Raises:
        ValueError: if a prompt with that name already exists
    """
    prompt_library[prompt_name] = PromptDefinition(
        name=prompt_name,
        prompt=prompt_template,
        system_prompt=system_prompt,
    )


def create_chat_prompt(
    human_prompt: str, system_prompt: str | None = None
) -> ChatPromptTemplate:
    """
    Combines a system and a human message template into a chat prompt.
    The input variables of the chat prompt are those of both templates.
    """
    if system_prompt is None:
        return ChatPromptTemplate.from_template(human_prompt)
    return ChatPromptTemplate.from_messages(
        [
            SystemMessagePromptTemplate.from_template(system_prompt),
            HumanMessagePromptTemplate.from_template(human_prompt),
        ]
    )


def chat_prompt_from_definition(
    definition: PromptDefinition,
) -> ChatPromptTemplate:
    return create_chat_prompt(
        definition.prompt, definition.system_prompt
    )


class PipelineStage(NamedTuple):
    """A prompt whose formatted text is bound to `name`"""

    name: str
    prompt: BasePromptTemplate


def format_pipeline_prompt(
    final_prompt: BasePromptTemplate,
    stages: Sequence[PipelineStage],
    **kwargs: Any,
) -> str:
    """
    Formats a prompt composed of stages.

    The stages are formatted in order. Each stage receives the
    variables it declares, taken from the keyword arguments and from
    the output of the previous stages; its output is then bound to
    the stage name. The final prompt is formatted in the same way.
    The same variable may be used by any number of stages.

    Args:
        final_prompt: the prompt producing the result
        stages: the named prompts feeding the final prompt
        kwargs: the values of the variables

    Returns:
        the formatted text of the final prompt

    Raises:
        KeyError: if a variable required by a prompt has no value
    """
    values: dict[str, Any] = dict(kwargs)
    for stage in stages:
        values[stage.name] = _format_with(stage.prompt, values)
    return _format_with(final_prompt, values)


def _format_with(
    prompt: BasePromptTemplate, values: dict[str, Any]
) -> str:
    missing = [
        var for var in prompt.input_variables if var not in values
    ]
    if missing:
        raise KeyError(f"Missing values for prompt variables: {missing}")
    return prompt.format(
        **{var: values[var] for var in prompt.input_variables}
    )
