"""
Prompt templates.

A PromptTemplate is a text with {variables} that are filled in by
.format(). The variables are inferred from the text by
PromptTemplate.from_template; text that should keep its braces is
written with double braces ({{ and }}).

.partial() fixes some of the variables in advance and returns a new
template requiring only the others. A partial value may also be a
function, called each time the template is formatted (e.g. to insert
the current date).

Chat prompts are the main form of interaction with chat models. A
ChatPromptTemplate is a list of message templates:

- system messages set the context and the behaviour of the model,
    and carry a high weight
- human messages are what the user says
- AI messages are the replies of the model

A chat prompt piped into a model and a parser forms a chain that
is invoked with the values of the variables.

Several prompts can be composed: the output of each stage is bound to
a name used by the following stages and by the final prompt, so that
smaller prompts can be reused.

Run with:
    python -m lcnotes.examples.templates
"""

from collections.abc import Callable
from datetime import datetime

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import PromptTemplate

from lcnotes.language_models.models import create_model
from lcnotes.language_models.prompts import (
    PipelineStage,
    chat_prompt_from_definition,
    format_pipeline_prompt,
    prompt_library,
)
from lcnotes.language_models.runnables import create_chain
from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)


def static_prompt(logger: LoggerBase = logger) -> str:
    """A template without variables"""
    prompt = PromptTemplate(
        input_variables=[], template=prompt_library["greeting"].prompt
    )
    text = prompt.format()
    logger.info(f"no variable prompt template: {text}")
    return text


def parameterized_prompt(
    time_of_day: str = "afternoon",
    name: str = "John",
    logger: LoggerBase = logger,
) -> str:
    """Declared variables; {{test}} is kept as literal {test}"""
    prompt = PromptTemplate(
        input_variables=["time_of_day", "name"],
        template="good {time_of_day}, {name}, {{test}}",
    )
    text = prompt.format(time_of_day=time_of_day, name=name)
    logger.info(f"has variable prompt template: {text}")
    return text


def inferred_prompt(
    time_of_day: str = "afternoon",
    name: str = "John",
    logger: LoggerBase = logger,
) -> str:
    """Variables inferred from the template text"""
    prompt = PromptTemplate.from_template("good {time_of_day}, {name}")
    text = prompt.format(time_of_day=time_of_day, name=name)
    logger.info(f"auto infer prompt template: {text}")
    return text


def partial_prompt(
    kind: str = "feline",
    items: tuple[str, ...] = ("tiger", "house cat"),
    logger: LoggerBase = logger,
) -> list[str]:
    """One variable fixed in advance, the other given at each call"""
    prompt = PromptTemplate.from_template("This is a {kind}, it is a {item}")
    partial = prompt.partial(kind=kind)
    texts = [partial.format(item=item) for item in items]
    for text in texts:
        logger.info(f"partial prompt template: {text}")
    return texts


def current_date() -> str:
    return datetime.now().strftime("%x")


def get_greeting(
    time_period: str, date_func: Callable[[], str] = current_date
) -> str:
    """A greeting for the time of the day, prefixed by the date"""
    date = date_func()
    match time_period:
        case "morning":
            return date + " good morning!"
        case "noon":
            return date + " good afternoon!"
        case "evening":
            return date + " good evening!"
        case _:
            return date + " hello!"


def dynamic_partial_prompt(
    time_period: str = "noon",
    activity: str = "Do you have time to go out?",
    date_func: Callable[[], str] = current_date,
    logger: LoggerBase = logger,
) -> str:
    """A partial variable computed by a function at format time"""
    prompt = PromptTemplate.from_template(
        "Today is {date}, {time_period}, {activity}"
    )
    partial = prompt.partial(date=date_func)
    text = partial.format(
        time_period=get_greeting(time_period, date_func),
        activity=activity,
    )
    logger.info(f"dynamic param prompt template: {text}")
    return text


def translation_messages(
    source_lang: str = "English",
    target_lang: str = "Japanese",
    text: str = "Hello, world!",
    logger: LoggerBase = logger,
) -> list[BaseMessage]:
    """The messages of the translator chat prompt"""
    prompt = chat_prompt_from_definition(prompt_library["translator"])
    messages = prompt.format_messages(
        source_lang=source_lang, target_lang=target_lang, text=text
    )
    logger.info(f"translate prompt template: {messages}")
    return messages


def translation_chain(
    model: BaseChatModel | None = None,
    source_lang: str = "English",
    target_lang: str = "Japanese",
    text: str = "Hello, world!",
    logger: LoggerBase = logger,
) -> str:
    """The translator chat prompt piped into model and parser"""
    if model is None:
        model = create_model()
    prompt = chat_prompt_from_definition(prompt_library["translator"])
    chain = create_chain(model, prompt)
    response: str = chain.invoke(
        {
            'source_lang': source_lang,
            'target_lang': target_lang,
            'text': text,
        }
    )
    logger.info(f"translate prompt template response: {response}")
    return response


def combined_prompt(
    name: str = "Jane Doe",
    sex: str = "female",
    food: str = "a sandwich and milk",
    now: datetime | None = None,
    logger: LoggerBase = logger,
) -> str:
    """A butler prompt composed of three reusable prompts"""
    if now is None:
        now = datetime.now()
    stages = [
        PipelineStage(
            "time",
            PromptTemplate.from_template(
                "today's date is {date}, {period}"
            ),
        ),
        PipelineStage(
            "info",
            PromptTemplate.from_template("name: {name}, sex: {sex}"),
        ),
        PipelineStage(
            "tasks",
            PromptTemplate.from_template(
                "I would like to eat {food} at {period}. "
                "Let me repeat my personal information: {info}."
            ),
        ),
    ]
    final_prompt = PromptTemplate.from_template(
        "Hello. I am your butler, the time now is: {time}.\n"
        "My master's information is: {info}.\n\n"
        "According to the context, the tasks of my master are: {tasks}"
    )
    text = format_pipeline_prompt(
        final_prompt,
        stages,
        date=now.strftime("%x"),
        period=now.strftime("%X"),
        name=name,
        sex=sex,
        food=food,
    )
    logger.info(f"combined prompt template: {text}")
    return text


if __name__ == "__main__":
    static_prompt()
    parameterized_prompt()
    inferred_prompt()
    partial_prompt()
    dynamic_partial_prompt()
    translation_messages()
    translation_chain()
    combined_prompt()
