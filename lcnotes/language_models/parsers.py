"""
Output parsers for chat model responses.

An output parser is the last element of a chain: it takes the message
returned by the chat model and extracts the text or a structured
object from it. All parsers here offer `get_format_instructions()`,
which returns the text to be inserted into the prompt to tell the
model the expected format.

- create_structured_parser: a JSON object with the given fields
- create_list_parser: a list of comma separated values
- create_schema_parser: a JSON object validated by a pydantic schema
- create_fixing_parser: wraps a parser, and when parsing fails sends
    the faulty output and the error to a chat model for correction.
    The correction concerns the format of the output only; it cannot
    fix factual errors.

Example:
    ```python
    parser = create_schema_parser(ScoredAnswer)
    prompt = PromptTemplate.from_template(
        "Answer the question.\\n{instructions}\\n{question}"
    )
    chain = prompt | model | parser
    answer: ScoredAnswer = chain.invoke({
        'question': "When was Kyoto Animation founded?",
        'instructions': parser.get_format_instructions(),
    })
    ```
"""

from pydantic import BaseModel, Field
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import (
    BaseOutputParser,
    CommaSeparatedListOutputParser,
    PydanticOutputParser,
)
from langchain_classic.output_parsers import (
    OutputFixingParser,
    ResponseSchema,
    StructuredOutputParser,
)


class ScoredAnswer(BaseModel):
    """An answer with the confidence of the model in it"""

    answer: str = Field(description="The answer to the user's question")
    confidence: int = Field(
        ge=0,
        le=100,
        description="Your confidence in the answer, out of 100",
    )


def create_structured_parser(
    fields: dict[str, str],
) -> StructuredOutputParser:
    """
    Create a parser for a JSON object with string fields.

    Args:
        fields: the field names, with the description of the content
            expected in each of them

    Example:
        ```python
        parser = create_structured_parser({
            'answer': "the answer to the user's question",
            'evidence': "the source of the answer",
        })
        ```
    """
    schemas = [
        ResponseSchema(name=name, description=description)
        for name, description in fields.items()
    ]
    return StructuredOutputParser.from_response_schemas(schemas)


def create_list_parser() -> CommaSeparatedListOutputParser:
    return CommaSeparatedListOutputParser()


def create_schema_parser(
    schema: type[BaseModel],
) -> PydanticOutputParser:  # type: ignore[type-arg]
    """Create a parser validating the output against a pydantic
    model. Validation errors are raised as OutputParserException."""
    return PydanticOutputParser(pydantic_object=schema)


def create_fixing_parser(
    model: BaseChatModel,
    parser: BaseOutputParser,  # type: ignore[type-arg]
    max_retries: int = 1,
) -> OutputFixingParser:  # type: ignore[type-arg]
    """
    Wrap a parser so that outputs failing to parse are sent back to
    the model together with the error, to be corrected.

    Args:
        model: the chat model asked to fix the output
        parser: the parser that must accept the fixed output
        max_retries: the number of correction attempts

    Raises:
        OutputParserException: (when parsing) if the output is still
            invalid after the retries
    """
    return OutputFixingParser.from_llm(
        llm=model, parser=parser, max_retries=max_retries
    )
