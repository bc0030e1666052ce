"""
Creation of the chat model clients from the configuration.

Two clients are offered:

- the primary client, pointed at the endpoint given by the BASE_URL
    environment variable, with the API key and model name read from
    OPENAI_API_KEY and MODEL, and the model parameters of the
    `primary` section of config.toml. The retry policy is the default
    one of the client library unless max_retries is configured.
- the error client, used only to demonstrate fallbacks. It shares the
    credential and model name with the primary client, but it is
    always pointed at an endpoint that cannot be resolved and is
    never retried, so that every call to it fails.

The clients are LangChain chat models (`BaseChatModel`), implementing
the runnable interface (.invoke/.ainvoke/.batch/.stream). They are
memoized in the `chat_models` repository, keyed by the complete
client specification, and created at the first request. Creation
does not depend on the environment: a missing credential is replaced
by MISSING_API_KEY, so that it surfaces as an authentication error of
the client library at the first call instead of at creation.

Examples:

```python
from lcnotes.language_models.models import (
    create_model,
    create_error_model,
)
model = create_model()  # environment and config.toml
response = model.invoke("Tell me a joke")

error_model = create_error_model()
error_model.invoke("Hi")  # raises a connection error
```

Note:
    The 'Debug' source gives a fake chat model that returns the
    message given in provider_params['message'], or numbered
    messages if no message is given.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from langchain_core.language_models.chat_models import BaseChatModel

from lcnotes.config.config import (
    EnvironmentConfig,
    LanguageModelSettings,
    ModelSource,
    ParamValue,
    Settings,
    get_environment,
)
from .lazy_dict import LazyLoadingDict

# An endpoint in the reserved .invalid top-level domain never
# resolves, so requests fail before reaching any server.
ERROR_BASE_URL = "http://endpoint.invalid/v1"
ERROR_MAX_RETRIES = 0

# The openai client refuses to be created without a credential
MISSING_API_KEY = "api-key-not-set"


class ClientSpec(BaseModel):
    """All values that determine a chat model client"""

    source: ModelSource = 'OpenAI'
    model_name: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    max_retries: int | None = None
    timeout: float | None = None
    provider_params: frozenset[tuple[str, ParamValue]] = frozenset()

    # required for hashability
    model_config = ConfigDict(
        frozen=True, extra='forbid', protected_namespaces=()
    )

    @classmethod
    def from_config(
        cls,
        config: EnvironmentConfig,
        settings: LanguageModelSettings,
    ) -> 'ClientSpec':
        return cls(
            source=settings.source,
            model_name=config.model_name,
            api_key=config.api_key,
            base_url=config.base_url,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            max_retries=settings.max_retries,
            timeout=settings.timeout,
            provider_params=frozenset(
                settings.provider_params.items()
            ),
        )


def _create_model_instance(spec: ClientSpec) -> BaseChatModel:
    """
    Factory function creating LangChain chat models while checking
    permissible sources.
    """
    match spec.source:
        case "OpenAI":
            try:
                from langchain_openai import ChatOpenAI
            except ImportError as e:
                raise ImportError(
                    "OpenAI models require the 'langchain-openai'"
                    " package. Install it with: pip install "
                    "langchain-openai"
                ) from e

            # Unset values are left out, so that the client library
            # applies its own defaults.
            kwargs: dict[str, Any] = {}
            optional_kwargs: dict[str, Any] = {
                "model": spec.model_name,
                "api_key": spec.api_key or MISSING_API_KEY,
                "base_url": spec.base_url,
                "temperature": spec.temperature,
                "max_tokens": spec.max_tokens,
                "max_retries": spec.max_retries,
                "timeout": spec.timeout,
            }
            for key, value in optional_kwargs.items():
                if value is not None:
                    kwargs[key] = value

            kwargs.update(dict(spec.provider_params))

            return ChatOpenAI(**kwargs)

        case "Debug":
            from langchain_core.language_models.fake_chat_models import (
                GenericFakeChatModel,
            )
            from .message_iterator import (
                yield_message,
                yield_constant_message,
            )

            params = dict(spec.provider_params)
            if "message" in params:
                return GenericFakeChatModel(
                    name="Fake constant chat",
                    messages=yield_constant_message(
                        str(params["message"])
                    ),
                )
            return GenericFakeChatModel(
                name="Fake chat",
                messages=yield_message(),
            )

        case _:
            raise ValueError(f"Invalid model source: {spec.source}")


# Public interface----------------------------------------------
chat_models: LazyLoadingDict[ClientSpec, BaseChatModel] = (
    LazyLoadingDict(_create_model_instance)
)


def create_model_from_spec(spec: ClientSpec) -> BaseChatModel:
    """
    Create (or retrieve) the chat model of a client specification.

    Raises:
        ValueError, ValidationError: for invalid specifications
        ImportError: if the provider package is not installed
    """
    return chat_models[spec]


def create_model(
    config: EnvironmentConfig | None = None,
    settings: LanguageModelSettings | None = None,
) -> BaseChatModel:
    """
    Create the primary chat model.

    Args:
        config: the connection record. Defaults to the record read
            from the environment of the process.
        settings: the model parameters. Defaults to the primary
            section of config.toml.

    Returns:
        a LangChain chat model, memoized

    Example:
        ```python
        model = create_model()
        response = model.invoke([HumanMessage("Tell me a joke")])
        print(response.content)
        ```
    """
    if config is None:
        config = get_environment()
    if settings is None:
        settings = Settings().primary
    return chat_models[ClientSpec.from_config(config, settings)]


def create_error_model(
    config: EnvironmentConfig | None = None,
    settings: LanguageModelSettings | None = None,
) -> BaseChatModel:
    """
    Create a chat model that fails at every call.

    The model takes the credential and model name from the
    environment, but its endpoint is always ERROR_BASE_URL and it is
    never retried, whatever the environment contains. Use it to
    demonstrate fallbacks, not as a fallback strategy.

    Args:
        config: the connection record. Defaults to the record read
            from the environment of the process.
        settings: the model parameters. Only an 'OpenAI' source makes
            sense here; a 'Debug' source is replaced. If None, no model
            parameter is set.

    Returns:
        a LangChain chat model, memoized
    """
    if config is None:
        config = get_environment()
    if settings is None:
        spec = ClientSpec(
            model_name=config.model_name, api_key=config.api_key
        )
    else:
        spec = ClientSpec.from_config(config, settings)
    spec = spec.model_copy(
        update={
            'source': 'OpenAI',
            'base_url': ERROR_BASE_URL,
            'max_retries': ERROR_MAX_RETRIES,
        }
    )
    return chat_models[spec]
