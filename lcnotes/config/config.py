"""
Read the environment and the configuration file.

Two kinds of configuration are kept apart here. The connection record
(`EnvironmentConfig`) holds the credential, the endpoint and the model
name, and is read from the process environment or from a .env file:

    OPENAI_API_KEY=sk-...
    BASE_URL=https://api.example.com/v1
    MODEL=gpt-4o-mini

The model parameters (`Settings`, with a `primary` section) are read
from config.toml or from LCNOTES_-prefixed environment variables, e.g.
LCNOTES_PRIMARY__TEMPERATURE=0.2.

A missing environment variable is not an error at load time: the
field is left as None, and the failure surfaces when the client
created from the record is first used. Call `load_environment` with
`strict=True` to fail early instead.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

# Supported model sources. "Debug" creates a fake chat model that
# does not call any provider.
ModelSource = Literal['OpenAI', 'Debug']

ParamValue = str | int | float | bool

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_ENV_FILE = ".env"

# Environment variable names, by field of EnvironmentConfig
ENVIRONMENT_VARIABLES: dict[str, str] = {
    'api_key': "OPENAI_API_KEY",
    'base_url': "BASE_URL",
    'model_name': "MODEL",
}


class ConfigurationError(ValueError):
    """Raised when a required configuration value is missing."""

    pass


class EnvironmentConfig(BaseSettings):
    """
    Connection record read from the process environment.

    Attributes:
        api_key: credential for the endpoint (OPENAI_API_KEY)
        base_url: the endpoint of the chat completion API (BASE_URL)
        model_name: passed as is to the client (MODEL)
    """

    api_key: str | None = Field(
        default=None,
        validation_alias=ENVIRONMENT_VARIABLES['api_key'],
        description="API key of the chat completion endpoint",
    )
    base_url: str | None = Field(
        default=None,
        validation_alias=ENVIRONMENT_VARIABLES['base_url'],
        description="Base URL of the chat completion endpoint",
    )
    model_name: str | None = Field(
        default=None,
        validation_alias=ENVIRONMENT_VARIABLES['model_name'],
        description="Model identifier, passed opaquely to the client",
    )

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        frozen=True,
        extra='ignore',
        populate_by_name=True,
        protected_namespaces=(),
    )

    def missing_variables(self) -> list[str]:
        """The names of the environment variables that were not set
        or were set to an empty string."""
        return [
            ENVIRONMENT_VARIABLES[field]
            for field in ENVIRONMENT_VARIABLES
            if not getattr(self, field)
        ]


class LanguageModelSettings(BaseModel):
    """
    Parameters of the chat model.

    Attributes:
        source: 'OpenAI' for an OpenAI-compatible endpoint, 'Debug'
            for a fake model
        temperature: float between 0.0 and 2.0
        max_tokens: max number of generated tokens
        max_retries: max number of retry attempts. None leaves the
            retry policy of the client library in place.
        timeout: timeout when waiting for response
        provider_params: extra keyword arguments of the client
    """

    source: ModelSource = Field(
        default='OpenAI', description="Model source"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Controls randomness in model responses (0.0-2.0)",
    )
    max_tokens: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of tokens to generate",
    )
    max_retries: int | None = Field(
        default=None,
        ge=0,
        description="Maximum number of retry attempts",
    )
    timeout: float | None = Field(
        default=None, gt=0, description="Request timeout in seconds"
    )
    provider_params: dict[str, ParamValue] = Field(
        default_factory=dict,
        description="Provider-specific parameters (e.g., top_p)",
    )

    model_config = SettingsConfigDict(frozen=True, extra='forbid')

    def __hash__(self) -> int:
        return hash(
            (
                self.source,
                self.temperature,
                self.max_tokens,
                self.max_retries,
                self.timeout,
                tuple(sorted(self.provider_params.items())),
            )
        )


class Settings(BaseSettings):
    """
    Model parameters read from config.toml.

    Attributes:
        primary: parameters of the primary chat model
    """

    primary: LanguageModelSettings = Field(
        default_factory=LanguageModelSettings,
        description="Primary chat model",
    )

    model_config = SettingsConfigDict(
        toml_file=DEFAULT_CONFIG_FILE,
        env_prefix="LCNOTES_",
        env_nested_delimiter="__",
        frozen=True,
        extra='allow',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            TomlConfigSettingsSource(settings_cls),
            env_settings,
        )


def load_environment(
    env_file: str | Path | None = DEFAULT_ENV_FILE,
    strict: bool = False,
) -> EnvironmentConfig:
    """
    Read the connection record from the environment.

    Args:
        env_file: a .env file read in addition to the process
            environment, which takes precedence. None to skip it.
        strict: raise if any of the variables is missing

    Returns:
        an EnvironmentConfig object. Missing variables are None.

    Raises:
        ConfigurationError: if strict and a variable is missing
    """
    config = EnvironmentConfig(_env_file=env_file)  # type: ignore
    if strict:
        missing = config.missing_variables()
        if missing:
            raise ConfigurationError(
                "Missing environment variables: " + ", ".join(missing)
            )
    return config


@lru_cache(maxsize=1)
def get_environment() -> EnvironmentConfig:
    """The connection record of the process, read once."""
    return load_environment()


def serialize_settings(sets: BaseSettings) -> str:
    """Transform the settings into a string in TOML format.

    Args:
        sets: The settings object to serialize

    Returns:
        TOML formatted string representation of settings
    """
    import tomlkit

    doc = tomlkit.document()
    doc.add(tomlkit.comment("Configuration file"))
    doc.add(tomlkit.nl())

    data: dict[str, Any] = sets.model_dump()
    for key, value in data.items():
        if isinstance(value, dict):
            tbl = tomlkit.table()
            for kkey, vvalue in value.items():  # type: ignore
                # None cannot be represented in TOML
                if vvalue is not None:
                    tbl[kkey] = vvalue
            doc[key] = tbl
        elif value is not None:
            doc[key] = value

    return str(tomlkit.dumps(doc))  # type: ignore


def export_settings(
    settings: BaseSettings, file_path: str | Path | None = None
) -> None:
    """Save settings to file in TOML format.

    Args:
        settings: A settings object to save
        file_path: The settings file path (defaults to config.toml)
    """
    file_path = Path(file_path or DEFAULT_CONFIG_FILE)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        f.write(serialize_settings(settings))


def create_default_config_file(
    file_path: str | Path | None = None,
) -> None:
    """Write a settings file with the default values, replacing any
    existing file."""
    file_path = Path(file_path or DEFAULT_CONFIG_FILE)
    if file_path.exists():
        # otherwise, it will be read in
        file_path.unlink()

    export_settings(Settings(primary=LanguageModelSettings()), file_path)


def load_settings(file_path: str | Path | None = None) -> Settings:
    """Load settings from TOML file.

    Args:
        file_path: Path to settings file (defaults to config.toml)

    Returns:
        Loaded settings object

    Raises:
        FileNotFoundError: If settings file doesn't exist
        ValueError: If settings file is invalid
    """
    file_path = Path(file_path or DEFAULT_CONFIG_FILE)

    if not file_path.exists():
        raise FileNotFoundError(
            f"Settings file not found: {file_path}"
        )

    try:

        class FileSettings(Settings):
            model_config = SettingsConfigDict(
                toml_file=str(file_path),
                env_prefix="LCNOTES_",
                env_nested_delimiter="__",
                frozen=True,
                extra='allow',
            )

        return FileSettings()
    except Exception as e:
        raise ValueError(
            f"Failed to load settings from {file_path}: "
            + format_pydantic_error_message(str(e))
        ) from e


def format_pydantic_error_message(error_message: str) -> str:
    """Filter out the link to the pydantic docs from error messages."""
    lines = error_message.split('\n')
    filtered_lines = [
        line
        for line in lines
        if "For further information visit" not in line
    ]
    return '\n'.join(filtered_lines)
