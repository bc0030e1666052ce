# pyright: reportUnusedImport=false
# flake8: noqa

from .config import (
    ConfigurationError,
    EnvironmentConfig,
    LanguageModelSettings,
    Settings,
    load_environment,
    get_environment,
    serialize_settings,
    export_settings,
    create_default_config_file,
    load_settings,
)
