""" LangChain interface to chat models

The package connects the connection record read from the environment
and the model parameters in config.toml to LangChain chat models, and
offers the pieces that are combined with them into chains: prompt
definitions, output parsers, and chain assembly with fallbacks.

- models: the primary and error chat model clients
- prompts: prompt library and staged prompt composition
- parsers: output parsers
- runnables: chains and fallback chains
"""
# pyright: reportUnusedImport=false
# flake8: noqa

from .lazy_dict import LazyLoadingDict
