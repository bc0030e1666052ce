"""
lcnotes: runnable notes on the LangChain framework.

The package connects the process environment (API key, endpoint and
model name, read from the environment or a .env file) to chat model
clients, and collects example material on model invocation, prompt
templates, output parsers and document loaders as callable functions.

- config: environment record and TOML settings
- language_models: client factory, prompts, parsers, runnables
- loaders: document loaders for files, folders, web pages and repos
- examples: the annotated examples, one module per topic
"""
