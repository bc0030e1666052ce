"""
Annotated examples of the LangChain framework, one module per topic:

- invocation: invoke, batch, stream, stream log, fallbacks
- templates: prompt templates, partials, chat prompts, composition
- parsing: string, structured, list, schema and fixing parsers
- loading: documents from files, folders, repositories, web pages

The functions that call a model take it as first argument, and
default to the primary model configured in the environment.
"""
