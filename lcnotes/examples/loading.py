"""
Document loaders.

Every loader returns a list of LangChain documents, whatever the
source: `page_content` is the text, and `metadata` records where it
comes from (file, page, url), which is later useful to filter the
contents of a vector store.

- text files give one document per file
- PDF files give one document per page, unless split_pages is False
- a folder is scanned with a loader for each file suffix
- a git repository is cloned and each selected file becomes a
    document. Loading subfolders recursively may give very many
    documents.
- a web page is downloaded and parsed as static HTML, optionally
    keeping only the elements matching a CSS selector. JavaScript is
    not executed.

Run with:
    python -m lcnotes.examples.loading [assets folder]
"""

import sys
from pathlib import Path
from tempfile import TemporaryDirectory

from langchain_core.documents import Document

from lcnotes.loaders import (
    create_document,
    load_directory,
    load_git_repository,
    load_pdf,
    load_text,
    load_web_page,
)
from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)

ASSETS_FOLDER = Path(__file__).parent / "assets"


def custom_document(logger: LoggerBase = logger) -> Document:
    document = create_document("Hello World!", source="ABC title")
    logger.info(f"custom test document: {document}")
    return document


def text_file_documents(
    source: str | Path, logger: LoggerBase = logger
) -> list[Document]:
    documents = load_text(source)
    logger.info(f"text file docs: {documents}")
    return documents


def pdf_file_documents(
    source: str | Path,
    split_pages: bool = False,
    logger: LoggerBase = logger,
) -> list[Document]:
    documents = load_pdf(source, split_pages=split_pages)
    logger.info(f"pdf file docs: {len(documents)} documents")
    return documents


def directory_documents(
    source: str | Path = ASSETS_FOLDER, logger: LoggerBase = logger
) -> list[Document]:
    documents = load_directory(source, logger=logger)
    logger.info(f"directory file docs: {len(documents)} documents")
    return documents


def repository_documents(
    clone_url: str = "https://github.com/langchain-ai/langchain",
    branch: str = "master",
    logger: LoggerBase = logger,
) -> list[Document]:
    """The top-level files of a repository, without markdown and
    json files"""
    with TemporaryDirectory() as repo_path:
        documents = load_git_repository(
            clone_url,
            repo_path,
            branch=branch,
            recursive=False,
            ignore_paths=["*.md", "*.json", "node_modules", ".git"],
        )
    logger.info(f"github docs: {[d.metadata['file_path'] for d in documents]}")
    return documents


def web_page_documents(
    url: str = "https://python.langchain.com/docs/introduction/",
    selector: str | None = "h1",
    logger: LoggerBase = logger,
) -> list[Document]:
    documents = load_web_page(url, selector)
    logger.info(f"web html docs: {documents}")
    return documents


if __name__ == "__main__":
    folder = Path(sys.argv[1]) if len(sys.argv) > 1 else ASSETS_FOLDER
    custom_document()
    directory_documents(folder)
    repository_documents()
    web_page_documents()
