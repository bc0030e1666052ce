"""
Loading of documents from files and folders.

A LangChain `Document` is the uniform representation of text data of
any origin: `page_content` holds the text, and `metadata` a
dictionary with information about the origin (source file, page
number, etc.), which vector stores can later use for filtering.
Documents are usually produced by loaders, but may also be created
directly with `create_document`.

Example:
    ```python
    docs = load_text("assets/notes.txt")
    pages = load_pdf("assets/book.pdf")  # one document per page
    book = load_pdf("assets/book.pdf", split_pages=False)
    everything = load_directory("assets")  # .txt and .pdf files
    ```
"""

from collections.abc import Callable, Mapping
from functools import partial
from pathlib import Path
from typing import Any

from langchain_core.documents import Document
from langchain_community.document_loaders import (
    PDFPlumberLoader,
    TextLoader,
)

from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)

FileLoader = Callable[[Path], list[Document]]


def create_document(text: str, **metadata: Any) -> Document:
    """Create a document from text and metadata, e.g.
    create_document("Hello World!", source="ABC title")"""
    return Document(page_content=text, metadata=metadata)


def _check_file(source: str | Path) -> Path:
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File does not exist: {source}")
    if not path.is_file():
        raise IsADirectoryError(f"Not a file: {source}")
    return path


def load_text(
    source: str | Path, encoding: str | None = "utf-8"
) -> list[Document]:
    """
    Load a text file as a single document.

    Args:
        source: the path of the file
        encoding: the file encoding. None to detect it.

    Returns:
        a list with one document, with the file path as 'source' in
            the metadata
    """
    path = _check_file(source)
    loader = TextLoader(
        str(path),
        encoding=encoding,
        autodetect_encoding=encoding is None,
    )
    return loader.load()


def load_pdf(
    source: str | Path, split_pages: bool = True
) -> list[Document]:
    """
    Load the text of a PDF file.

    Args:
        source: the path of the file
        split_pages: if True, one document is returned for each page,
            with the page number in the metadata. If False, the pages
            are merged into a single document.

    Returns:
        a list of documents
    """
    path = _check_file(source)
    pages: list[Document] = PDFPlumberLoader(str(path)).load()
    if split_pages or not pages:
        return pages

    metadata = {
        key: value
        for key, value in pages[0].metadata.items()
        if key != 'page'
    }
    metadata['total_pages'] = len(pages)
    text = "\n\n".join(page.page_content for page in pages)
    return [Document(page_content=text, metadata=metadata)]


# File loaders by suffix used by load_directory
DEFAULT_LOADERS: dict[str, FileLoader] = {
    '.txt': load_text,
    '.pdf': partial(load_pdf, split_pages=False),
}


def load_directory(
    source: str | Path,
    loaders: Mapping[str, FileLoader] | None = None,
    recursive: bool = True,
    logger: LoggerBase = logger,
) -> list[Document]:
    """
    Load the files of a folder, using a loader for each file type.

    Args:
        source: the folder
        loaders: a mapping from file suffix (such as '.txt') to a
            function loading the documents of a file. Defaults to
            text and PDF files, each PDF as one document.
        recursive: scan subfolders too
        logger: receives a warning for each file that is skipped
            because there is no loader for its suffix

    Returns:
        the documents of all files, in path order

    Raises:
        FileNotFoundError, NotADirectoryError: for an invalid folder
    """
    folder = Path(source)
    if not folder.exists():
        raise FileNotFoundError(f"Folder does not exist: {source}")
    if not folder.is_dir():
        raise NotADirectoryError(f"Not a folder: {source}")

    if loaders is None:
        loaders = DEFAULT_LOADERS
    loaders = {suffix.lower(): func for suffix, func in loaders.items()}

    files = folder.rglob("*") if recursive else folder.glob("*")
    documents: list[Document] = []
    for file in sorted(f for f in files if f.is_file()):
        loader = loaders.get(file.suffix.lower())
        if loader is None:
            logger.warning(f"No loader for {file}, skipped")
            continue
        documents.extend(loader(file))

    logger.info(
        f"Loaded {len(documents)} documents from {folder}"
    )
    return documents
