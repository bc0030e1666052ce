"""
Loading of documents from web pages and source code repositories.

`load_web_page` downloads a static HTML page and extracts its text,
optionally only from the elements matching a CSS selector. JavaScript
is not executed, so content generated in the browser is not seen.

`load_git_repository` clones a git repository (or reads an existing
clone) and returns a document for each file, with the file path in
the metadata. Files are selected by `make_repository_filter`.

Example:
    ```python
    headings = load_web_page("https://example.com/post", selector="h1")
    docs = load_git_repository(
        "https://github.com/langchain-ai/langchain",
        "/tmp/langchain",
        ignore_paths=["*.md", "*.json", "node_modules"],
    )
    ```
"""

import os
from collections.abc import Callable, Sequence
from fnmatch import fnmatch
from pathlib import Path

from bs4 import BeautifulSoup
from langchain_core.documents import Document
from langchain_community.document_loaders import (
    GitLoader,
    WebBaseLoader,
)

from lcnotes.utils.logging import get_logger, LoggerBase

logger: LoggerBase = get_logger(__name__)

DEFAULT_IGNORE_PATHS: tuple[str, ...] = (
    "*.md",
    "*.json",
    "node_modules",
    ".git",
)


def select_text(soup: BeautifulSoup, selector: str) -> str:
    """The text of the elements matching a CSS selector, one element
    per line."""
    return "\n".join(
        element.get_text(strip=True) for element in soup.select(selector)
    )


def create_web_loader(url: str) -> WebBaseLoader:
    return WebBaseLoader(web_path=url)


def load_web_page(
    url: str, selector: str | None = None
) -> list[Document]:
    """
    Load the text of a web page.

    Args:
        url: the address of the page
        selector: if given, a CSS selector (such as 'h1' or
            'article p'). Only the text of the matching elements is
            kept.

    Returns:
        a list with one document, with the url as 'source' in the
            metadata
    """
    logger.info(f"Loading {url}")
    loader = create_web_loader(url)
    if selector is None:
        return loader.load()

    soup = loader.scrape()
    return [
        Document(
            page_content=select_text(soup, selector),
            metadata={'source': url, 'selector': selector},
        )
    ]


def make_repository_filter(
    repo_path: str | Path,
    recursive: bool = False,
    ignore_paths: Sequence[str] = DEFAULT_IGNORE_PATHS,
) -> Callable[[str], bool]:
    """
    Create a predicate selecting the files of a repository clone.

    Args:
        repo_path: the folder of the clone
        recursive: if False, only files at the top level are kept
        ignore_paths: glob patterns. A file is excluded if any
            component of its path relative to the clone matches a
            pattern, so that 'node_modules' excludes a whole folder
            and '*.md' all markdown files.

    Returns:
        a function taking a file path and returning True if the file
            is to be loaded
    """
    root = str(repo_path)

    def _filter(file_path: str) -> bool:
        relative = Path(os.path.relpath(file_path, root))
        if not recursive and len(relative.parts) > 1:
            return False
        return not any(
            fnmatch(part, pattern)
            for part in relative.parts
            for pattern in ignore_paths
        )

    return _filter


def load_git_repository(
    clone_url: str | None,
    repo_path: str | Path,
    branch: str = "main",
    recursive: bool = False,
    ignore_paths: Sequence[str] = DEFAULT_IGNORE_PATHS,
) -> list[Document]:
    """
    Load the files of a git repository.

    Args:
        clone_url: the url of the repository. If None, repo_path must
            be an existing clone.
        repo_path: where the repository is (or will be) cloned
        branch: the branch to check out
        recursive: load files in subfolders too. Large repositories
            give many documents.
        ignore_paths: glob patterns of paths to exclude

    Returns:
        a document per file, with file_path, file_name and file_type
            in the metadata
    """
    loader = GitLoader(
        repo_path=str(repo_path),
        clone_url=clone_url,
        branch=branch,
        file_filter=make_repository_filter(
            repo_path, recursive, ignore_paths
        ),
    )
    documents = loader.load()
    logger.info(
        f"Loaded {len(documents)} files from {clone_url or repo_path}"
    )
    return documents
