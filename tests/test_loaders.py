"""Test document loaders"""

# pyright: basic

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bs4 import BeautifulSoup
from langchain_core.documents import Document

from lcnotes.loaders.files import (
    create_document,
    load_directory,
    load_pdf,
    load_text,
)
from lcnotes.loaders.web import (
    create_web_loader,
    load_web_page,
    make_repository_filter,
    select_text,
)
from lcnotes.utils.logging import LoglistLogger


class TestFileLoaders(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self.tmp.name)
        (self.folder / "a.txt").write_text("first file", encoding="utf-8")
        (self.folder / "notes.md").write_text("# notes", encoding="utf-8")
        sub = self.folder / "sub"
        sub.mkdir()
        (sub / "b.TXT").write_text("second file", encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()

    def test_create_document(self):
        doc = create_document("Hello World!", source="ABC title")
        self.assertEqual(doc.page_content, "Hello World!")
        self.assertEqual(doc.metadata, {'source': "ABC title"})

    def test_load_text(self):
        docs = load_text(self.folder / "a.txt")
        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0].page_content, "first file")
        self.assertEqual(
            docs[0].metadata['source'], str(self.folder / "a.txt")
        )

    def test_load_text_missing(self):
        with self.assertRaises(FileNotFoundError):
            load_text(self.folder / "missing.txt")

    def test_load_text_folder(self):
        with self.assertRaises(IsADirectoryError):
            load_text(self.folder)

    def test_load_directory(self):
        logger = LoglistLogger()
        docs = load_directory(self.folder, logger=logger)
        self.assertEqual(
            [d.page_content for d in docs], ["first file", "second file"]
        )
        warnings = [log for log in logger.get_logs(1) if "notes.md" in log]
        self.assertEqual(len(warnings), 1)

    def test_load_directory_not_recursive(self):
        docs = load_directory(
            self.folder, recursive=False, logger=LoglistLogger()
        )
        self.assertEqual([d.page_content for d in docs], ["first file"])

    def test_load_directory_custom_loader(self):
        def load_markdown(path: Path) -> list[Document]:
            return [create_document(path.read_text(), kind="markdown")]

        docs = load_directory(
            self.folder,
            loaders={'.md': load_markdown},
            logger=LoglistLogger(),
        )
        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0].metadata, {'kind': "markdown"})

    def test_load_directory_invalid(self):
        with self.assertRaises(FileNotFoundError):
            load_directory(self.folder / "missing")
        with self.assertRaises(NotADirectoryError):
            load_directory(self.folder / "a.txt")


class TestPdfLoader(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.pdf = Path(self.tmp.name) / "book.pdf"
        self.pdf.write_bytes(b"%PDF-1.4")
        self.pages = [
            Document(
                page_content=f"page {i}",
                metadata={'source': str(self.pdf), 'page': i},
            )
            for i in range(3)
        ]

    def tearDown(self):
        self.tmp.cleanup()

    def _load(self, split_pages: bool) -> list[Document]:
        with patch("lcnotes.loaders.files.PDFPlumberLoader") as loader:
            loader.return_value.load.return_value = self.pages
            docs = load_pdf(self.pdf, split_pages=split_pages)
        loader.assert_called_once_with(str(self.pdf))
        return docs

    def test_split_pages(self):
        docs = self._load(split_pages=True)
        self.assertEqual(len(docs), 3)
        self.assertEqual(docs[1].metadata['page'], 1)

    def test_merged(self):
        docs = self._load(split_pages=False)
        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0].page_content, "page 0\n\npage 1\n\npage 2")
        self.assertEqual(
            docs[0].metadata,
            {'source': str(self.pdf), 'total_pages': 3},
        )


class TestRepositoryFilter(unittest.TestCase):

    def setUp(self):
        self.repo = os.path.join("tmp", "repo")

    def _path(self, *parts: str) -> str:
        return os.path.join(self.repo, *parts)

    def test_top_level_only(self):
        keep = make_repository_filter(self.repo, recursive=False)
        self.assertTrue(keep(self._path("setup.py")))
        self.assertFalse(keep(self._path("src", "main.py")))

    def test_recursive(self):
        keep = make_repository_filter(self.repo, recursive=True)
        self.assertTrue(keep(self._path("src", "main.py")))

    def test_ignore_patterns(self):
        keep = make_repository_filter(
            self.repo,
            recursive=True,
            ignore_paths=["*.md", "*.json", "node_modules"],
        )
        self.assertFalse(keep(self._path("README.md")))
        self.assertFalse(keep(self._path("package.json")))
        self.assertFalse(keep(self._path("node_modules", "lib", "x.js")))
        self.assertTrue(keep(self._path("src", "index.ts")))


PAGE = """
<html><head><title>Notes</title></head>
<body>
  <h1>First heading</h1>
  <article><p>Body text</p><p>More text</p></article>
  <h1>Second heading</h1>
</body></html>
"""


class TestWebLoader(unittest.TestCase):

    def test_loader(self):
        loader = create_web_loader("https://example.com")
        self.assertEqual(loader.web_paths, ["https://example.com"])

    def test_select_text(self):
        soup = BeautifulSoup(PAGE, "html.parser")
        self.assertEqual(
            select_text(soup, "h1"), "First heading\nSecond heading"
        )
        self.assertEqual(
            select_text(soup, "article p"), "Body text\nMore text"
        )
        self.assertEqual(select_text(soup, "table"), "")

    def test_load_with_selector(self):
        with patch("lcnotes.loaders.web.WebBaseLoader") as loader:
            loader.return_value.scrape.return_value = BeautifulSoup(
                PAGE, "html.parser"
            )
            docs = load_web_page("https://example.com", selector="h1")
        loader.return_value.load.assert_not_called()
        self.assertEqual(len(docs), 1)
        self.assertEqual(
            docs[0].page_content, "First heading\nSecond heading"
        )
        self.assertEqual(
            docs[0].metadata,
            {'source': "https://example.com", 'selector': "h1"},
        )

    def test_load_whole_page(self):
        page = [Document(page_content="all", metadata={})]
        with patch("lcnotes.loaders.web.WebBaseLoader") as loader:
            loader.return_value.load.return_value = page
            docs = load_web_page("https://example.com")
        self.assertEqual(docs, page)
        loader.return_value.scrape.assert_not_called()


if __name__ == "__main__":
    unittest.main()
