# pyright: reportUnusedImport=false
# flake8: noqa

from .files import (
    create_document,
    load_text,
    load_pdf,
    load_directory,
)
from .web import (
    load_web_page,
    load_git_repository,
    make_repository_filter,
)
