"""Renderers for directory, file and symlink entries."""

from .config import DirViewConfig, FileReadMode, FileViewConfig, LinkViewConfig, ViewConfig
from .dir import render_directory
from .file import render_file
from .link import render_link
from .result import FileViewResult, ViewerKind, ViewResult

__all__ = [
    "ViewConfig",
    "DirViewConfig",
    "FileReadMode",
    "FileViewConfig",
    "LinkViewConfig",
    "ViewResult",
    "FileViewResult",
    "ViewerKind",
    "render_directory",
    "render_file",
    "render_link",
]
