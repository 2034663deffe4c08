"""
Route derivation for page component files.

Examples (pages root ``/site/pages``):

    /site/pages/about.js          -> "about"
    /site/pages/blog/post-1.js    -> "blog/post-1"
    /site/pages/blog/index.js     -> "blog/"
    /site/pages/index.js          -> "/"
"""

import os
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Union

from site_forge.exceptions import InvalidPathError

INDEX_NAME = "index"
ROOT_ROUTE = "/"


def _posix(path: Union[str, Path]) -> PurePosixPath:
    return PurePosixPath(os.fspath(path).replace("\\", "/"))


def derive_route(pages_root: Union[str, Path], file_path: Union[str, Path]) -> str:
    """
    Convert a page file path to its canonical route.

    Args:
        pages_root: Pages directory the file lives under
        file_path: Page component file

    Returns:
        Route string; separators are always '/', case is preserved

    Raises:
        InvalidPathError: If file_path is not a descendant of pages_root
    """
    return _derive_route(os.fspath(pages_root), os.fspath(file_path))


@lru_cache(maxsize=4096)
def _derive_route(pages_root: str, file_path: str) -> str:
    try:
        relative = _posix(file_path).relative_to(_posix(pages_root))
    except ValueError:
        raise InvalidPathError(file_path, pages_root, "not under the pages root") from None

    parts = relative.parts
    if not parts:
        raise InvalidPathError(file_path, pages_root, "path is the pages root itself")
    if any(part in (".", "..") for part in parts):
        raise InvalidPathError(file_path, pages_root, "path escapes the pages root")

    *dirs, filename = parts
    stem = PurePosixPath(filename).stem

    if stem == INDEX_NAME:
        return "/".join(dirs) + "/" if dirs else ROOT_ROUTE

    return "/".join([*dirs, stem])
