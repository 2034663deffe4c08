"""
Auto-page discovery: turn component files under ``pages/`` into pages.
"""

import logging
import os
from pathlib import Path
from typing import Generator, List, Optional, Union

import anyio
import anyio.to_thread

from site_forge.config.settings import DiscoveryConfig
from site_forge.discovery.paths import derive_route
from site_forge.models.page import Page

logger = logging.getLogger(__name__)

PRIVATE_PREFIX = "_"


def is_private(relative_path: Path) -> bool:
    """True if any segment of a pages-relative path starts with an underscore."""
    return any(part.startswith(PRIVATE_PREFIX) for part in relative_path.parts)


def is_template(relative_path: Path, template_marker: str) -> bool:
    """True if a pages-relative path contains the template marker."""
    return template_marker in relative_path.as_posix()


class PageDiscovery:
    """Discovers page component files in a pages directory tree."""

    def __init__(self, pages_dir: Union[str, Path], config: Optional[DiscoveryConfig] = None):
        """
        Initialize discovery for a pages directory.

        Args:
            pages_dir: The pages directory; it does not have to exist
            config: Discovery settings (extensions, template marker)
        """
        self.pages_dir = Path(pages_dir).resolve()
        self.config = config or DiscoveryConfig()
        self._extensions = set(self.config.extensions)

    def discover_files(self) -> Generator[Path, None, None]:
        """
        Discover eligible page component files recursively.

        Yields:
            Absolute paths of files with a page extension that are neither
            private nor templates

        Notes:
            - A missing or empty pages directory yields nothing
            - Extensions match case-sensitively: `About.JS` is not a page
            - Files are yielded in sorted order, but callers should not rely on it
        """
        if not self.pages_dir.is_dir():
            logger.debug(f"No pages directory at {self.pages_dir}")
            return

        candidates = []
        for root, dirs, files in os.walk(self.pages_dir):
            root_path = Path(root)
            for file in files:
                file_path = root_path / file
                if file_path.suffix in self._extensions:
                    candidates.append(file_path)

        candidates.sort()

        for file_path in candidates:
            relative = file_path.relative_to(self.pages_dir)
            if is_private(relative):
                logger.debug(f"Skipping private page file: {relative}")
                continue
            if is_template(relative, self.config.template_marker):
                logger.debug(f"Skipping page template: {relative}")
                continue
            yield file_path

    def iter_pages(self) -> Generator[Page, None, None]:
        """
        Lazily build a Page for every discovered file.

        Raises:
            InvalidPathError: If a file cannot be mapped to a route
        """
        for file_path in self.discover_files():
            yield Page(
                path=derive_route(self.pages_dir, file_path),
                component=str(file_path),
                context={},
            )

    def list_pages(self) -> List[Page]:
        """
        Get list of all discovered pages (convenience method).
        """
        return list(self.iter_pages())


async def discover_pages(
    pages_dir: Union[str, Path],
    config: Optional[DiscoveryConfig] = None,
) -> List[Page]:
    """
    Scan a pages directory in a worker thread and return the discovered pages.

    Args:
        pages_dir: The pages directory
        config: Discovery settings

    Returns:
        Discovered pages; empty when the directory is missing or empty
    """
    discovery = PageDiscovery(pages_dir, config)
    pages = await anyio.to_thread.run_sync(discovery.list_pages)
    logger.info(f"Discovered {len(pages)} page(s) in {discovery.pages_dir}")
    return pages