"""
Page registry: the path-keyed collection of every page known to a build.

A registry is never edited in place. Each merge phase of the bootstrap
produces a new registry from the previous one plus a batch of incoming
pages.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Union

from site_forge.models.page import Page, coerce_page

logger = logging.getLogger(__name__)

PageLike = Union[Page, Mapping[str, Any]]


class MergePolicy(str, Enum):
    """How a merge treats an incoming page whose path is already registered."""

    LAST_WINS = "last_wins"
    KEEP_EXISTING = "keep_existing"


class PageRegistry(Mapping[str, Page]):
    """
    Insertion-ordered, read-only mapping of route path to Page.

    Duplicate paths in the constructor input resolve to the last one seen;
    the key keeps the position of its first insertion.
    """

    __slots__ = ("_pages",)

    def __init__(self, pages: Iterable[PageLike] = ()):
        self._pages: Dict[str, Page] = {}
        for value in pages:
            page = coerce_page(value)
            self._pages[page.path] = page

    def __getitem__(self, path: str) -> Page:
        return self._pages[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __repr__(self) -> str:
        return f"PageRegistry({list(self._pages)!r})"

    @classmethod
    def _from_validated(cls, pages: Dict[str, Page]) -> "PageRegistry":
        registry = cls()
        registry._pages = pages
        return registry

    @property
    def paths(self) -> List[str]:
        """Registered routes in insertion order."""
        return list(self._pages)

    def pages(self) -> List[Page]:
        """Registered pages in insertion order."""
        return list(self._pages.values())

    def merge(
        self,
        incoming: Iterable[PageLike],
        policy: MergePolicy = MergePolicy.LAST_WINS,
    ) -> "PageRegistry":
        """Return a new registry with ``incoming`` merged in. See :func:`merge_pages`."""
        return merge_pages(self, incoming, policy)


def merge_pages(
    existing: Mapping[str, Page],
    incoming: Iterable[PageLike],
    policy: MergePolicy = MergePolicy.LAST_WINS,
) -> PageRegistry:
    """
    Merge a batch of pages into a registry.

    Args:
        existing: Registry (or any path -> Page mapping) to merge into; not modified
        incoming: Pages to add, applied in order
        policy: LAST_WINS replaces registered paths, KEEP_EXISTING leaves them alone

    Returns:
        A new PageRegistry

    Notes:
        - Paths absent from ``incoming`` are kept unchanged
        - Duplicates inside ``incoming`` always resolve to the later page,
          whatever the policy; the policy only guards paths from ``existing``
    """
    merged: Dict[str, Page] = dict(existing)
    protected = set(existing) if policy is MergePolicy.KEEP_EXISTING else set()

    for value in incoming:
        page = coerce_page(value)
        if page.path in protected:
            logger.info(f"Keeping registered page '{page.path}', ignoring {page.component}")
            continue
        previous = merged.get(page.path)
        if previous is not None and page.path in existing and previous is existing[page.path]:
            logger.warning(
                f"Page '{page.path}' overridden: {previous.component} -> {page.component}"
            )
        merged[page.path] = page

    return PageRegistry._from_validated(merged)


def as_registry(value: Union[PageRegistry, Mapping[str, PageLike], Iterable[PageLike]]) -> PageRegistry:
    """
    Convert a hook's returned pages back into a PageRegistry.

    Accepts a PageRegistry, a mapping whose values are pages, or an
    iterable of pages.

    Raises:
        InvalidPageError: If any page fails validation
    """
    if isinstance(value, PageRegistry):
        return value
    if isinstance(value, Mapping):
        return PageRegistry(value.values())
    return PageRegistry(value)
