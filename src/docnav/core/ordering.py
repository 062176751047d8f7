"""Ordering rules for pages and tabs.

Pages: index page first, then pages with an explicit sidebar_position
(ascending), then the rest; ties fall back to the path string.

Tabs: slugs listed in the product's configured order first, in that
order, then unlisted slugs alphabetically.
"""

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, TypeVar

from docnav.core.frontmatter import FrontmatterReader, PageMetadata
from docnav.core.scanner import ContentPage
from docnav.core.types import PagePath

INDEX_NAME = "index"


def is_index_page(path: str) -> bool:
    """Check whether a page path points at an index page."""
    return path == INDEX_NAME or path.endswith(f"/{INDEX_NAME}")


def page_sort_key(path: str, position: int | None) -> tuple[bool, bool, int, str]:
    """Build the sort key of a page.

    Args:
        path: Page path
        position: Explicit sidebar_position, None if not specified

    Returns:
        Tuple ordering index pages first, then positioned pages by
        position, then by path
    """
    return (
        not is_index_page(path),
        position is None,
        position if position is not None else 0,
        path,
    )


class PageOrderer:
    """Sorts sibling pages using their frontmatter positions.

    All sibling metadata is read before sorting starts.
    """

    def __init__(self, reader: FrontmatterReader | None = None) -> None:
        self._reader = reader or FrontmatterReader()

    async def sort(self, pages: Iterable[ContentPage]) -> list[PagePath]:
        """Read metadata for pages and return their paths in order.

        Args:
            pages: Pages to order

        Returns:
            Ordered list of page paths
        """
        pages = list(pages)
        metadata = await asyncio.gather(*(self._reader.read(page.source) for page in pages))
        return self.order({page.path: meta for page, meta in zip(pages, metadata)})

    @staticmethod
    def order(metadata: Mapping[PagePath, PageMetadata]) -> list[PagePath]:
        """Order page paths given already-read metadata.

        Args:
            metadata: Metadata for each page path

        Returns:
            Ordered list of page paths
        """
        return sorted(
            metadata,
            key=lambda path: page_sort_key(path, metadata[path].sidebar_position),
        )


class SlugItem(Protocol):
    """Anything carrying a slug."""

    @property
    def slug(self) -> str: ...


T = TypeVar("T", bound=SlugItem)


class TabOrderResolver:
    """Orders a product's tabs by configured priority."""

    def __init__(self, tab_order: Mapping[str, Sequence[str]] | None = None) -> None:
        """Initialize resolver.

        Args:
            tab_order: Product slug to ordered list of tab slugs
        """
        self._tab_order = tab_order or {}

    def sort(self, product_slug: str, tabs: Iterable[T]) -> list[T]:
        """Order tabs for a product.

        Args:
            product_slug: Product directory slug
            tabs: Discovered tabs

        Returns:
            Tabs with configured slugs first in configured order, the
            remainder sorted by slug
        """
        priorities: dict[str, int] = {}
        for i, slug in enumerate(self._tab_order.get(product_slug, ())):
            priorities.setdefault(slug, i)
        unlisted = len(self._tab_order.get(product_slug, ()))

        return sorted(
            tabs,
            key=lambda tab: (priorities.get(tab.slug, unlisted), tab.slug),
        )
