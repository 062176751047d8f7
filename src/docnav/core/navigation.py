"""Navigation tree builder.

Builds the language -> product -> tab -> group -> page tree from a
content directory and merges it into a previously persisted language node.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypedDict

from docnav.core.display import DisplayNameResolver
from docnav.core.ordering import PageOrderer, TabOrderResolver
from docnav.core.scanner import ContentScanner
from docnav.core.types import PagePath

logger = logging.getLogger(__name__)

# Language node fields rewritten on every build; other fields are carried over.
REBUILT_FIELDS = ("navbar", "products")


class NavbarLink(TypedDict):
    """Navigation bar link."""

    label: str
    href: str


class GroupNodeDict(TypedDict):
    """Dictionary representation of a group."""

    group: str
    pages: list[str]


class TabNodeDict(TypedDict):
    """Dictionary representation of a tab."""

    tab: str
    groups: list[GroupNodeDict]


class ProductNodeDict(TypedDict):
    """Dictionary representation of a product."""

    product: str
    tabs: list[TabNodeDict]


@dataclass
class GroupNode:
    """Named list of ordered pages."""

    display_name: str
    slug: str
    pages: list[PagePath] = field(default_factory=list)

    def to_dict(self) -> GroupNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {"group": self.display_name, "pages": list(self.pages)}


@dataclass
class TabNode:
    """Tab of a product. The slug is only used while building."""

    display_name: str
    slug: str
    groups: list[GroupNode] = field(default_factory=list)

    def to_dict(self) -> TabNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tab": self.display_name,
            "groups": [group.to_dict() for group in self.groups],
        }


@dataclass
class ProductNode:
    """Product with its ordered tabs."""

    display_name: str
    slug: str
    tabs: list[TabNode] = field(default_factory=list)

    def to_dict(self) -> ProductNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "product": self.display_name,
            "tabs": [tab.to_dict() for tab in self.tabs],
        }


def merge_language_node(
    previous: Mapping[str, Any] | None,
    language: str,
    navbar: Sequence[NavbarLink],
    products: Iterable[ProductNode],
) -> dict[str, Any]:
    """Merge freshly built fields into a previously persisted language node.

    Fields not owned by the builder keep their value and position. Stale
    `navbar` and `products` are dropped and written again at the end.

    Args:
        previous: Existing language node, None if the language is new
        language: Locale code
        navbar: Navbar links for the language
        products: Built products

    Returns:
        New language node; `previous` is not modified
    """
    node: dict[str, Any] = {
        key: value
        for key, value in (previous or {}).items()
        if key not in REBUILT_FIELDS
    }
    node["language"] = language
    node["navbar"] = [dict(link) for link in navbar]
    node["products"] = [product.to_dict() for product in products]
    return node


class NavigationTreeBuilder:
    """Builds per-language navigation from a content root.

    Expected layout: <content_root>/<language>/<product>/<tab>/..., where a
    tab holds pages directly and/or group directories of pages.
    """

    def __init__(
        self,
        content_root: Path,
        *,
        display_names: DisplayNameResolver | None = None,
        tab_order: TabOrderResolver | None = None,
        navbar: Mapping[str, Sequence[NavbarLink]] | None = None,
        fallback_language: str = "en",
        scanner: ContentScanner | None = None,
        orderer: PageOrderer | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            content_root: Directory containing one subdirectory per language
            display_names: Resolver for slug labels
            tab_order: Resolver for tab order per product
            navbar: Locale code to navbar links
            fallback_language: Locale whose navbar is used when a language has none
            scanner: Content scanner, defaults to one rooted at content_root
            orderer: Page orderer
        """
        self._content_root = content_root
        self._display_names = display_names or DisplayNameResolver()
        self._tab_order = tab_order or TabOrderResolver()
        self._navbar = navbar or {}
        self._fallback_language = fallback_language
        self._scanner = scanner or ContentScanner(content_root)
        self._orderer = orderer or PageOrderer()

    @property
    def content_root(self) -> Path:
        """Directory containing one subdirectory per language."""
        return self._content_root

    def navbar_for(self, language: str) -> list[NavbarLink]:
        """Return navbar links for a language, falling back to the default locale."""
        links = self._navbar.get(language)
        if links is None:
            links = self._navbar.get(self._fallback_language, [])
        return list(links)

    async def build(
        self,
        languages: Iterable[str],
        previous: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Build language nodes for several languages.

        Languages whose directory is missing are skipped with a warning.

        Args:
            languages: Locale codes in output order
            previous: Existing language nodes keyed by locale code

        Returns:
            Built language nodes, in input order
        """
        previous = previous or {}
        nodes: list[dict[str, Any]] = []
        for language in languages:
            language_dir = self._content_root / language
            if not language_dir.is_dir():
                logger.warning(f"Skipping language {language}: {language_dir} is not a directory")
                continue
            try:
                node = await self.build_language(language, previous.get(language))
            except OSError as e:
                logger.warning(f"Skipping language {language}: {e}")
                continue
            nodes.append(node)
        return nodes

    async def build_language(
        self,
        language: str,
        previous: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Build one language node and merge it with its previous state.

        Args:
            language: Locale code
            previous: Existing language node, if any

        Returns:
            Merged language node
        """
        products = await self.build_products(language)
        logger.info(f"Built {len(products)} products for {language}")
        return merge_language_node(previous, language, self.navbar_for(language), products)

    async def build_products(self, language: str) -> list[ProductNode]:
        """Build the ordered product list of a language.

        Args:
            language: Locale code

        Returns:
            Non-empty products ordered by slug

        Raises:
            OSError: If the language directory cannot be listed
        """
        listing = await self._scanner.list_dir(self._content_root / language)

        products: list[ProductNode] = []
        for product_dir in sorted(listing.dirs, key=lambda d: d.name):
            product = await self._build_product(product_dir, language)
            if product is not None:
                products.append(product)
        return products

    async def _build_product(self, product_dir: Path, language: str) -> ProductNode | None:
        """Build a product, None when none of its tabs has pages."""
        slug = product_dir.name
        listing = await self._scanner.list_dir(product_dir)

        tabs: list[TabNode] = []
        for tab_dir in listing.dirs:
            tab = await self._build_tab(tab_dir, language)
            if tab is not None:
                tabs.append(tab)

        if not tabs:
            logger.debug(f"Skipping empty product {product_dir}")
            return None

        return ProductNode(
            display_name=self._display_names.resolve(slug, language),
            slug=slug,
            tabs=self._tab_order.sort(slug, tabs),
        )

    async def _build_tab(self, tab_dir: Path, language: str) -> TabNode | None:
        """Build a tab, None when it has no pages at any depth."""
        slug = tab_dir.name
        listing = await self._scanner.list_dir(tab_dir)

        candidates = await asyncio.gather(
            *(self._build_group(group_dir, language) for group_dir in listing.dirs),
        )
        groups = sorted(
            (group for group in candidates if group is not None),
            key=lambda group: (group.display_name, group.slug),
        )

        direct_pages = self._scanner.pages_in(listing)
        if direct_pages:
            default_group = GroupNode(
                display_name=self._display_names.default_group_name(language),
                slug="",
                pages=await self._orderer.sort(direct_pages),
            )
            groups.insert(0, default_group)

        if not groups:
            logger.debug(f"Skipping empty tab {tab_dir}")
            return None

        return TabNode(
            display_name=self._display_names.resolve(slug, language),
            slug=slug,
            groups=groups,
        )

    async def _build_group(self, group_dir: Path, language: str) -> GroupNode | None:
        """Build a group from every page below a directory."""
        pages = await self._scanner.collect_pages(group_dir)
        if not pages:
            return None

        return GroupNode(
            display_name=self._display_names.resolve(group_dir.name, language),
            slug=group_dir.name,
            pages=await self._orderer.sort(pages),
        )
