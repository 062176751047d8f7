"""Tests for page and tab ordering."""

import itertools
import random
from dataclasses import dataclass
from pathlib import Path

import pytest

from docnav.core.frontmatter import PageMetadata
from docnav.core.ordering import (
    PageOrderer,
    TabOrderResolver,
    is_index_page,
    page_sort_key,
)
from docnav.core.scanner import ContentPage
from docnav.core.types import PagePath


def _meta(**positions: int | None) -> dict[PagePath, PageMetadata]:
    return {
        PagePath(f"tab/{name}"): PageMetadata(sidebar_position=position)
        for name, position in positions.items()
    }


class TestIsIndexPage:
    """Tests for is_index_page()."""

    def test__index_paths__detected(self) -> None:
        """Detect index pages at any depth."""
        assert is_index_page("index")
        assert is_index_page("en/ai/tab/index")

    def test__index_like_names__not_detected(self) -> None:
        """Names merely ending in "index" are not index pages."""
        assert not is_index_page("en/ai/tab/reindex")
        assert not is_index_page("en/ai/index/guide")


class TestPageOrdererOrder:
    """Tests for PageOrderer.order()."""

    def test__spec_example__index_then_positions(self) -> None:
        """Order index, then by explicit position."""
        metadata = _meta(index=None, guide=2, intro=1)

        assert PageOrderer.order(metadata) == ["tab/index", "tab/intro", "tab/guide"]

    def test__index_beats_any_position(self) -> None:
        """Index page is first even when siblings have lower positions."""
        metadata = _meta(index=99, a=-100, b=0)

        assert PageOrderer.order(metadata)[0] == "tab/index"

    @pytest.mark.parametrize("position", [-5, 0, 1, 1000])
    def test__positioned_before_unpositioned(self, position: int) -> None:
        """Any explicit position sorts before a missing one."""
        metadata = _meta(aaa=None, zzz=position)

        assert PageOrderer.order(metadata) == ["tab/zzz", "tab/aaa"]

    def test__equal_positions__fall_back_to_path(self) -> None:
        """Ties on position are broken by path."""
        metadata = _meta(beta=1, alpha=1, gamma=0)

        assert PageOrderer.order(metadata) == ["tab/gamma", "tab/alpha", "tab/beta"]

    def test__unpositioned__lexicographic(self) -> None:
        """Pages without position sort by full path string."""
        metadata = {
            PagePath("tab/b/x"): PageMetadata(),
            PagePath("tab/a/y"): PageMetadata(),
            PagePath("tab/B"): PageMetadata(),
        }

        assert PageOrderer.order(metadata) == ["tab/B", "tab/a/y", "tab/b/x"]

    def test__sorting_twice__idempotent(self) -> None:
        """Sorting an already sorted list does not change it."""
        metadata = _meta(index=None, c=None, b=3, a=3, d=-1, e=None)

        once = PageOrderer.order(metadata)
        twice = PageOrderer.order({path: metadata[path] for path in once})

        assert once == twice

    def test__input_order__does_not_matter(self) -> None:
        """Every permutation of the input yields the same order."""
        metadata = _meta(index=None, c=None, b=3, a=1, d=None)
        expected = PageOrderer.order(metadata)

        for permutation in itertools.permutations(metadata):
            shuffled = {path: metadata[path] for path in permutation}
            assert PageOrderer.order(shuffled) == expected


class TestPageSortKey:
    """Tests for the strict total order behind page_sort_key()."""

    def test__strict_total_order(self) -> None:
        """Keys are irreflexive, antisymmetric and transitive over distinct paths."""
        rng = random.Random(7)
        pages = [
            (f"tab/p{i}", rng.choice([None, -1, 0, 1, 2]))
            for i in range(12)
        ] + [("tab/index", rng.choice([None, 5]))]
        keys = [page_sort_key(path, position) for path, position in pages]

        for a in keys:
            assert not a < a
        for a, b in itertools.permutations(keys, 2):
            assert (a < b) != (b < a)
        for a, b, c in itertools.permutations(keys, 3):
            if a < b and b < c:
                assert a < c


class TestPageOrdererSort:
    """Tests for PageOrderer.sort()."""

    @pytest.mark.asyncio
    async def test__reads_metadata_from_files(self, content_root: Path, write_page) -> None:
        """Read positions from frontmatter before ordering."""
        pages = [
            ContentPage(PagePath("tab/guide"), write_page("tab/guide.mdx", position=2)),
            ContentPage(PagePath("tab/index"), write_page("tab/index.mdx")),
            ContentPage(PagePath("tab/intro"), write_page("tab/intro.mdx", position=1)),
            ContentPage(PagePath("tab/appendix"), write_page("tab/appendix.md")),
        ]

        result = await PageOrderer().sort(pages)

        assert result == ["tab/index", "tab/intro", "tab/guide", "tab/appendix"]

    @pytest.mark.asyncio
    async def test__unreadable_page__treated_as_unpositioned(self, content_root: Path, write_page) -> None:
        """A page that cannot be read sorts as if it had no position."""
        pages = [
            ContentPage(PagePath("tab/gone"), content_root / "tab" / "gone.md"),
            ContentPage(PagePath("tab/zeta"), write_page("tab/zeta.md", position=0)),
        ]

        result = await PageOrderer().sort(pages)

        assert result == ["tab/zeta", "tab/gone"]


@dataclass
class _Tab:
    slug: str


class TestTabOrderResolver:
    """Tests for TabOrderResolver.sort()."""

    def test__configured_first_then_alphabetical(self) -> None:
        """Configured slugs come first in order, the rest alphabetically."""
        resolver = TabOrderResolver({"product": ["b", "a"]})

        result = resolver.sort("product", [_Tab("a"), _Tab("c"), _Tab("b")])

        assert [tab.slug for tab in result] == ["b", "a", "c"]

    def test__unconfigured_product__alphabetical(self) -> None:
        """Products without a list use slug order."""
        resolver = TabOrderResolver({"other": ["z"]})

        result = resolver.sort("product", [_Tab("z"), _Tab("m"), _Tab("a")])

        assert [tab.slug for tab in result] == ["a", "m", "z"]

    def test__configured_but_missing_slugs__ignored(self) -> None:
        """Listed slugs that were not discovered do not appear."""
        resolver = TabOrderResolver({"product": ["missing", "y"]})

        result = resolver.sort("product", [_Tab("x"), _Tab("y")])

        assert [tab.slug for tab in result] == ["y", "x"]

    def test__duplicate_configured_slug__first_position_wins(self) -> None:
        """A slug listed twice keeps its first position."""
        resolver = TabOrderResolver({"product": ["a", "b", "a"]})

        result = resolver.sort("product", [_Tab("b"), _Tab("a")])

        assert [tab.slug for tab in result] == ["a", "b"]

    def test__no_configuration__alphabetical(self) -> None:
        """Default resolver sorts by slug."""
        result = TabOrderResolver().sort("product", [_Tab("b"), _Tab("a")])

        assert [tab.slug for tab in result] == ["a", "b"]
