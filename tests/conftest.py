"""Shared test fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from docnav.config import (
    Config,
    NavigationConfig,
    PathsConfig,
    SiteConfig,
    TitlesConfig,
)

WritePage = Callable[..., Path]


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create an empty content root."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_page(content_root: Path) -> WritePage:
    """Return a helper writing a page below the content root.

    Frontmatter is only written when title or position is given.
    """

    def _write(
        relative: str,
        *,
        title: str | None = None,
        position: int | str | None = None,
        body: str = "Content.\n",
    ) -> Path:
        path = content_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = []
        if title is not None:
            lines.append(f"title: {title}")
        if position is not None:
            lines.append(f"sidebar_position: {position}")
        frontmatter = "---\n" + "\n".join(lines) + "\n---\n\n" if lines else ""
        path.write_text(frontmatter + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def docs_file(tmp_path: Path) -> Path:
    """Create a navigation document with unrelated settings."""
    path = tmp_path / "docs.json"
    path.write_text(
        json.dumps({"name": "Docs", "theme": "mint"}, indent=2) + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def test_config(content_root: Path, docs_file: Path) -> Config:
    """Create a test configuration pointing at tmp_path locations."""
    return Config(
        paths=PathsConfig(docs=docs_file, content_root=content_root),
        site=SiteConfig(),
        navigation=NavigationConfig(
            display_names={"zh-Hans": {"ai": "AI", "tutorial": "教程"}},
            default_group_names={"en": "Default", "zh-Hans": "默认"},
            tab_order={"ai": ["tutorial", "faq"]},
            navbar={
                "en": [{"label": "GitHub", "href": "https://github.com/example/docs"}],
                "zh-Hans": [{"label": "代码", "href": "https://github.com/example/docs"}],
            },
            site_navbar={
                "en": {"links": [{"label": "Support", "href": "mailto:help@example.com"}]},
            },
        ),
        titles=TitlesConfig(language="en", mapping={"教程": "Tutorial"}),
    )
