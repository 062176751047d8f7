"""Page title updater.

Replaces CJK frontmatter titles in a translated content tree with mapped
titles, or with a title generated from the file name when unmapped.
"""

import asyncio
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from docnav.core.display import title_from_slug
from docnav.core.frontmatter import parse_frontmatter, replace_title
from docnav.core.scanner import ContentPage

logger = logging.getLogger(__name__)

CJK_PATTERN = re.compile(r"[\u4e00-\u9fa5]")


@dataclass(frozen=True)
class TitleUpdate:
    """Title change applied (or planned) for a page."""

    source: Path
    old_title: str
    new_title: str


def contains_cjk(text: str) -> bool:
    """Check whether text contains CJK ideographs."""
    return CJK_PATTERN.search(text) is not None


def _read_page(source: Path) -> str:
    """Read a page keeping its line endings as they are."""
    with source.open(encoding="utf-8-sig", newline="") as f:
        return f.read()


class TitleUpdater:
    """Rewrites untranslated page titles."""

    def __init__(
        self,
        mapping: Mapping[str, str] | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        """Initialize updater.

        Args:
            mapping: Source title to translated title
            dry_run: Compute updates without writing files
        """
        self._mapping = mapping or {}
        self._dry_run = dry_run

    def translate(self, title: str, source: Path) -> str:
        """Return the replacement title for a page."""
        return self._mapping.get(title) or title_from_slug(source.stem)

    async def update_pages(self, pages: Iterable[ContentPage]) -> list[TitleUpdate]:
        """Update titles of several pages.

        Args:
            pages: Pages to check

        Returns:
            Updates in page order
        """
        results = await asyncio.gather(*(self.update(page.source) for page in pages))
        return [update for update in results if update is not None]

    async def update(self, source: Path) -> TitleUpdate | None:
        """Update the title of a single page.

        Args:
            source: Page file

        Returns:
            TitleUpdate if the title needs replacing, None otherwise
        """
        try:
            content = await asyncio.to_thread(_read_page, source)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {source}: {e}")
            return None

        title = parse_frontmatter(content).title
        if not title or not contains_cjk(title):
            return None

        update = TitleUpdate(source=source, old_title=title, new_title=self.translate(title, source))
        if self._dry_run:
            return update

        try:
            await asyncio.to_thread(
                source.write_text,
                replace_title(content, update.new_title),
                encoding="utf-8",
                newline="",
            )
        except OSError as e:
            logger.warning(f"Cannot update title of {source}: {e}")
            return None

        logger.debug(f"Updated title of {source}: {update.old_title!r} -> {update.new_title!r}")
        return update
