"""Frontmatter metadata extraction.

Reads the leading `---` delimited metadata block of a content page.
Only `title` and `sidebar_position` are of interest; everything else
in the block is ignored.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DELIMITER = "---"

CLOSING_PATTERN = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)

TITLE_PATTERN = re.compile(r"^title:[ \t]*(.+?)[ \t]*(?=\r?$)", re.MULTILINE)

POSITION_PATTERN = re.compile(r"^sidebar_position:[ \t]*(.+?)[ \t]*(?=\r?$)", re.MULTILINE)

LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+")

QUOTES = "\"'"


@dataclass(frozen=True)
class PageMetadata:
    """Ordering metadata of a page. None means "not specified"."""

    title: str | None = None
    sidebar_position: int | None = None


@dataclass(frozen=True)
class _Block:
    """Location of the metadata block inside page content."""

    text: str
    start: int
    end: int


def _find_block(content: str) -> _Block | None:
    """Locate the metadata block body.

    Args:
        content: Full page content

    Returns:
        _Block with the body text and its offsets, None if there is no
        well-formed block at the start of the content
    """
    if not content.startswith(DELIMITER):
        return None

    start = content.find("\n")
    if start == -1:
        return None
    start += 1

    closing = CLOSING_PATTERN.search(content, start)
    if closing is None:
        return None

    return _Block(text=content[start : closing.start()], start=start, end=closing.start())


def _unquote(value: str) -> str:
    """Strip one layer of matching quotes and surrounding whitespace."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTES:
        value = value[1:-1]
    return value.strip()


def _parse_position(value: str) -> int | None:
    """Parse the leading integer of a sidebar_position value."""
    match = LEADING_INT_PATTERN.match(_unquote(value))
    if match is None:
        return None
    return int(match.group(0))


def parse_frontmatter(content: str) -> PageMetadata:
    """Extract page metadata from content.

    Args:
        content: Full page content

    Returns:
        PageMetadata; fields are None when absent or unparseable
    """
    block = _find_block(content)
    if block is None:
        return PageMetadata()

    title: str | None = None
    title_match = TITLE_PATTERN.search(block.text)
    if title_match:
        title = _unquote(title_match.group(1))

    position: int | None = None
    position_match = POSITION_PATTERN.search(block.text)
    if position_match:
        position = _parse_position(position_match.group(1))

    return PageMetadata(title=title, sidebar_position=position)


def replace_title(content: str, new_title: str) -> str:
    """Set the frontmatter title of a page.

    Prepends a metadata block when the content has none. Other lines of an
    existing block are kept as they are.

    Args:
        content: Full page content
        new_title: Title to store

    Returns:
        Updated content
    """
    newline = "\r\n" if "\r\n" in content else "\n"
    title_line = f"title: {new_title}"

    block = _find_block(content)
    if block is None:
        return f"{DELIMITER}{newline}{title_line}{newline}{DELIMITER}{newline}{newline}{content}"

    if TITLE_PATTERN.search(block.text):
        new_block = TITLE_PATTERN.sub(lambda _: title_line, block.text, count=1)
    else:
        new_block = f"{title_line}{newline}{block.text}"

    return content[: block.start] + new_block + content[block.end :]


class FrontmatterReader:
    """Reads page metadata from files.

    A page that cannot be read yields empty metadata instead of an error.
    """

    async def read(self, source: Path) -> PageMetadata:
        """Read metadata of a page file.

        Args:
            source: Page file path

        Returns:
            PageMetadata parsed from the file, empty if unreadable
        """
        try:
            content = await asyncio.to_thread(source.read_text, encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read metadata from {source}: {e}")
            return PageMetadata()

        return parse_frontmatter(content)
