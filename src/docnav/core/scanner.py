"""Content directory scanner.

Lists content directories while honoring ignore rules and collects
page files at any depth using an explicit work stack.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from docnav.core.types import PagePath

logger = logging.getLogger(__name__)

PAGE_EXTENSIONS = frozenset({".md", ".mdx"})
IGNORED_DIR_NAMES = frozenset({".git", ".github", "node_modules", "__MACOSX"})
IGNORED_FILE_NAMES = frozenset({".ds_store"})
HIDDEN_PREFIX = "."


@dataclass(frozen=True)
class ContentPage:
    """Content page located on disk."""

    path: PagePath
    source: Path


@dataclass
class DirectoryListing:
    """Visible entries of a single directory."""

    dirs: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)


def is_ignored(name: str, *, is_dir: bool) -> bool:
    """Check whether a directory entry is hidden or reserved.

    Args:
        name: Entry name
        is_dir: Whether the entry is a directory

    Returns:
        True if the entry must be skipped
    """
    if name.startswith(HIDDEN_PREFIX):
        return True
    if is_dir:
        return name in IGNORED_DIR_NAMES
    return name.lower() in IGNORED_FILE_NAMES


class ContentScanner:
    """Scans a content root for directories and pages.

    Directory listings run in a worker thread so the event loop is not
    blocked. Symlinks are not followed.
    """

    def __init__(
        self,
        content_root: Path,
        *,
        extensions: frozenset[str] = PAGE_EXTENSIONS,
    ) -> None:
        """Initialize scanner.

        Args:
            content_root: Root directory that page paths are relative to
            extensions: Lowercase file extensions treated as pages
        """
        self._content_root = content_root
        self._extensions = extensions

    @property
    def content_root(self) -> Path:
        """Root directory that page paths are relative to."""
        return self._content_root

    def is_page(self, file_path: Path) -> bool:
        """Check whether a file name has a page extension."""
        return file_path.suffix.lower() in self._extensions

    def page_path(self, file_path: Path) -> PagePath:
        """Convert a page file location to its PagePath.

        Args:
            file_path: Page file under the content root

        Returns:
            Forward-slash path relative to the content root, without extension
        """
        relative = file_path.relative_to(self._content_root)
        return PagePath(relative.with_suffix("").as_posix())

    async def list_dir(self, directory: Path) -> DirectoryListing:
        """List visible entries of a directory.

        Args:
            directory: Directory to list

        Returns:
            DirectoryListing with subdirectories and files, sorted by name

        Raises:
            OSError: If the directory cannot be listed
        """
        return await asyncio.to_thread(self._list_dir_sync, directory)

    async def collect_pages(self, directory: Path) -> list[ContentPage]:
        """Collect every page below a directory.

        Traverses depth-first with an explicit stack. The result is in
        discovery order; ordering is the caller's responsibility.

        Args:
            directory: Directory to traverse

        Returns:
            List of ContentPage, one per unique PagePath
        """
        pages: dict[PagePath, ContentPage] = {}
        stack = [directory]

        while stack:
            current = stack.pop()
            try:
                listing = await self.list_dir(current)
            except OSError as e:
                logger.warning(f"Cannot list directory {current}: {e}")
                continue

            stack.extend(listing.dirs)
            for file_path in listing.files:
                if self.is_page(file_path):
                    self._add_page(pages, file_path)

        return list(pages.values())

    def pages_in(self, listing: DirectoryListing) -> list[ContentPage]:
        """Return the pages found directly in a listing."""
        pages: dict[PagePath, ContentPage] = {}
        for file_path in listing.files:
            if self.is_page(file_path):
                self._add_page(pages, file_path)
        return list(pages.values())

    def _add_page(self, pages: dict[PagePath, ContentPage], file_path: Path) -> None:
        """Register a page, preferring .mdx when both extensions exist."""
        path = self.page_path(file_path)
        existing = pages.get(path)
        if existing is not None:
            logger.warning(
                f"Duplicate page {path}: {existing.source.name} and {file_path.name}",
            )
            if existing.source.suffix.lower() == ".mdx":
                return
        pages[path] = ContentPage(path=path, source=file_path)

    def _list_dir_sync(self, directory: Path) -> DirectoryListing:
        listing = DirectoryListing()
        with os.scandir(directory) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                if entry.is_dir(follow_symlinks=False):
                    if not is_ignored(entry.name, is_dir=True):
                        listing.dirs.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    if not is_ignored(entry.name, is_dir=False):
                        listing.files.append(Path(entry.path))
        return listing
