"""Content watcher for watch mode.

Monitors the content root and regenerates navigation whenever a page
file is added, changed or removed.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path

from watchfiles import Change, awatch

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.mdx"]


class NavigationWatcher:
    """Re-runs a navigation build when content files change.

    One rebuild is triggered per batch of filesystem changes, however
    many files the batch touches.
    """

    def __init__(
        self,
        content_root: Path,
        rebuild: Callable[[], Awaitable[None]],
        watch_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            content_root: Directory to watch for changes
            rebuild: Coroutine function regenerating navigation
            watch_patterns: Glob patterns to watch (default: markdown pages)
        """
        self._content_root = content_root.resolve()
        self._rebuild = rebuild
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS

    async def run(self) -> None:
        """Watch until cancelled."""
        async for changes in awatch(self._content_root):
            if not self._is_relevant(changes):
                continue

            logger.info("Content changed, rebuilding navigation")
            try:
                await self._rebuild()
            except Exception as e:
                logger.error(f"Navigation rebuild failed: {e}")

    def _is_relevant(self, changes: Iterable[tuple[Change, str]]) -> bool:
        """Check whether any change touches a watched page."""
        return any(self._matches_patterns(Path(path_str)) for _, path_str in changes)

    def _matches_patterns(self, path: Path) -> bool:
        """Check if a path matches any watch pattern.

        Args:
            path: Path to check

        Returns:
            True if path matches any pattern
        """
        try:
            relative = path.relative_to(self._content_root)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            if relative.match(pattern):
                return True
        return False
