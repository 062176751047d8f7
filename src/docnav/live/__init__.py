"""Watch mode for regenerating navigation on content changes."""

from docnav.live.watch import NavigationWatcher

__all__ = ["NavigationWatcher"]
