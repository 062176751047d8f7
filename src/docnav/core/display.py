"""Locale-aware display names for directory slugs."""

import re
from collections.abc import Mapping

DEFAULT_GROUP_NAME = "Default"

DEFAULT_GROUP_NAMES = {
    "en": DEFAULT_GROUP_NAME,
    "zh-Hans": "默认",
}

SLUG_SEPARATOR_PATTERN = re.compile(r"[-_]+")


def title_from_slug(slug: str) -> str:
    """Convert a slug to Title Case words.

    Only the first character of each segment is changed, so existing
    capitals inside a segment are kept (e.g., "chatBI-tools" -> "ChatBI Tools").

    Args:
        slug: Directory or file name without extension

    Returns:
        Segments split on hyphens/underscores, capitalized, space-joined
    """
    segments = [s for s in SLUG_SEPARATOR_PATTERN.split(slug) if s]
    return " ".join(s[:1].upper() + s[1:] for s in segments)


class DisplayNameResolver:
    """Resolves display labels for slugs in a given locale.

    Explicit overrides win; anything else gets the generic Title Case
    label, which for non-Latin content signals a missing override.
    """

    def __init__(
        self,
        overrides: Mapping[str, Mapping[str, str]] | None = None,
        default_group_names: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            overrides: Locale code to (slug to label) table
            default_group_names: Locale code to label of the default group
        """
        self._overrides = overrides or {}
        self._default_group_names = default_group_names or {}

    def resolve(self, slug: str, language: str) -> str:
        """Return the display name of a slug.

        Args:
            slug: Directory slug
            language: Target locale code

        Returns:
            Override label if configured, generated label otherwise
        """
        if not slug:
            return slug

        override = self._overrides.get(language, {}).get(slug)
        if override is not None:
            return override

        return title_from_slug(slug)

    def default_group_name(self, language: str) -> str:
        """Return the label of the group holding a tab's direct pages."""
        if language in self._default_group_names:
            return self._default_group_names[language]
        return DEFAULT_GROUP_NAMES.get(language, DEFAULT_GROUP_NAME)
