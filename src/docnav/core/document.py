"""Persisted navigation document.

The document is a JSON object whose `navigation.languages` list holds one
node per language. Only built languages are replaced; everything else in
the document is preserved as loaded.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from docnav.core.scanner import ContentScanner

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Navigation document cannot be loaded or resolved."""


class NavigationDocument:
    """Navigation document loaded from disk.

    Loaded once at the start of a run and written once at the end.
    """

    def __init__(self, data: dict[str, Any], path: Path | None = None) -> None:
        """Initialize document.

        Args:
            data: Parsed JSON object
            path: File the document was loaded from
        """
        self._data = data
        self._path = path

    @classmethod
    def load(cls, path: Path) -> NavigationDocument:
        """Load document from a JSON file.

        Args:
            path: Path to the document

        Returns:
            NavigationDocument instance

        Raises:
            DocumentError: If the file cannot be read or is not a JSON object
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentError(f"Cannot read {path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise DocumentError(f"{path} must contain a JSON object")

        document = cls(data, path)
        document._language_list()
        return document

    @property
    def data(self) -> dict[str, Any]:
        """Underlying JSON object."""
        return self._data

    @property
    def path(self) -> Path | None:
        """File the document was loaded from."""
        return self._path

    def languages(self) -> list[str]:
        """Return locale codes of existing language nodes, in document order."""
        return list(self.language_nodes())

    def language_nodes(self) -> dict[str, dict[str, Any]]:
        """Return existing language nodes keyed by locale code."""
        nodes: dict[str, dict[str, Any]] = {}
        for node in self._language_list():
            if isinstance(node, dict) and isinstance(node.get("language"), str):
                nodes.setdefault(node["language"], node)
        return nodes

    def merge(
        self,
        nodes: Iterable[dict[str, Any]],
        *,
        site_navbar: Mapping[str, Mapping[str, Any]] | None = None,
        fallback_language: str = "en",
        style: str | None = None,
        stale: Iterable[str] = (),
    ) -> None:
        """Merge built language nodes into the document.

        Built languages replace their previous node in place; new languages
        are appended. Stale languages are removed. The top-level `navbar`
        and `css` are only set when absent.

        Args:
            nodes: Built language nodes
            site_navbar: Locale code to top-level navbar object
            fallback_language: Locale used when no navbar matches
            style: Stylesheet entry for `css`
            stale: Languages whose content directory no longer exists
        """
        built = {node["language"]: node for node in nodes}
        removed = set(stale) - built.keys()

        languages: list[Any] = []
        for node in self._language_list():
            language = node.get("language") if isinstance(node, dict) else None
            if isinstance(language, str) and language in built:
                languages.append(built.pop(language))
            elif isinstance(language, str) and language in removed:
                logger.warning(f"Removing language {language}: content directory is gone")
            else:
                languages.append(node)
        languages.extend(built.values())

        navigation = self._data.get("navigation")
        if not isinstance(navigation, dict):
            navigation = {}
            self._data["navigation"] = navigation
        navigation["languages"] = languages

        if not self._data.get("navbar") and site_navbar:
            navbar = self._site_navbar(languages, site_navbar, fallback_language)
            if navbar is not None:
                self._data["navbar"] = json.loads(json.dumps(navbar))

        if not self._data.get("css") and style:
            self._data["css"] = style

    def dumps(self) -> str:
        """Serialize the document as written to disk."""
        return json.dumps(self._data, indent=2, ensure_ascii=False) + "\n"

    def save(self, path: Path | None = None) -> Path:
        """Write the whole document.

        Args:
            path: Target file, defaults to the file it was loaded from

        Returns:
            Path written to
        """
        target = path or self._path
        if target is None:
            raise DocumentError("No path to save the navigation document to")
        target.write_text(self.dumps(), encoding="utf-8")
        return target

    def _language_list(self) -> list[Any]:
        navigation = self._data.get("navigation")
        if navigation is None:
            return []
        if not isinstance(navigation, dict):
            raise DocumentError("navigation must be an object")

        languages = navigation.get("languages")
        if languages is None:
            return []
        if not isinstance(languages, list):
            raise DocumentError("navigation.languages must be a list")
        return languages

    @staticmethod
    def _site_navbar(
        languages: list[Any],
        site_navbar: Mapping[str, Mapping[str, Any]],
        fallback_language: str,
    ) -> Mapping[str, Any] | None:
        """Pick the top-level navbar for the default language."""
        nodes = [node for node in languages if isinstance(node, dict)]
        default = next((node for node in nodes if node.get("default")), None)
        if default is None and nodes:
            default = nodes[0]

        language = default.get("language") if default else None
        navbar = site_navbar.get(language) if isinstance(language, str) else None
        if navbar is None:
            navbar = site_navbar.get(fallback_language)
        return navbar


def parse_language_list(value: str) -> list[str]:
    """Split a comma-separated locale list, dropping empty entries and duplicates."""
    languages: list[str] = []
    for item in value.split(","):
        language = item.strip()
        if language and language not in languages:
            languages.append(language)
    return languages


async def resolve_languages(
    document: NavigationDocument,
    scanner: ContentScanner,
    explicit: str | None = None,
) -> list[str]:
    """Resolve the locales to build.

    Priority: explicit list, locales already in the document, language
    directories of the content root.

    Args:
        document: Loaded navigation document
        scanner: Scanner rooted at the content root
        explicit: Comma-separated locale list from the command line

    Returns:
        Non-empty list of locale codes

    Raises:
        DocumentError: If no locale can be resolved
    """
    if explicit:
        languages = parse_language_list(explicit)
    else:
        languages = document.languages()
        if not languages:
            try:
                listing = await scanner.list_dir(scanner.content_root)
            except OSError as e:
                raise DocumentError(f"Cannot list content root {scanner.content_root}: {e}") from e
            languages = [language_dir.name for language_dir in listing.dirs]

    if not languages:
        raise DocumentError("No languages to build")

    logger.info(f"Resolved languages: {', '.join(languages)}")
    return languages
