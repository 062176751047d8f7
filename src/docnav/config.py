"""Configuration management for Docnav.

Supports TOML configuration format with auto-discovery. All override
tables (display names, tab order, navbars, title mapping) live here and
are handed to the builder explicitly.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from docnav.core.display import DEFAULT_GROUP_NAMES
from docnav.core.navigation import NavbarLink

CONFIG_FILENAME = "docnav.toml"


@dataclass
class PathsConfig:
    """Input and output locations."""

    docs: Path = field(default_factory=lambda: Path("docs.json"))
    content_root: Path = field(default_factory=lambda: Path("."))


@dataclass
class SiteConfig:
    """Document-wide settings."""

    style: str | None = "/public/styles.css"
    fallback_language: str = "en"


@dataclass
class NavigationConfig:
    """Override tables used while building navigation."""

    display_names: dict[str, dict[str, str]] = field(default_factory=dict)
    default_group_names: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_GROUP_NAMES))
    tab_order: dict[str, list[str]] = field(default_factory=dict)
    navbar: dict[str, list[NavbarLink]] = field(default_factory=dict)
    site_navbar: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class TitlesConfig:
    """Title updater configuration."""

    language: str = "en"
    mapping: dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Application configuration."""

    paths: PathsConfig
    site: SiteConfig
    navigation: NavigationConfig
    titles: TitlesConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(
            paths=PathsConfig(),
            site=SiteConfig(),
            navigation=NavigationConfig(),
            titles=TitlesConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            paths=cls._parse_paths(data.get("paths"), config_dir),
            site=cls._parse_site(data.get("site")),
            navigation=NavigationConfig(
                display_names=cls._parse_display_names(data.get("display_names")),
                default_group_names={
                    **DEFAULT_GROUP_NAMES,
                    **_string_table(data.get("default_group_names"), "default_group_names"),
                },
                tab_order=cls._parse_tab_order(data.get("tab_order")),
                navbar=cls._parse_navbar(data.get("navbar")),
                site_navbar=cls._parse_site_navbar(data.get("site_navbar")),
            ),
            titles=cls._parse_titles(data.get("titles")),
            config_path=path,
        )

    @classmethod
    def _parse_paths(cls, data: object, config_dir: Path) -> PathsConfig:
        """Parse paths section; relative paths resolve against config_dir."""
        if data is None:
            return PathsConfig(
                docs=config_dir / "docs.json",
                content_root=config_dir,
            )

        if not isinstance(data, dict):
            raise ValueError("paths section must be a dictionary")

        docs = data.get("docs", "docs.json")
        if not isinstance(docs, str):
            raise ValueError("paths.docs must be a string")

        content_root = data.get("content_root", ".")
        if not isinstance(content_root, str):
            raise ValueError("paths.content_root must be a string")

        return PathsConfig(
            docs=config_dir / docs,
            content_root=config_dir / content_root,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        style = data.get("style", SiteConfig.style)
        if style is not None and not isinstance(style, str):
            raise ValueError("site.style must be a string")

        fallback_language = data.get("fallback_language", "en")
        if not isinstance(fallback_language, str):
            raise ValueError("site.fallback_language must be a string")

        return SiteConfig(style=style or None, fallback_language=fallback_language)

    @classmethod
    def _parse_display_names(cls, data: object) -> dict[str, dict[str, str]]:
        """Parse per-locale slug label overrides."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("display_names section must be a dictionary")

        return {
            language: _string_table(table, f"display_names.{language}")
            for language, table in data.items()
        }

    @classmethod
    def _parse_tab_order(cls, data: object) -> dict[str, list[str]]:
        """Parse product slug to ordered tab slugs."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("tab_order section must be a dictionary")

        tab_order: dict[str, list[str]] = {}
        for product, slugs in data.items():
            if not isinstance(slugs, list) or not all(isinstance(s, str) for s in slugs):
                raise ValueError(f"tab_order.{product} must be a list of strings")
            tab_order[product] = list(slugs)
        return tab_order

    @classmethod
    def _parse_navbar(cls, data: object) -> dict[str, list[NavbarLink]]:
        """Parse per-locale navbar link lists."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("navbar section must be a dictionary")

        return {
            language: _parse_links(links, f"navbar.{language}")
            for language, links in data.items()
        }

    @classmethod
    def _parse_site_navbar(cls, data: object) -> dict[str, dict[str, Any]]:
        """Parse per-locale top-level navbar objects."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("site_navbar section must be a dictionary")

        site_navbar: dict[str, dict[str, Any]] = {}
        for language, navbar in data.items():
            if not isinstance(navbar, dict):
                raise ValueError(f"site_navbar.{language} must be a dictionary")
            parsed = dict(navbar)
            if "links" in parsed:
                parsed["links"] = _parse_links(parsed["links"], f"site_navbar.{language}.links")
            site_navbar[language] = parsed
        return site_navbar

    @classmethod
    def _parse_titles(cls, data: object) -> TitlesConfig:
        if data is None:
            return TitlesConfig()

        if not isinstance(data, dict):
            raise ValueError("titles section must be a dictionary")

        language = data.get("language", "en")
        if not isinstance(language, str):
            raise ValueError("titles.language must be a string")

        return TitlesConfig(
            language=language,
            mapping=_string_table(data.get("mapping"), "titles.mapping"),
        )

    def with_overrides(
        self,
        *,
        docs: Path | None = None,
        content_root: Path | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            docs: Override paths.docs
            content_root: Override paths.content_root

        Returns:
            New Config instance with overrides applied
        """
        if docs is None and content_root is None:
            return self

        paths = replace(
            self.paths,
            docs=docs if docs is not None else self.paths.docs,
            content_root=content_root if content_root is not None else self.paths.content_root,
        )
        return replace(self, paths=paths)


def _string_table(data: object, name: str) -> dict[str, str]:
    """Validate a table of string values."""
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(f"{name} must be a dictionary")

    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"{name}.{key} must be a string")
    return dict(data)


def _parse_links(data: object, name: str) -> list[NavbarLink]:
    """Validate a list of {label, href} links."""
    if not isinstance(data, list):
        raise ValueError(f"{name} must be a list")

    links: list[NavbarLink] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"{name} items must be dictionaries")
        label = item.get("label")
        href = item.get("href")
        if not isinstance(label, str) or not isinstance(href, str):
            raise ValueError(f"{name} items must have string label and href")
        links.append({"label": label, "href": href})
    return links
