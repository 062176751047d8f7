"""Navigation build entry point.

Wires configuration into the builder and runs one full build:
load document, resolve languages, optionally fix titles, build every
language, merge, write.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docnav.config import Config
from docnav.core.display import DisplayNameResolver
from docnav.core.document import NavigationDocument, resolve_languages
from docnav.core.navigation import NavigationTreeBuilder
from docnav.core.ordering import TabOrderResolver
from docnav.core.scanner import ContentScanner
from docnav.core.titles import TitleUpdate, TitleUpdater

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a navigation build."""

    document: NavigationDocument
    nodes: list[dict[str, Any]]
    title_updates: list[TitleUpdate] = field(default_factory=list)
    written: Path | None = None


def create_builder(config: Config) -> NavigationTreeBuilder:
    """Create a navigation builder from configuration.

    Args:
        config: Application configuration

    Returns:
        Configured NavigationTreeBuilder
    """
    navigation = config.navigation
    return NavigationTreeBuilder(
        config.paths.content_root,
        display_names=DisplayNameResolver(
            navigation.display_names,
            navigation.default_group_names,
        ),
        tab_order=TabOrderResolver(navigation.tab_order),
        navbar=navigation.navbar,
        fallback_language=config.site.fallback_language,
    )


async def build_navigation(
    config: Config,
    *,
    languages: str | None = None,
    dry_run: bool = False,
    update_titles: bool = False,
) -> BuildResult:
    """Run a full navigation build.

    The document is only written after every language has been built.

    Args:
        config: Application configuration
        languages: Comma-separated locale list overriding discovery
        dry_run: Build without writing anything
        update_titles: Rewrite untranslated titles before building

    Returns:
        BuildResult with the merged document and built nodes

    Raises:
        DocumentError: If the document or the language list cannot be resolved
    """
    document = NavigationDocument.load(config.paths.docs)
    scanner = ContentScanner(config.paths.content_root)
    resolved = await resolve_languages(document, scanner, languages)

    title_updates: list[TitleUpdate] = []
    if update_titles:
        title_updates = await _update_titles(config, scanner, resolved, dry_run=dry_run)

    builder = create_builder(config)
    nodes = await builder.build(resolved, document.language_nodes())
    content_root = config.paths.content_root
    stale = [language for language in resolved if not (content_root / language).is_dir()]

    document.merge(
        nodes,
        site_navbar=config.navigation.site_navbar,
        fallback_language=config.site.fallback_language,
        style=config.site.style,
        stale=stale,
    )

    written = None if dry_run else document.save()
    return BuildResult(
        document=document,
        nodes=nodes,
        title_updates=title_updates,
        written=written,
    )


async def _update_titles(
    config: Config,
    scanner: ContentScanner,
    languages: list[str],
    *,
    dry_run: bool,
) -> list[TitleUpdate]:
    """Rewrite untranslated titles of the configured title language."""
    language = config.titles.language
    language_dir = config.paths.content_root / language
    if language not in languages or not language_dir.is_dir():
        logger.info(f"Title update skipped: {language} is not being built")
        return []

    pages = await scanner.collect_pages(language_dir)
    updater = TitleUpdater(config.titles.mapping, dry_run=dry_run)
    return await updater.update_pages(pages)
