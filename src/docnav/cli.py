"""CLI interface for Docnav.

Command-line tool for generating site navigation from a content tree.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from docnav.build import BuildResult, build_navigation
from docnav.config import Config
from docnav.core.document import DocumentError


@click.group()
def cli() -> None:
    """Docnav - navigation from folders, in every language."""


@cli.command()
@click.option(
    "--docs",
    "-d",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Navigation document to update (overrides config, default: docs.json)",
)
@click.option(
    "--content-root",
    "-r",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Content root with one directory per language (overrides config)",
)
@click.option(
    "--languages",
    "-l",
    default=None,
    help="Comma-separated languages to build (default: from document or content root)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print generated language nodes without writing anything",
)
@click.option(
    "--update-titles",
    is_flag=True,
    help="Replace untranslated page titles before building",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)
@click.option(
    "--watch",
    "-w",
    is_flag=True,
    help="Rebuild whenever content files change",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def build(
    docs: Path | None,
    content_root: Path | None,
    languages: str | None,
    dry_run: bool,
    update_titles: bool,
    config_path: Path | None,
    watch: bool,
    verbose: bool,
) -> None:
    """Generate navigation and merge it into the navigation document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = Config.load(config_path).with_overrides(
            docs=docs,
            content_root=content_root,
        )
        result = asyncio.run(
            build_navigation(
                config,
                languages=languages,
                dry_run=dry_run,
                update_titles=update_titles,
            ),
        )
    except (DocumentError, ValueError, OSError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    _print_result(result, dry_run=dry_run, update_titles=update_titles)

    if watch:
        click.echo(f"Watching {config.paths.content_root} for changes...")
        try:
            asyncio.run(
                _watch(config, languages, dry_run=dry_run, update_titles=update_titles),
            )
        except KeyboardInterrupt:
            click.echo("Stopped watching")


async def _watch(
    config: Config,
    languages: str | None,
    *,
    dry_run: bool,
    update_titles: bool,
) -> None:
    """Rebuild navigation on every relevant content change.

    Args:
        config: Application configuration
        languages: Comma-separated locale list overriding discovery
        dry_run: Build without writing anything
        update_titles: Rewrite untranslated titles before each build
    """
    from docnav.live import NavigationWatcher

    async def rebuild() -> None:
        result = await build_navigation(
            config,
            languages=languages,
            dry_run=dry_run,
            update_titles=update_titles,
        )
        _print_result(result, dry_run=dry_run, update_titles=update_titles)

    watcher = NavigationWatcher(config.paths.content_root, rebuild)
    await watcher.run()


def _print_result(result: BuildResult, *, dry_run: bool, update_titles: bool) -> None:
    """Print the outcome of a build.

    Args:
        result: Build result
        dry_run: Whether nothing was written
        update_titles: Whether title updates were requested
    """
    if dry_run:
        click.echo(json.dumps(result.nodes, indent=2, ensure_ascii=False))
        for update in result.title_updates:
            click.echo(
                f'[DRY RUN] {update.source}: "{update.old_title}" -> "{update.new_title}"',
                err=True,
            )
        return

    click.echo(
        click.style(f"Navigation updated: {result.written}", fg="green"),
    )
    if update_titles:
        click.echo(f"Page titles updated: {len(result.title_updates)}")


if __name__ == "__main__":
    cli()
