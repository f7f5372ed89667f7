#!/usr/bin/env python3
"""
List blog posts for a language.

Loads the full collection through the content cache (HTTP or static files)
and prints one line per post, newest first.

Usage:
    # Posts from a local content tree
    python scripts/list_posts.py --root site/assets --language en

    # Posts from a deployed site, filtered
    python scripts/list_posts.py --base-url https://example.com/assets --tag python
    python scripts/list_posts.py --root site/assets --search angular

    # Only the tag index
    python scripts/list_posts.py --root site/assets --tags
"""

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.content import (
    all_tags,
    create_content_cache,
    filter_by_tag,
    load_content_settings,
    search,
)
from folio.contexts.content.logger import setup_content_logger
from folio.contexts.locale import LocaleStore
from folio.utils.timestamp import format_post_date

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(help="List blog posts for a language", add_completion=False)


async def load_posts(settings, language: str):
    async with create_content_cache(settings) as cache:
        return await cache.get_all(language)


@app.command()
def main(
    language: Annotated[
        Optional[str],
        typer.Option("--language", "-l", help="Language code (default: detected locale)"),
    ] = None,
    tag: Annotated[Optional[str], typer.Option("--tag", "-t", help="Only posts with this tag")] = None,
    query: Annotated[
        Optional[str], typer.Option("--search", "-s", help="Case-insensitive text search")
    ] = None,
    tags_only: Annotated[bool, typer.Option("--tags", help="Print the tag index instead")] = False,
    relative: Annotated[bool, typer.Option("--relative", help="Show dates as relative ages")] = False,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", help="Local content tree", exists=True, file_okay=False, resolve_path=True),
    ] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Remote content URL")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """List posts, newest first."""
    # An explicit --root takes precedence over a CONTENT_BASE_URL from the environment
    settings = load_content_settings(
        content_root=str(root) if root else None,
        base_url=base_url if base_url or not root else "",
    )
    if language is None:
        language = LocaleStore.from_environment().locale.value

    log_dir = LOGS_PATH / f"list_posts_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    setup_content_logger(
        log_dir,
        source=settings.base_url or settings.content_root or "",
        console_level="DEBUG" if verbose else "WARNING",
    )

    try:
        posts = asyncio.run(load_posts(settings, language))
    except ValueError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    if tags_only:
        for name in all_tags(posts):
            typer.echo(name)
        return

    if tag:
        posts = filter_by_tag(posts, tag)
    if query:
        posts = search(posts, query)

    if not posts:
        typer.echo("No posts found.")
        return

    for post in posts:
        date_text = format_post_date(post.date, relative=relative)
        typer.echo(f"{date_text:<12} {post.slug:<40} {post.reading_time:>3} min  {post.title}")
    typer.echo(f"\n{len(posts)} posts")


if __name__ == "__main__":
    app()
