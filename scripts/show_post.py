#!/usr/bin/env python3
"""
Show a single blog post.

Fetches one post directly (the collection cache is not involved) and prints
its metadata and derived fields.

Usage:
    python scripts/show_post.py hello-world --root site/assets --language en
    python scripts/show_post.py hello-world --root site/assets --html
"""

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.content import create_content_cache, load_content_settings, post_image_url
from folio.contexts.content.logger import setup_content_logger
from folio.contexts.locale import LocaleStore

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(help="Show a single blog post", add_completion=False)


async def load_post(settings, identifier: str, language: str):
    async with create_content_cache(settings) as cache:
        return await cache.get_one(identifier, language)


@app.command()
def main(
    identifier: Annotated[str, typer.Argument(help="Post identifier (e.g., hello-world)")],
    language: Annotated[
        Optional[str],
        typer.Option("--language", "-l", help="Language code (default: detected locale)"),
    ] = None,
    html: Annotated[bool, typer.Option("--html", help="Also print the rendered HTML")] = False,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", help="Local content tree", exists=True, file_okay=False, resolve_path=True),
    ] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Remote content URL")] = None,
):
    """Load one post and display it."""
    identifier = identifier.removesuffix(".md")
    # An explicit --root takes precedence over a CONTENT_BASE_URL from the environment
    settings = load_content_settings(
        content_root=str(root) if root else None,
        base_url=base_url if base_url or not root else "",
    )
    if language is None:
        language = LocaleStore.from_environment().locale.value

    log_dir = LOGS_PATH / f"show_post_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    setup_content_logger(log_dir, source=settings.base_url or settings.content_root or "", console_level="WARNING")

    try:
        post = asyncio.run(load_post(settings, identifier, language))
    except ValueError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    if post is None:
        typer.echo(f"ERROR: Post not found or unreadable: {language}/{identifier}", err=True)
        raise typer.Exit(1)

    typer.echo("=== Metadata ===")
    typer.echo(f"  id: {post.id}")
    typer.echo(f"  slug: {post.slug}")
    typer.echo(f"  title: {post.title}")
    typer.echo(f"  date: {post.date.isoformat()}")
    typer.echo(f"  description: {post.description}")
    typer.echo(f"  tags: {', '.join(post.tags) or '(none)'}")
    typer.echo(f"  author: {post.author or '(none)'}")
    typer.echo(f"  reading time: {post.reading_time} min")
    typer.echo(f"  image: {post_image_url(post, settings.fallback_image_url)}")

    if html:
        typer.echo("\n=== Content ===")
        typer.echo(post.content)


if __name__ == "__main__":
    app()
