"""
Per-language post collection cache.

ContentCache is the only stateful component of the content pipeline. For
each language it holds:

- a completed collection, created on the first successful load and never
  replaced or invalidated for the lifetime of the instance
- a pending load task, present only while a load is running

Concurrent get_all() calls for the same language share one pending task, so
a language's manifest is fetched at most once at a time. Check-and-register
happens without an await in between, which is what makes this safe on a
single event loop.

Usage:
    async with create_content_cache() as cache:
        posts = await cache.get_all("en")
        post = await cache.get_one("hello-world", "en")
"""

import asyncio
import time
from collections import Counter
from typing import Dict, List, Tuple

from folio.contexts.content.content_loader import ContentLoader
from folio.contexts.content.exceptions import ContentFetchError
from folio.contexts.content.logger import (
    _log_debug,
    _log_warning,
    log_collection_result,
    log_manifest_loaded,
)
from folio.contexts.content.markup_renderer import MarkupRenderer
from folio.contexts.content.post_data_structure import Language, Post
from folio.contexts.content.settings import ContentSettings, load_content_settings
from folio.contexts.content.transport import create_transport

PostCollection = Tuple[Post, ...]


def dedupe_identifiers(identifiers: List[str]) -> Tuple[List[str], List[str]]:
    """
    Drop repeated manifest identifiers, keeping first occurrences in order.

    Returns:
        (unique identifiers, repeated identifiers)
    """
    counts = Counter(identifiers)
    unique = list(counts)
    duplicates = sorted(identifier for identifier, count in counts.items() if count > 1)
    return unique, duplicates


def sort_newest_first(posts) -> PostCollection:
    """Sort posts by date descending; equal dates keep their input order."""
    return tuple(sorted(posts, key=lambda post: post.date, reverse=True))


class ContentCache:
    """
    Loads and caches post collections per language.

    Args:
        transport: ContentTransport used for manifest fetches
        loader: ContentLoader for individual posts (default: one built on transport)
    """

    def __init__(self, transport, loader: ContentLoader = None):
        self.transport = transport
        self.loader = loader if loader is not None else ContentLoader(transport)
        self._completed: Dict[Language, PostCollection] = {}
        self._pending: Dict[Language, asyncio.Task] = {}

    async def get_all(self, language) -> PostCollection:
        """
        Return every post for a language, newest first.

        Served from cache when available; otherwise joins the running load or
        starts one. A manifest failure yields an empty tuple and leaves the
        cache empty so the next call retries.

        Raises:
            ValueError: If language is not supported
        """
        language = Language.coerce(language)

        if language in self._completed:
            return self._completed[language]

        task = self._pending.get(language)
        if task is None:
            task = asyncio.ensure_future(self._load_collection(language))
            self._pending[language] = task
        else:
            _log_debug(f"Joining in-flight load for '{language.value}'")

        # Shield the shared task: one caller giving up must not cancel the others
        return await asyncio.shield(task)

    async def get_one(self, identifier: str, language) -> Post | None:
        """
        Load a single post, bypassing the collection cache.

        Raises:
            ValueError: If language is not supported
        """
        return await self.loader.load(identifier, language)

    def is_cached(self, language) -> bool:
        return Language.coerce(language) in self._completed

    def is_loading(self, language) -> bool:
        return Language.coerce(language) in self._pending

    async def aclose(self) -> None:
        """Close the transport and any client it owns."""
        await self.transport.aclose()

    async def __aenter__(self) -> "ContentCache":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _load_collection(self, language: Language) -> PostCollection:
        start_time = time.time()
        try:
            try:
                manifest = await self.transport.fetch_manifest(language.value)
            except ContentFetchError as e:
                _log_warning(f"No posts found for language '{language.value}': {e}")
                return ()
            except Exception as e:
                _log_warning(f"Manifest load for '{language.value}' failed unexpectedly: {e!r}")
                return ()

            identifiers, duplicates = dedupe_identifiers(manifest)
            log_manifest_loaded(language.value, identifiers, duplicates)

            results = await asyncio.gather(
                *(self.loader.load(identifier, language) for identifier in identifiers),
                return_exceptions=True,
            )
            for identifier, result in zip(identifiers, results):
                if isinstance(result, BaseException):
                    _log_warning(f"Skipping post {language.value}/{identifier}: {result!r}")

            posts = sort_newest_first(result for result in results if isinstance(result, Post))
            self._completed[language] = posts
            log_collection_result(language.value, len(identifiers), len(posts), time.time() - start_time)
            return posts
        finally:
            self._pending.pop(language, None)


def create_content_cache(
    settings: ContentSettings = None,
    transport=None,
    renderer: MarkupRenderer = None,
) -> ContentCache:
    """
    Build a ContentCache wired from settings.

    Args:
        settings: Pipeline settings (default: load_content_settings())
        transport: Transport to use (default: built from settings)
        renderer: Markup renderer (default: MarkupRenderer with Pygments)

    Returns:
        A ready ContentCache. Construct one per process and share it.
    """
    if settings is None:
        settings = load_content_settings()
    if transport is None:
        transport = create_transport(settings)

    loader = ContentLoader(transport, renderer=renderer, words_per_minute=settings.words_per_minute)
    return ContentCache(transport, loader=loader)
