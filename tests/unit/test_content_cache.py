"""Unit tests for per-language collection caching and in-flight de-duplication."""

import asyncio
from datetime import date

import pytest

from folio.contexts.content.content_cache import (
    ContentCache,
    dedupe_identifiers,
    sort_newest_first,
)
from folio.contexts.content.content_loader import ContentLoader
from folio.contexts.content.exceptions import ContentFetchError
from folio.contexts.content.post_data_structure import Language, Post


def make_doc(title, day):
    return f"---\ntitle: {title}\ndate: {day}\ndescription: {title} summary\ntags: [t]\n---\nBody of {title}\n"


class CountingTransport:
    """
    In-memory transport that counts requests.

    Manifest requests can be held open with ``gate`` (an asyncio.Event) and
    made to fail a number of times with ``manifest_failures``.
    """

    def __init__(self, manifests, documents, gate=None, manifest_failures=0):
        self.manifests = manifests
        self.documents = documents
        self.gate = gate
        self.manifest_failures = manifest_failures
        self.manifest_requests = []
        self.document_requests = []

    async def fetch_manifest(self, language):
        self.manifest_requests.append(language)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.manifest_failures > 0:
            self.manifest_failures -= 1
            raise ContentFetchError("Manifest unavailable", language=language)
        return list(self.manifests.get(language, []))

    async def fetch_document(self, language, identifier):
        self.document_requests.append((language, identifier))
        await asyncio.sleep(0)
        try:
            return self.documents[(language, identifier)]
        except KeyError:
            raise ContentFetchError("Not found", language=language, identifier=identifier) from None


@pytest.fixture
def transport():
    return CountingTransport(
        manifests={"en": ["old", "new", "middle"], "es": ["uno"]},
        documents={
            ("en", "old"): make_doc("Old", "2023-01-01"),
            ("en", "new"): make_doc("New", "2024-03-01"),
            ("en", "middle"): make_doc("Middle", "2023-06-01"),
            ("es", "uno"): make_doc("Uno", "2024-01-01"),
        },
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_collection_sorted_newest_first(transport):
    posts = await ContentCache(transport).get_all("en")
    assert [post.id for post in posts] == ["new", "middle", "old"]
    assert all(a.date >= b.date for a, b in zip(posts, posts[1:]))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_second_call_served_from_cache(transport):
    cache = ContentCache(transport)
    first = await cache.get_all("en")
    second = await cache.get_all(Language.EN)

    assert first is second
    assert transport.manifest_requests == ["en"]
    assert len(transport.document_requests) == 3
    assert cache.is_cached("en")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_calls_share_one_load(transport):
    """N concurrent callers trigger one manifest fetch and one fetch per post."""
    cache = ContentCache(transport)
    results = await asyncio.gather(*(cache.get_all("en") for _ in range(10)))

    assert transport.manifest_requests == ["en"]
    assert sorted(transport.document_requests) == [("en", "middle"), ("en", "new"), ("en", "old")]
    assert all(result is results[0] for result in results)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_pending_registration_lifecycle(transport):
    """The in-flight entry exists while loading and is gone once settled."""
    gate = asyncio.Event()
    transport.gate = gate
    cache = ContentCache(transport)

    task = asyncio.ensure_future(cache.get_all("en"))
    await asyncio.sleep(0)
    assert cache.is_loading("en")
    assert not cache.is_cached("en")

    gate.set()
    await task
    assert not cache.is_loading("en")
    assert cache.is_cached("en")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_languages_are_cached_independently(transport):
    cache = ContentCache(transport)
    en_posts, es_posts = await asyncio.gather(cache.get_all("en"), cache.get_all("es"))

    assert [post.id for post in es_posts] == ["uno"]
    assert len(en_posts) == 3
    assert sorted(transport.manifest_requests) == ["en", "es"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_post_is_excluded(transport):
    transport.manifests["en"].append("ghost")
    posts = await ContentCache(transport).get_all("en")

    assert [post.id for post in posts] == ["new", "middle", "old"]
    assert ("en", "ghost") in transport.document_requests


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_manifest_is_an_empty_collection(transport):
    transport.manifests["en"] = []
    cache = ContentCache(transport)

    assert await cache.get_all("en") == ()
    assert cache.is_cached("en")
    assert transport.document_requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_manifest_failure_is_not_cached_and_retries(transport):
    """A rejected manifest yields no posts now and a fresh fetch next time."""
    transport.manifest_failures = 1
    cache = ContentCache(transport)

    assert await cache.get_all("en") == ()
    assert not cache.is_cached("en")
    assert not cache.is_loading("en")

    posts = await cache.get_all("en")
    assert len(posts) == 3
    assert transport.manifest_requests == ["en", "en"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_callers_share_manifest_failure(transport):
    transport.manifest_failures = 1
    cache = ContentCache(transport)
    results = await asyncio.gather(*(cache.get_all("en") for _ in range(3)))

    assert results == [(), (), ()]
    assert transport.manifest_requests == ["en"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_manifest_error_degrades_to_empty(transport):
    async def broken_manifest(language):
        raise RuntimeError("boom")

    transport.fetch_manifest = broken_manifest
    cache = ContentCache(transport)

    assert await cache.get_all("en") == ()
    assert not cache.is_cached("en")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_loader_exception_does_not_fail_batch(transport):
    class FlakyLoader(ContentLoader):
        async def load(self, identifier, language):
            if identifier == "middle":
                raise RuntimeError("loader bug")
            return await super().load(identifier, language)

    cache = ContentCache(transport, loader=FlakyLoader(transport))
    posts = await cache.get_all("en")
    assert [post.id for post in posts] == ["new", "old"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicate_manifest_entries_fetched_once(transport):
    transport.manifests["en"] = ["old", "new", "old"]
    posts = await ContentCache(transport).get_all("en")

    assert [post.id for post in posts] == ["new", "old"]
    assert transport.document_requests.count(("en", "old")) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_load(transport):
    gate = asyncio.Event()
    transport.gate = gate
    cache = ContentCache(transport)

    abandoned = asyncio.ensure_future(cache.get_all("en"))
    waiting = asyncio.ensure_future(cache.get_all("en"))
    await asyncio.sleep(0)

    abandoned.cancel()
    gate.set()

    posts = await waiting
    assert len(posts) == 3
    assert abandoned.cancelled()
    assert cache.is_cached("en")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_one_bypasses_cache(transport):
    cache = ContentCache(transport)
    await cache.get_all("en")

    first = await cache.get_one("new", "en")
    second = await cache.get_one("new", "en")

    assert first == second
    assert first.title == "New"
    assert transport.document_requests.count(("en", "new")) == 3
    assert transport.manifest_requests == ["en"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_one_missing_post_returns_none(transport):
    assert await ContentCache(transport).get_one("ghost", "es") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unsupported_language_raises(transport):
    with pytest.raises(ValueError):
        await ContentCache(transport).get_all("de")


class TestHelpers:
    """Test collection helper functions."""

    def test_dedupe_keeps_first_occurrence_order(self):
        unique, duplicates = dedupe_identifiers(["b", "a", "b", "c", "a"])
        assert unique == ["b", "a", "c"]
        assert duplicates == ["a", "b"]

    def test_dedupe_large_manifest_reports_each_repeat_once(self):
        manifest = [f"post-{n % 500}" for n in range(20_000)]
        unique, duplicates = dedupe_identifiers(manifest)
        assert unique == [f"post-{n}" for n in range(500)]
        assert duplicates == sorted(unique)

    def test_dedupe_without_repeats(self):
        assert dedupe_identifiers(["a", "b"]) == (["a", "b"], [])

    def test_sort_is_stable_for_equal_dates(self):
        def post(identifier, day):
            return Post(
                id=identifier,
                slug=identifier,
                title=identifier,
                description="",
                date=day,
                tags=(),
                content="",
                language=Language.EN,
            )

        posts = [
            post("first-tie", date(2024, 5, 1)),
            post("older", date(2024, 1, 1)),
            post("second-tie", date(2024, 5, 1)),
            post("newest", date(2024, 9, 1)),
        ]
        assert [p.id for p in sort_newest_first(posts)] == [
            "newest",
            "first-tie",
            "second-tie",
            "older",
        ]
