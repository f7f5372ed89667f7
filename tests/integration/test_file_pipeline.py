"""
Integration tests: full pipeline over the fixture content tree on disk.
"""

from datetime import date
from pathlib import Path

import pytest

from folio.contexts.content import (
    FileContentTransport,
    all_tags,
    create_content_cache,
    filter_by_tag,
    load_content_settings,
    search,
)
from folio.contexts.content.exceptions import ContentFetchError
from folio.utils.timestamp import today

FIXTURES_PATH = Path(__file__).resolve().parents[1] / "fixtures"


@pytest.fixture
def cache():
    settings = load_content_settings(content_root=str(FIXTURES_PATH), base_url="")
    return create_content_cache(settings)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_english_collection(cache):
    posts = await cache.get_all("en")

    # missing-post is listed in the manifest but has no file
    assert [post.id for post in posts] == [
        "no-frontmatter",
        "angular-signals",
        "hello-world",
        "same-day",
    ]
    assert posts[0].date == today()
    assert posts[0].title == "Untitled"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_post_fields(cache):
    posts = {post.id: post for post in await cache.get_all("en")}

    hello = posts["hello-world"]
    assert hello.title == "Hello World"
    assert hello.date == date(2024, 5, 1)
    assert hello.tags == ("python", "web")
    assert hello.author == "Jordan Rivera"
    assert hello.image_url == "https://images.example.com:8443/covers/hello.png"
    assert "<br />" in hello.content
    assert '<code class="language-python">' in hello.content

    signals = posts["angular-signals"]
    assert signals.slug == "signals-in-practice"
    assert signals.title == "Angular Signals in Practice"
    assert '<code class="language-typescript">' in signals.content


@pytest.mark.integration
@pytest.mark.asyncio
async def test_queries_over_loaded_collection(cache):
    posts = await cache.get_all("en")

    assert all_tags(posts) == ["angular", "notes", "python", "typescript", "web"]
    assert [post.id for post in filter_by_tag(posts, "python")] == ["hello-world"]
    assert [post.id for post in search(posts, "SIGNALS")] == ["angular-signals"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_spanish_collection_and_single_post(cache):
    posts = await cache.get_all("es")
    assert [post.title for post in posts] == ["Hola Mundo"]

    post = await cache.get_one("hola-mundo", "es")
    assert post == posts[0]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_missing_language_tree_degrades_to_empty(tmp_path):
    settings = load_content_settings(content_root=str(tmp_path), base_url="")
    cache = create_content_cache(settings)

    assert await cache.get_all("en") == ()
    assert not cache.is_cached("en")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_file_transport_refuses_paths_outside_root():
    transport = FileContentTransport(FIXTURES_PATH / "posts")
    with pytest.raises(ContentFetchError):
        await transport.fetch_document("en", "../../../../etc/passwd")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cache_from_settings_can_be_closed():
    settings = load_content_settings(content_root=str(FIXTURES_PATH), base_url="")

    async with create_content_cache(settings) as cache:
        assert isinstance(cache.transport, FileContentTransport)
        posts = await cache.get_all("es")
    assert [post.id for post in posts] == ["hola-mundo"]
