"""
Queries over a loaded post collection.

Pure, synchronous functions. They never mutate the collection they are given
and always return a new list.
"""

from typing import Iterable, List

from folio.contexts.content.post_data_structure import Post
from folio.contexts.content.settings import DEFAULT_IMAGE_URL


def search(posts: Iterable[Post], query: str) -> List[Post]:
    """
    Case-insensitive substring search over title, description and tags.

    Callers handle the empty-query case themselves (an empty query matches
    every post).
    """
    needle = query.lower()
    return [
        post
        for post in posts
        if needle in post.title.lower()
        or needle in post.description.lower()
        or any(needle in tag.lower() for tag in post.tags)
    ]


def filter_by_tag(posts: Iterable[Post], tag: str) -> List[Post]:
    """Posts carrying exactly this tag (case-sensitive)."""
    return [post for post in posts if tag in post.tags]


def all_tags(posts: Iterable[Post]) -> List[str]:
    """Every distinct tag in the collection, sorted."""
    return sorted({tag for post in posts for tag in post.tags})


def post_image_url(post: Post, fallback: str = DEFAULT_IMAGE_URL) -> str:
    """The post's cover image, or the fallback image."""
    return post.image_url or fallback
