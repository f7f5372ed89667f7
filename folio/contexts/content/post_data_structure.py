"""
Post Data Structures

Defines the canonical blog entities: the supported languages, the fixed-shape
metadata record parsed from a document header, and the rendered Post served to
presentation code.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from folio.utils.timestamp import now_exact

DEFAULT_TITLE = "Untitled"


class Language(str, Enum):
    """Languages the blog is published in."""

    EN = "en"
    ES = "es"

    @classmethod
    def coerce(cls, value) -> "Language":
        """
        Convert a language code to a Language.

        Raises:
            ValueError: If the code is not a supported language
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported language '{value}'. Supported: {supported}") from None


@dataclass(frozen=True)
class PostMetadata:
    """
    Metadata block of a post document.

    Every field has a defined default so a document without a header (or with
    missing keys) still yields a complete record.
    """

    title: str = DEFAULT_TITLE
    date: str = field(default_factory=now_exact)
    description: str = ""
    tags: Tuple[str, ...] = ()
    slug: str = ""
    author: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ParsedDocument:
    """Result of splitting a raw document into metadata and markdown body."""

    metadata: PostMetadata
    body: str
    has_metadata_block: bool = False


@dataclass(frozen=True)
class Post:
    """
    A parsed and rendered blog post.

    Attributes:
        id: Manifest identifier
        slug: URL-safe identifier (metadata slug, else id)
        title: Display title
        description: Short summary
        date: Publication date
        tags: Tags used for filtering
        content: Rendered HTML body
        language: Language the post is written in
        author: Optional author name
        reading_time: Estimated reading time in minutes
        image_url: Optional cover image
    """

    id: str
    slug: str
    title: str
    description: str
    date: date
    tags: Tuple[str, ...]
    content: str
    language: Language
    author: Optional[str] = None
    reading_time: Optional[int] = None
    image_url: Optional[str] = None
