"""
Single-post loading.

ContentLoader fetches one raw document, parses and renders it, and derives
the computed fields (reading time, id/slug, resolved date). It is stateless
and safe to call concurrently; failures are logged and reported as None so
that one broken post never takes down a whole collection.
"""

import math

from folio.contexts.content.document_parser import parse_document
from folio.contexts.content.logger import _log_debug, _log_warning
from folio.contexts.content.markup_renderer import MarkupRenderer
from folio.contexts.content.post_data_structure import Language, ParsedDocument, Post
from folio.contexts.content.settings import ContentSettings
from folio.utils.timestamp import parse_post_date, today


def calculate_reading_time(body: str, words_per_minute: int = ContentSettings.words_per_minute) -> int:
    """
    Estimate reading time in whole minutes (rounded up, at least 1).

    Words are whitespace-delimited runs of the markdown body, not the
    rendered HTML.
    """
    words = len(body.split())
    return max(1, math.ceil(words / words_per_minute))


def build_post(
    identifier: str,
    language: Language,
    document: ParsedDocument,
    content: str,
    words_per_minute: int = ContentSettings.words_per_minute,
) -> Post:
    """
    Assemble a Post from a parsed document and its rendered HTML.

    Args:
        identifier: Manifest identifier, used as the post id
        language: Post language
        document: Parsed metadata and body
        content: Rendered HTML of document.body
        words_per_minute: Reading speed for the reading-time estimate

    Returns:
        Post with derived fields filled in
    """
    metadata = document.metadata

    post_date = parse_post_date(metadata.date)
    if post_date is None:
        _log_warning(f"{language.value}/{identifier}: unparseable date '{metadata.date}', using today")
        post_date = today()

    return Post(
        id=identifier,
        slug=metadata.slug or identifier,
        title=metadata.title,
        description=metadata.description,
        date=post_date,
        tags=metadata.tags,
        content=content,
        language=language,
        author=metadata.author,
        reading_time=calculate_reading_time(document.body, words_per_minute),
        image_url=metadata.image_url,
    )


class ContentLoader:
    """
    Loads individual posts through a transport.

    Args:
        transport: ContentTransport used to fetch raw documents
        renderer: MarkupRenderer for post bodies (default: Pygments highlighting)
        words_per_minute: Reading speed for reading-time estimates
    """

    def __init__(
        self,
        transport,
        renderer: MarkupRenderer = None,
        words_per_minute: int = ContentSettings.words_per_minute,
    ):
        self.transport = transport
        self.renderer = renderer if renderer is not None else MarkupRenderer()
        self.words_per_minute = words_per_minute

    async def load(self, identifier: str, language) -> Post | None:
        """
        Fetch, parse and render one post.

        Args:
            identifier: Post identifier from the manifest
            language: Language code or Language

        Returns:
            The Post, or None if it could not be fetched, parsed or rendered

        Raises:
            ValueError: If language is not supported
        """
        language = Language.coerce(language)

        try:
            raw_text = await self.transport.fetch_document(language.value, identifier)
            document = parse_document(raw_text)
            content = self.renderer.render(document.body)
            post = build_post(identifier, language, document, content, self.words_per_minute)
        except Exception as e:
            _log_warning(f"Skipping post {language.value}/{identifier}: {e}")
            return None

        if not document.has_metadata_block:
            _log_warning(f"{language.value}/{identifier}: no metadata block, using defaults")
        _log_debug(f"Loaded {language.value}/{identifier} ({post.reading_time} min read)")
        return post
