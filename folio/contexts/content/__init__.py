"""
Content Context

Responsibilities:
- Fetches per-language manifests and post documents (HTTP or static files)
- Parses metadata blocks and renders markdown bodies to HTML
- Derives computed fields (reading time, slug, publication date)
- Caches one collection per language, de-duplicating concurrent loads
- Answers search/tag queries over loaded collections

Owns: Post data model, content fetching, rendering and caching
Never: Decides which language is current (see locale context)
"""

from folio.contexts.content.content_cache import ContentCache, create_content_cache
from folio.contexts.content.content_loader import ContentLoader
from folio.contexts.content.document_parser import parse_document
from folio.contexts.content.exceptions import ContentFetchError, ManifestFormatError
from folio.contexts.content.markup_renderer import MarkupRenderer, PygmentsHighlighter
from folio.contexts.content.post_data_structure import Language, ParsedDocument, Post, PostMetadata
from folio.contexts.content.queries import all_tags, filter_by_tag, post_image_url, search
from folio.contexts.content.settings import ContentSettings, load_content_settings
from folio.contexts.content.transport import FileContentTransport, HttpContentTransport

__all__ = [
    # Caching and loading
    "ContentCache",
    "create_content_cache",
    "ContentLoader",
    # Parsing and rendering
    "parse_document",
    "MarkupRenderer",
    "PygmentsHighlighter",
    # Transports
    "FileContentTransport",
    "HttpContentTransport",
    # Queries
    "search",
    "filter_by_tag",
    "all_tags",
    "post_image_url",
    # Data structures
    "Language",
    "ParsedDocument",
    "Post",
    "PostMetadata",
    # Settings and errors
    "ContentSettings",
    "load_content_settings",
    "ContentFetchError",
    "ManifestFormatError",
]
