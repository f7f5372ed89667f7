"""
Document parsing for the content context.

Splits a raw post document into its metadata block and markdown body:

    ---
    title: "Hello"
    date: 2024-05-01
    tags: [python, "web"]
    imageUrl: https://example.com/cover.png
    ---
    Body text...

Pure functions, no I/O. Documents without a metadata block are not an error:
they get default metadata and the whole text becomes the body.
"""

import re
from typing import Dict, List, Union

from folio.contexts.content.post_data_structure import (
    DEFAULT_TITLE,
    ParsedDocument,
    PostMetadata,
)

# Leading "---" block at the very start of the text
METADATA_BLOCK_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)

QUOTE_CHARS = "'\""

# Front-matter key -> PostMetadata field. Keys not listed here are ignored.
METADATA_FIELDS = {
    "title": "title",
    "date": "date",
    "description": "description",
    "tags": "tags",
    "slug": "slug",
    "author": "author",
    "imageUrl": "image_url",
    "image_url": "image_url",
}

SEQUENCE_FIELDS = {"tags"}

MetadataValue = Union[str, List[str]]


def strip_quotes(value: str) -> str:
    """Remove one pair of matching quotes wrapping the whole value, if present."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARS:
        return value[1:-1]
    return value


def parse_metadata_value(raw_value: str) -> MetadataValue:
    """
    Parse the value part of a "key: value" line.

    Bracketed values become lists split on commas; everything else is a
    string. A matching pair of quotes around a value (or list item) is
    removed; quotes anywhere else are kept.

    Args:
        raw_value: Text after the first colon

    Returns:
        String or list of strings

    Example:
        >>> parse_metadata_value(' [python, "web dev"]')
        ['python', 'web dev']
        >>> parse_metadata_value(' "https://example.com:8080/x"')
        'https://example.com:8080/x'
    """
    value = raw_value.strip()

    if value.startswith("[") and value.endswith("]"):
        items = [strip_quotes(item.strip()).strip() for item in value[1:-1].split(",")]
        return [item for item in items if item]

    return strip_quotes(value)


def parse_metadata_lines(block: str) -> Dict[str, MetadataValue]:
    """
    Parse the lines of a metadata block into a raw key/value mapping.

    Lines without a colon or with an empty key are skipped. Only the first
    colon separates key from value, so URLs survive intact.
    """
    raw: Dict[str, MetadataValue] = {}

    for line in block.splitlines():
        key, separator, value = line.partition(":")
        key = key.strip()
        if not separator or not key:
            continue
        raw[key] = parse_metadata_value(value)

    return raw


def build_metadata(raw: Dict[str, MetadataValue]) -> PostMetadata:
    """
    Populate a fixed-shape PostMetadata from raw key/value pairs.

    Unknown keys are dropped. Sequence fields accept a scalar (one-element
    tuple); scalar fields given a list get the items joined with ", ".
    Empty title and date fall back to their defaults.
    """
    values = {}

    for key, value in raw.items():
        field_name = METADATA_FIELDS.get(key)
        if field_name is None:
            continue

        if field_name in SEQUENCE_FIELDS:
            if isinstance(value, list):
                values[field_name] = tuple(value)
            else:
                values[field_name] = (value,) if value else ()
        else:
            values[field_name] = ", ".join(value) if isinstance(value, list) else value

    if not values.get("title"):
        values["title"] = DEFAULT_TITLE
    if not values.get("date"):
        values.pop("date", None)
    for optional in ("author", "image_url"):
        if optional in values and not values[optional]:
            values[optional] = None

    return PostMetadata(**values)


def parse_document(raw_text: str) -> ParsedDocument:
    """
    Split a raw document into metadata and body.

    Args:
        raw_text: Full document text

    Returns:
        ParsedDocument with a complete metadata record and the markdown body.
        If no metadata block is present, metadata holds defaults (current
        instant as date) and body is the entire input.
    """
    match = METADATA_BLOCK_PATTERN.match(raw_text)
    if not match:
        return ParsedDocument(metadata=PostMetadata(), body=raw_text, has_metadata_block=False)

    block, body = match.group(1), match.group(2)
    metadata = build_metadata(parse_metadata_lines(block))
    return ParsedDocument(metadata=metadata, body=body, has_metadata_block=True)
