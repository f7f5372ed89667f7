"""
Content transports.

A transport retrieves the two kinds of resources in a content tree:

- the manifest for a language, a JSON array of post identifiers
- a raw post document, given a language and identifier

Layout (paths are configurable, see ContentSettings):

    posts/en/index.json
    posts/en/<identifier>.md
    posts/es/index.json
    posts/es/<identifier>.md

HttpContentTransport reads the tree from a web server, FileContentTransport
from a local directory. Both raise ContentFetchError on any failure.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional, Protocol

import httpx

from folio.contexts.content.exceptions import ContentFetchError, ManifestFormatError
from folio.contexts.content.logger import _log_debug
from folio.contexts.content.settings import ContentSettings


class ContentTransport(Protocol):
    """Interface used by the loader and cache to fetch content."""

    async def fetch_manifest(self, language: str) -> List[str]: ...

    async def fetch_document(self, language: str, identifier: str) -> str: ...

    async def aclose(self) -> None: ...


def validate_manifest(data, language: str, location: str) -> List[str]:
    """
    Check that decoded manifest data is a list of identifier strings.

    Raises:
        ManifestFormatError: If data is not a JSON array of strings
    """
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ManifestFormatError(
            "Manifest must be a JSON array of strings",
            language=language,
            location=location,
        )
    return [item.strip() for item in data if item.strip()]


class HttpContentTransport:
    """
    Fetches content over HTTP with httpx.

    Args:
        base_url: Root URL of the content tree (e.g., "https://example.com/assets")
        manifest_path: Manifest path template with a {language} placeholder
        document_path: Document path template with {language} and {identifier}
        client: Optional preconfigured httpx.AsyncClient (owned by the caller)
        timeout: Request timeout in seconds when creating a client

    Example:
        async with HttpContentTransport("https://example.com/assets") as transport:
            identifiers = await transport.fetch_manifest("en")
    """

    def __init__(
        self,
        base_url: str,
        manifest_path: str = ContentSettings.manifest_path,
        document_path: str = ContentSettings.document_path,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = ContentSettings.request_timeout_s,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.manifest_path = manifest_path
        self.document_path = document_path
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    def manifest_url(self, language: str) -> str:
        return self.base_url + self.manifest_path.format(language=language)

    def document_url(self, language: str, identifier: str) -> str:
        return self.base_url + self.document_path.format(language=language, identifier=identifier)

    async def _get(self, url: str, language: str, identifier: Optional[str] = None) -> httpx.Response:
        _log_debug(f"GET {url}")
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ContentFetchError(
                f"Content request failed with HTTP {e.response.status_code}",
                language=language,
                identifier=identifier,
                location=url,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise ContentFetchError(
                "Content request failed",
                language=language,
                identifier=identifier,
                location=url,
                original_error=e,
            ) from e
        return response

    async def fetch_manifest(self, language: str) -> List[str]:
        url = self.manifest_url(language)
        response = await self._get(url, language)
        try:
            data = response.json()
        except ValueError as e:
            raise ManifestFormatError(
                "Manifest is not valid JSON", language=language, location=url, original_error=e
            ) from e
        return validate_manifest(data, language, url)

    async def fetch_document(self, language: str, identifier: str) -> str:
        url = self.document_url(language, identifier)
        response = await self._get(url, language, identifier)
        return response.text

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpContentTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class FileContentTransport:
    """
    Reads content from a static directory tree.

    File reads run in a worker thread so the event loop is not blocked.
    Identifiers that would resolve outside the root are refused.

    Args:
        root: Directory containing the content tree
        manifest_path: Manifest path template with a {language} placeholder
        document_path: Document path template with {language} and {identifier}
    """

    def __init__(
        self,
        root: Path,
        manifest_path: str = ContentSettings.manifest_path,
        document_path: str = ContentSettings.document_path,
    ):
        self.root = Path(root).resolve()
        self.manifest_path = manifest_path
        self.document_path = document_path

    def _resolve(self, relative: str, language: str, identifier: Optional[str] = None) -> Path:
        path = (self.root / relative).resolve()
        if not path.is_relative_to(self.root):
            raise ContentFetchError(
                "Refusing to read outside the content root",
                language=language,
                identifier=identifier,
                location=str(path),
            )
        return path

    async def _read(self, path: Path, language: str, identifier: Optional[str] = None) -> str:
        _log_debug(f"READ {path}")
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentFetchError(
                "Content file could not be read",
                language=language,
                identifier=identifier,
                location=str(path),
                original_error=e,
            ) from e

    async def fetch_manifest(self, language: str) -> List[str]:
        path = self._resolve(self.manifest_path.format(language=language), language)
        text = await self._read(path, language)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestFormatError(
                "Manifest is not valid JSON", language=language, location=str(path), original_error=e
            ) from e
        return validate_manifest(data, language, str(path))

    async def fetch_document(self, language: str, identifier: str) -> str:
        path = self._resolve(
            self.document_path.format(language=language, identifier=identifier), language, identifier
        )
        return await self._read(path, language, identifier)

    async def aclose(self) -> None:
        """Nothing to release; present so either transport can be closed the same way."""

    async def __aenter__(self) -> "FileContentTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_transport(settings: ContentSettings):
    """
    Build the transport described by settings.

    base_url wins over content_root when both are set.

    Raises:
        ValueError: If neither base_url nor content_root is configured
    """
    if settings.base_url:
        return HttpContentTransport(
            settings.base_url,
            manifest_path=settings.manifest_path,
            document_path=settings.document_path,
            timeout=settings.request_timeout_s,
        )
    if settings.content_root:
        return FileContentTransport(
            Path(settings.content_root),
            manifest_path=settings.manifest_path,
            document_path=settings.document_path,
        )
    raise ValueError("No content source configured: set CONTENT_BASE_URL or CONTENT_ROOT")
