"""Custom exceptions for the content context."""

from typing import Optional


class ContentFetchError(Exception):
    """
    Exception raised when a manifest or document cannot be retrieved.

    Attributes:
        message: Error description
        language: Language of the requested content
        identifier: Post identifier (None for manifest fetches)
        location: URL or file path that was requested
        original_error: The underlying transport/IO error
    """

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        identifier: Optional[str] = None,
        location: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.language = language
        self.identifier = identifier
        self.location = location
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if language:
            target = f"{language}/{identifier}" if identifier else f"{language} manifest"
            parts.append(f"Target: {target}")

        if location:
            parts.append(f"Location: {location}")

        if original_error:
            parts.append(f"Original error: {original_error!r}")

        super().__init__("\n".join(parts))


class ManifestFormatError(ContentFetchError):
    """
    Exception raised when a manifest was retrieved but is not a JSON array of strings.
    """

    pass
