"""
Content Pipeline Settings

Resolves the settings used by the content pipeline from three layers, later
layers overriding earlier ones:

1. Built-in defaults (ContentSettings field defaults)
2. YAML settings file (CONTENT_SETTINGS_PATH env variable, or explicit path)
3. Keyword overrides passed by the caller

Examples:
    >>> settings = load_content_settings()
    >>> settings = load_content_settings(Path("configs/content_settings.yaml"), words_per_minute=250)
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
CONTENT_SETTINGS_PATH = os.getenv("CONTENT_SETTINGS_PATH")
CONTENT_BASE_URL = os.getenv("CONTENT_BASE_URL")
CONTENT_ROOT = os.getenv("CONTENT_ROOT")

DEFAULT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1461749280684-dccba630e2f6?w=600&h=192&fit=crop"
)


@dataclass(frozen=True)
class ContentSettings:
    """
    Settings for the content pipeline.

    Attributes:
        words_per_minute: Reading speed used for reading-time estimates
        fallback_image_url: Image shown for posts without their own image
        manifest_path: Manifest location relative to the content source
        document_path: Document location relative to the content source
        request_timeout_s: HTTP timeout for manifest and document requests
        base_url: Base URL for HTTP content (None to read from disk)
        content_root: Directory holding the static content tree
    """

    words_per_minute: int = 200
    fallback_image_url: str = DEFAULT_IMAGE_URL
    manifest_path: str = "posts/{language}/index.json"
    document_path: str = "posts/{language}/{identifier}.md"
    request_timeout_s: float = 10.0
    base_url: Optional[str] = CONTENT_BASE_URL
    content_root: Optional[str] = CONTENT_ROOT


def _validate(values: Dict[str, Any]) -> None:
    """Reject unknown keys and impossible values."""
    known = {f.name for f in fields(ContentSettings)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(
            f"Unknown content settings: {sorted(unknown)}. Available settings: {sorted(known)}"
        )

    if "words_per_minute" in values and int(values["words_per_minute"]) <= 0:
        raise ValueError("words_per_minute must be a positive integer")

    for key in ("manifest_path", "document_path"):
        if key in values and "{language}" not in str(values[key]):
            raise ValueError(f"{key} must contain a '{{language}}' placeholder")

    if "document_path" in values and "{identifier}" not in str(values["document_path"]):
        raise ValueError("document_path must contain an '{identifier}' placeholder")


def load_content_settings(config_path: Path = None, **overrides) -> ContentSettings:
    """
    Load content settings from YAML and apply overrides.

    Args:
        config_path: Optional path to settings file (defaults to CONTENT_SETTINGS_PATH env variable)
        **overrides: Individual settings that take precedence over the file

    Returns:
        Resolved ContentSettings

    Raises:
        ValueError: If the file or overrides contain unknown keys or invalid values
    """
    if config_path is None and CONTENT_SETTINGS_PATH:
        config_path = Path(CONTENT_SETTINGS_PATH)

    merged = asdict(ContentSettings())

    if config_path is not None:
        from_file = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}
        _validate(from_file)
        merged.update(from_file)

    overrides = {key: value for key, value in overrides.items() if value is not None}
    _validate(overrides)
    merged.update(overrides)

    merged["words_per_minute"] = int(merged["words_per_minute"])
    merged["request_timeout_s"] = float(merged["request_timeout_s"])

    return ContentSettings(**merged)
