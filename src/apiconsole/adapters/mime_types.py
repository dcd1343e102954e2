"""Media type helpers for response post-processing.

Scope:
- Decide which bodies are shown as text (`application/json`,
  `application/ld+json`, `text/*`).
- Pick the file extension of a saved body from its content type.
"""

from __future__ import annotations

import mimetypes

TEXT_MEDIA_TYPES: tuple[str, ...] = ("application/json", "application/ld+json", "text")


def is_text_media_type(media_type: str | None) -> bool:
    return bool(media_type) and media_type.startswith(TEXT_MEDIA_TYPES)


def extension_for(media_type: str) -> str:
    """File extension (without dot) for a media type.

    Uses the platform's type map; unknown types fall back to their subtype
    token (`application/x-custom` → `x-custom`).
    """

    normalized = media_type.strip().lower()
    extension = mimetypes.guess_extension(normalized, strict=False)
    if extension:
        return extension.lstrip(".")
    _, _, subtype = normalized.partition("/")
    return subtype.strip("/") or "bin"
