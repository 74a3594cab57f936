"""Package for resolving per-record thumbnails through the fallback chain."""

from .resolver import (
    DEFAULT_FALLBACK_HEIGHT,
    DEFAULT_FALLBACK_WIDTH,
    ResolvedThumbnail,
    ThumbnailResolver,
    alternate_reference,
    thumbnail_filename,
)

__all__ = [
    "DEFAULT_FALLBACK_HEIGHT",
    "DEFAULT_FALLBACK_WIDTH",
    "ResolvedThumbnail",
    "ThumbnailResolver",
    "alternate_reference",
    "thumbnail_filename",
]
