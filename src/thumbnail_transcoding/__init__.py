"""Package for resizing and re-encoding thumbnails."""

from .webp_transcoder import (
    OUTPUT_FORMAT,
    OUTPUT_QUALITY,
    THUMBNAIL_MAX_WIDTH,
    TranscodedImage,
    transcode,
    transcode_async,
)

__all__ = [
    "OUTPUT_FORMAT",
    "OUTPUT_QUALITY",
    "THUMBNAIL_MAX_WIDTH",
    "TranscodedImage",
    "transcode",
    "transcode_async",
]
