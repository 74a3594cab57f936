"""Shrink thumbnails to a bounded width and re-encode them as WebP."""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from video_catalog.errors import DecodeError, EncodeError

THUMBNAIL_MAX_WIDTH = 300
OUTPUT_FORMAT = "WEBP"
OUTPUT_QUALITY = 70


@dataclass(frozen=True)
class TranscodedImage:
    data: bytes
    width: int
    height: int


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Not a decodable image: {exc}") from exc
    return image


def _normalize_mode(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "RGBA"):
        return image
    has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def _bounded_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    if width <= max_width:
        return width, height
    return max_width, max(1, round(height * max_width / width))


def transcode(
    data: bytes,
    *,
    max_width: int = THUMBNAIL_MAX_WIDTH,
    quality: int = OUTPUT_QUALITY,
) -> TranscodedImage:
    """Resize to at most ``max_width`` wide (never enlarging) and encode as WebP.

    The reported dimensions are read back from the encoded bytes rather than
    taken from the resize arithmetic.
    """

    image = _open(data)
    try:
        image = _normalize_mode(image)
        target = _bounded_size(image.width, image.height, max_width)
        if target != image.size:
            image = image.resize(target, Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format=OUTPUT_FORMAT, quality=quality)
        encoded = buffer.getvalue()

        with Image.open(io.BytesIO(encoded)) as written:
            width, height = written.size
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Could not encode thumbnail as {OUTPUT_FORMAT}: {exc}") from exc

    return TranscodedImage(data=encoded, width=width, height=height)


async def transcode_async(data: bytes, **kwargs) -> TranscodedImage:
    return await asyncio.to_thread(transcode, data, **kwargs)
