"""Read thumbnails that live under the site's content root."""

from __future__ import annotations

import asyncio
from pathlib import Path

from video_catalog.errors import AssetNotFound


def resolve_local_path(content_root: Path, relative_path: str) -> Path:
    """Join ``relative_path`` onto the content root.

    A leading slash means "from the site root", so ``/images/a.jpg`` lands
    inside the content root rather than at the filesystem root.
    """

    return Path(content_root) / relative_path.lstrip("/\\")


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except (OSError, ValueError) as exc:
        raise AssetNotFound(path) from exc


async def read_local(content_root: Path, relative_path: str) -> bytes:
    path = resolve_local_path(content_root, relative_path)
    return await asyncio.to_thread(_read_bytes, path)


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


async def local_asset_exists(content_root: Path, relative_path: str) -> bool:
    path = resolve_local_path(content_root, relative_path)
    return await asyncio.to_thread(_exists, path)
