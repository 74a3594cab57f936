"""Decide the final thumbnail reference and dimensions for one video record.

Each record walks a fixed fallback chain, stopping at the first success:

1. no declared thumbnail -> nothing to do;
2. acquire the declared thumbnail (remote or local), transcode it to WebP and
   write it under the thumbnail directory;
3. for postercdn ``/snaps/`` URLs, repeat step 2 against ``/splash/``;
4. pass the declared reference through untouched, or give up with ``None``
   when it is a local file that does not exist.

Per-record failures never leave ``resolve``; they only pick the next step.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Tuple

from asset_sources import DEFAULT_TIMEOUT_MS, fetch, local_asset_exists, read_local
from asset_sources.local_reader import resolve_local_path
from thumbnail_transcoding import TranscodedImage, transcode_async
from video_catalog.errors import ThumbnailError
from video_catalog.records import VideoRecord
from video_catalog.slug import slugify

DEFAULT_FALLBACK_WIDTH = 300
DEFAULT_FALLBACK_HEIGHT = 168
DEFAULT_IMAGE_SUBDIR = "picture"
UNTITLED_SLUG_SOURCE = "untitled-video"

ALTERNATE_HOST = "postercdn.com"
ALTERNATE_FROM = "/snaps/"
ALTERNATE_TO = "/splash/"

OUTCOME_NO_THUMBNAIL = "no-thumbnail"
OUTCOME_OPTIMIZED = "optimized"
OUTCOME_ALTERNATE = "alternate"
OUTCOME_PASSTHROUGH = "passthrough"
OUTCOME_MISSING = "missing"

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, int], Awaitable[bytes]]


@dataclass(frozen=True)
class ResolvedThumbnail:
    reference: str | None
    width: int
    height: int
    outcome: str
    errors: Tuple[str, ...] = ()


def is_remote_reference(reference: str) -> bool:
    return reference.startswith(("http://", "https://"))


def alternate_reference(reference: str) -> str | None:
    """Return the ``/splash/`` variant of a postercdn ``/snaps/`` URL, else ``None``."""

    if ALTERNATE_HOST in reference and ALTERNATE_FROM in reference:
        return reference.replace(ALTERNATE_FROM, ALTERNATE_TO, 1)
    return None


def thumbnail_filename(record: VideoRecord) -> str:
    return f"{slugify(record.title or UNTITLED_SLUG_SOURCE)}-{record.id}.webp"


def _write_bytes(path: Path, data: bytes) -> None:
    path.write_bytes(data)


class ThumbnailResolver:
    """Runs the fallback chain for single records.

    The resolver holds only configuration; every ``resolve`` call keeps its
    state in locals, so one instance can serve any number of concurrent
    resolutions.
    """

    def __init__(
        self,
        *,
        content_root: Path,
        output_dir: Path,
        public_base_url: str,
        image_subdir: str = DEFAULT_IMAGE_SUBDIR,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.content_root = Path(content_root)
        self.output_dir = Path(output_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.image_subdir = image_subdir.strip("/")
        self.timeout_ms = timeout_ms
        self._fetch = fetcher or fetch

    def public_reference(self, filename: str) -> str:
        return f"{self.public_base_url}/{self.image_subdir}/{filename}"

    async def _acquire(self, source: str, is_remote: bool) -> bytes:
        if is_remote:
            return await self._fetch(source, self.timeout_ms)
        return await read_local(self.content_root, source)

    async def _optimize_and_save(
        self, record: VideoRecord, source: str, is_remote: bool
    ) -> ResolvedThumbnail:
        raw = await self._acquire(source, is_remote)
        image: TranscodedImage = await transcode_async(raw)
        filename = thumbnail_filename(record)
        await asyncio.to_thread(_write_bytes, self.output_dir / filename, image.data)
        return ResolvedThumbnail(
            reference=self.public_reference(filename),
            width=image.width,
            height=image.height,
            outcome=OUTCOME_OPTIMIZED,
        )

    async def resolve(self, record: VideoRecord) -> ResolvedThumbnail:
        declared = record.thumbnail
        if not declared:
            return ResolvedThumbnail(
                reference=None,
                width=DEFAULT_FALLBACK_WIDTH,
                height=DEFAULT_FALLBACK_HEIGHT,
                outcome=OUTCOME_NO_THUMBNAIL,
            )

        declared = str(declared)
        errors: list[str] = []
        remote = is_remote_reference(declared)

        try:
            return await self._optimize_and_save(record, declared, remote)
        except (ThumbnailError, OSError) as exc:
            logger.debug("[resolve] primary attempt failed for %s: %s", record.label(), exc)
            errors.append(str(exc))

        alternate = alternate_reference(declared)
        if alternate is not None:
            try:
                result = await self._optimize_and_save(record, alternate, True)
            except (ThumbnailError, OSError) as exc:
                logger.error("[resolve] alternate thumbnail failed for %s: %s", record.label(), exc)
                errors.append(str(exc))
            else:
                return ResolvedThumbnail(
                    reference=result.reference,
                    width=result.width,
                    height=result.height,
                    outcome=OUTCOME_ALTERNATE,
                    errors=tuple(errors),
                )

        return await self._direct_reference(record, declared, remote, errors)

    async def _direct_reference(
        self, record: VideoRecord, declared: str, remote: bool, errors: list[str]
    ) -> ResolvedThumbnail:
        reference: str | None = declared
        outcome = OUTCOME_PASSTHROUGH

        if not remote and not await local_asset_exists(self.content_root, declared):
            path = resolve_local_path(self.content_root, declared)
            logger.error(
                "[resolve] all thumbnail attempts failed for %s; local file not found at %s."
                " Thumbnail will be null.",
                record.label(),
                path,
            )
            reference = None
            outcome = OUTCOME_MISSING

        return ResolvedThumbnail(
            reference=reference,
            width=DEFAULT_FALLBACK_WIDTH,
            height=DEFAULT_FALLBACK_HEIGHT,
            outcome=outcome,
            errors=tuple(errors),
        )
