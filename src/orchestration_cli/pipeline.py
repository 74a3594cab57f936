"""Batch orchestration: resolve every record, then write the data module."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from thumbnail_resolution import ThumbnailResolver
from video_catalog.errors import DirectoryCreateFailure, WriteFailure
from video_catalog.records import OutputRecord, VideoRecord, load_records

from .config import Settings
from .serializer import serialize_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchSummary:
    module_path: Path
    records: int
    outcomes: Dict[str, int] = field(default_factory=dict)


def ensure_directories(*directories: Path) -> None:
    for directory in directories:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreateFailure(f"Could not create directory {directory}: {exc}") from exc


def write_module(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise WriteFailure(f"Could not write data module {path}: {exc}") from exc


async def _resolve_one(
    resolver: ThumbnailResolver,
    record: VideoRecord,
    limiter: asyncio.Semaphore | None,
) -> tuple[OutputRecord, str]:
    if limiter is None:
        resolved = await resolver.resolve(record)
    else:
        async with limiter:
            resolved = await resolver.resolve(record)
    output = OutputRecord.from_resolution(record, resolved.reference, resolved.width, resolved.height)
    return output, resolved.outcome


async def _run(
    records: Sequence[VideoRecord],
    resolver: ThumbnailResolver,
    concurrency: int | None,
) -> List[tuple[OutputRecord, str]]:
    limiter = asyncio.Semaphore(concurrency) if concurrency else None
    # gather keeps input order regardless of completion order
    return list(
        await asyncio.gather(*(_resolve_one(resolver, record, limiter) for record in records))
    )


async def run_batch(
    records: Sequence[VideoRecord],
    resolver: ThumbnailResolver,
    *,
    concurrency: int | None = None,
) -> List[OutputRecord]:
    """Resolve every record concurrently and return output records in input order.

    ``concurrency`` caps the number of in-flight resolutions; ``None`` launches
    them all at once.
    """

    return [output for output, _ in await _run(records, resolver, concurrency)]


async def process_catalog(settings: Settings, *, resolver: ThumbnailResolver | None = None) -> BatchSummary:
    """Load the catalog, resolve all thumbnails and write the data module."""

    ensure_directories(settings.output_dir, settings.module_path.parent)

    records = load_records(settings.records_path)
    resolver = resolver or ThumbnailResolver(
        content_root=settings.content_root,
        output_dir=settings.output_dir,
        public_base_url=settings.public_base_url,
        image_subdir=settings.image_subdir,
        timeout_ms=settings.timeout_ms,
    )

    logger.info(
        "[batch] resolving %d records (concurrency=%s)",
        len(records),
        settings.concurrency or "unbounded",
    )
    results = await _run(records, resolver, settings.concurrency)
    outcomes = Counter(outcome for _, outcome in results)

    module_text = serialize_records(output for output, _ in results)
    await asyncio.to_thread(write_module, settings.module_path, module_text)
    logger.info("[module] wrote %d records -> %s", len(results), settings.module_path)
    logger.info(
        "[batch] done: %s",
        ", ".join(f"{name}={count}" for name, count in sorted(outcomes.items())) or "no records",
    )

    return BatchSummary(module_path=settings.module_path, records=len(results), outcomes=dict(outcomes))


def run_catalog(settings: Settings) -> BatchSummary:
    return asyncio.run(process_catalog(settings))
