import asyncio
import json
import threading
from pathlib import Path

import pytest

from orchestration_cli import pipeline
from orchestration_cli.config import load_settings
from orchestration_cli.pipeline import process_catalog, run_batch
from thumbnail_resolution.resolver import ThumbnailResolver
from video_catalog.errors import DirectoryCreateFailure, RemoteFetchError, WriteFailure
from video_catalog.records import VideoRecord

BASE_URL = "https://videos.example.com"


class DelayedFetcher:
    """Later records answer first; tracks how many fetches overlap."""

    def __init__(self, bodies: dict[str, bytes], delays: dict[str, float]):
        self.bodies = bodies
        self.delays = delays
        self.in_flight = 0
        self.peak = 0

    async def __call__(self, url: str, timeout_ms: int) -> bytes:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
        finally:
            self.in_flight -= 1
        if url not in self.bodies:
            raise RemoteFetchError(url, "Service Unavailable", status_code=503)
        return self.bodies[url]


def _settings(tmp_path: Path, **overrides):
    return load_settings(
        env={"PUBLIC_SITE_URL": BASE_URL},
        content_root=tmp_path / "public",
        records_path=tmp_path / "data" / "videos.json",
        module_path=tmp_path / "generated" / "allVideos.ts",
        **overrides,
    )


def _resolver(settings, fetcher) -> ThumbnailResolver:
    return ThumbnailResolver(
        content_root=settings.content_root,
        output_dir=settings.output_dir,
        public_base_url=settings.public_base_url,
        image_subdir=settings.image_subdir,
        fetcher=fetcher,
    )


def _write_catalog(settings, records) -> None:
    settings.records_path.parent.mkdir(parents=True, exist_ok=True)
    settings.records_path.write_text(json.dumps(records), encoding="utf-8")


def _module_records(path: Path) -> list[dict]:
    text = path.read_text(encoding="utf-8")
    start = text.index("= ") + 2
    end = text.rindex(";\n\nexport default")
    return json.loads(text[start:end])


def test_run_batch_preserves_input_order(tmp_path: Path, image_bytes) -> None:
    settings = _settings(tmp_path)
    settings.output_dir.mkdir(parents=True)
    urls = [f"https://img.example.com/{i}.jpg" for i in range(4)]
    fetcher = DelayedFetcher(
        {url: image_bytes(500, 250) for url in urls[1:]},
        {url: 0.05 * (len(urls) - i) for i, url in enumerate(urls)},
    )
    records = [VideoRecord.from_mapping({"id": i, "title": f"Clip {i}", "thumbnail": url}) for i, url in enumerate(urls)]

    outputs = asyncio.run(run_batch(records, _resolver(settings, fetcher)))

    assert [o.fields["id"] for o in outputs] == [0, 1, 2, 3]
    assert outputs[0].thumbnail == urls[0]
    assert [o.thumbnail for o in outputs[1:]] == [f"{BASE_URL}/picture/clip-{i}-{i}.webp" for i in (1, 2, 3)]
    assert fetcher.peak == 4


def test_run_batch_respects_concurrency_limit(tmp_path: Path, image_bytes) -> None:
    settings = _settings(tmp_path)
    settings.output_dir.mkdir(parents=True)
    urls = [f"https://img.example.com/{i}.jpg" for i in range(6)]
    fetcher = DelayedFetcher({url: image_bytes(100, 50) for url in urls}, {url: 0.02 for url in urls})
    records = [VideoRecord.from_mapping({"id": i, "thumbnail": url}) for i, url in enumerate(urls)]

    outputs = asyncio.run(run_batch(records, _resolver(settings, fetcher), concurrency=2))

    assert len(outputs) == 6
    assert fetcher.peak <= 2


def test_process_catalog_writes_thumbnails_and_module(tmp_path: Path, image_bytes) -> None:
    settings = _settings(tmp_path)
    good = "https://img.example.com/good.jpg"
    snaps = "https://cdn.postercdn.com/snaps/x.jpg"
    splash = "https://cdn.postercdn.com/splash/x.jpg"
    _write_catalog(
        settings,
        [
            {"id": "a", "title": "Good One", "thumbnail": good, "duration": 61},
            {"id": "b", "title": "No Thumb"},
            {"id": "c", "title": "Poster", "thumbnail": snaps},
            {"id": "d", "title": "Gone", "thumbnail": "images/gone.jpg"},
            {"id": "e", "title": "Down", "thumbnail": "https://down.example.com/e.jpg"},
        ],
    )
    fetcher = DelayedFetcher({good: image_bytes(1200, 600), splash: image_bytes(300, 200)}, {})

    summary = asyncio.run(process_catalog(settings, resolver=_resolver(settings, fetcher)))

    assert summary.records == 5
    assert summary.outcomes == {"optimized": 1, "no-thumbnail": 1, "alternate": 1, "missing": 1, "passthrough": 1}
    rows = _module_records(settings.module_path)
    assert [row["id"] for row in rows] == ["a", "b", "c", "d", "e"]
    assert rows[0] == {
        "id": "a",
        "title": "Good One",
        "thumbnail": f"{BASE_URL}/picture/good-one-a.webp",
        "duration": 61,
        "thumbnailWidth": 300,
        "thumbnailHeight": 150,
    }
    assert rows[1]["thumbnail"] is None
    assert rows[2]["thumbnail"] == f"{BASE_URL}/picture/poster-c.webp"
    assert (rows[2]["thumbnailWidth"], rows[2]["thumbnailHeight"]) == (300, 200)
    assert (rows[3]["thumbnail"], rows[3]["thumbnailWidth"], rows[3]["thumbnailHeight"]) == (None, 300, 168)
    assert rows[4]["thumbnail"] == "https://down.example.com/e.jpg"
    assert sorted(p.name for p in settings.output_dir.iterdir()) == ["good-one-a.webp", "poster-c.webp"]


def test_process_catalog_is_idempotent(tmp_path: Path, image_bytes) -> None:
    settings = _settings(tmp_path)
    url = "https://img.example.com/a.jpg"
    _write_catalog(settings, [{"id": 1, "title": "Same", "thumbnail": url}])
    fetcher = DelayedFetcher({url: image_bytes(800, 450)}, {})

    asyncio.run(process_catalog(settings, resolver=_resolver(settings, fetcher)))
    first_module = settings.module_path.read_bytes()
    first_thumb = (settings.output_dir / "same-1.webp").read_bytes()
    asyncio.run(process_catalog(settings, resolver=_resolver(settings, fetcher)))

    assert settings.module_path.read_bytes() == first_module
    assert (settings.output_dir / "same-1.webp").read_bytes() == first_thumb


def test_directory_failure_aborts(tmp_path: Path) -> None:
    blocker = tmp_path / "public"
    blocker.write_text("not a directory", encoding="utf-8")
    settings = _settings(tmp_path)

    with pytest.raises(DirectoryCreateFailure):
        asyncio.run(process_catalog(settings))


def test_module_write_failure_aborts(tmp_path: Path) -> None:
    settings = _settings(tmp_path)
    _write_catalog(settings, [{"id": 1}])
    settings.module_path.parent.mkdir(parents=True)
    settings.module_path.mkdir()

    with pytest.raises(WriteFailure):
        asyncio.run(process_catalog(settings))


def test_run_batch_survives_unencodable_and_unreadable_thumbnails(tmp_path: Path, image_bytes) -> None:
    settings = _settings(tmp_path)
    settings.output_dir.mkdir(parents=True)
    tall = "https://img.example.com/tall.png"
    fine = "https://img.example.com/fine.png"
    fetcher = DelayedFetcher({tall: image_bytes(200, 17000), fine: image_bytes(600, 300)}, {})
    records = [
        VideoRecord.from_mapping({"id": 1, "thumbnail": tall}),
        VideoRecord.from_mapping({"id": 2}),
        VideoRecord.from_mapping({"id": 3, "thumbnail": "images/a\x00.jpg"}),
        VideoRecord.from_mapping({"id": 4, "title": "Fine", "thumbnail": fine}),
    ]

    outputs = asyncio.run(run_batch(records, _resolver(settings, fetcher)))

    assert [o.fields["id"] for o in outputs] == [1, 2, 3, 4]
    assert (outputs[0].thumbnail, outputs[0].width, outputs[0].height) == (tall, 300, 168)
    assert outputs[1].thumbnail is None
    assert outputs[2].thumbnail is None
    assert (outputs[3].thumbnail, outputs[3].width, outputs[3].height) == (
        f"{BASE_URL}/picture/fine-4.webp",
        300,
        150,
    )


def test_module_is_written_off_the_event_loop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(tmp_path)
    _write_catalog(settings, [{"id": 1}])
    writer_threads = []
    original_write = pipeline.write_module

    def recording_write(path: Path, text: str) -> None:
        writer_threads.append(threading.current_thread())
        original_write(path, text)

    monkeypatch.setattr(pipeline, "write_module", recording_write)

    asyncio.run(process_catalog(settings))

    assert settings.module_path.exists()
    assert writer_threads and writer_threads[0] is not threading.main_thread()
