"""Startup configuration: ``.env`` loading and validation into ``Settings``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from asset_sources import DEFAULT_TIMEOUT_MS
from thumbnail_resolution.resolver import DEFAULT_IMAGE_SUBDIR
from video_catalog.errors import ConfigurationMissing

BASE_URL_ENV = "PUBLIC_SITE_URL"
CONTENT_ROOT_ENV = "VIDTHUMB_CONTENT_ROOT"
IMAGE_SUBDIR_ENV = "VIDTHUMB_IMAGE_SUBDIR"
OUTPUT_DIR_ENV = "VIDTHUMB_OUTPUT_DIR"
RECORDS_ENV = "VIDTHUMB_RECORDS"
MODULE_ENV = "VIDTHUMB_MODULE"
TIMEOUT_ENV = "VIDTHUMB_TIMEOUT_MS"
CONCURRENCY_ENV = "VIDTHUMB_CONCURRENCY"

DEFAULT_CONTENT_ROOT = Path("public")
DEFAULT_RECORDS_PATH = Path("src/data/videos.json")
DEFAULT_MODULE_PATH = Path("src/data/allVideos.ts")


@dataclass(frozen=True)
class Settings:
    public_base_url: str
    content_root: Path
    image_subdir: str
    output_dir: Path
    records_path: Path
    module_path: Path
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    concurrency: int | None = None


def _load_env_file() -> None:
    """Best-effort load of ``KEY=value`` lines from ``.env`` files.

    Checks the repo root ``.env`` and then the cwd ``.env``. Values already in
    the environment are never overwritten.
    """

    candidates = [
        Path(__file__).resolve().parents[2] / ".env",  # this repo root
        Path.cwd() / ".env",
    ]

    for path in candidates:
        if not path.is_file():
            continue
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            if key in os.environ:
                continue
            os.environ[key] = value.strip().strip("\"'")


def _positive_int(name: str, raw: object) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationMissing(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationMissing(f"{name} must be positive, got {value}")
    return value


def load_settings(
    env: Mapping[str, str] | None = None,
    *,
    public_base_url: str | None = None,
    content_root: Path | None = None,
    image_subdir: str | None = None,
    output_dir: Path | None = None,
    records_path: Path | None = None,
    module_path: Path | None = None,
    timeout_ms: int | None = None,
    concurrency: int | None = None,
) -> Settings:
    """Build ``Settings`` from explicit overrides, falling back to the environment.

    Raises ``ConfigurationMissing`` before any work starts when the public base
    URL is absent or a numeric value is invalid.
    """

    env = os.environ if env is None else env

    base_url = (public_base_url or env.get(BASE_URL_ENV) or "").strip()
    if not base_url:
        raise ConfigurationMissing(
            f"{BASE_URL_ENV} is not defined. Set it in the environment or your .env file,"
            " or pass --base-url."
        )

    root = Path(content_root or env.get(CONTENT_ROOT_ENV) or DEFAULT_CONTENT_ROOT)
    subdir = (image_subdir or env.get(IMAGE_SUBDIR_ENV) or DEFAULT_IMAGE_SUBDIR).strip("/")
    out_dir = Path(output_dir or env.get(OUTPUT_DIR_ENV) or root / subdir)

    timeout = _positive_int(TIMEOUT_ENV, timeout_ms if timeout_ms is not None else env.get(TIMEOUT_ENV))
    limit = _positive_int(
        CONCURRENCY_ENV, concurrency if concurrency is not None else env.get(CONCURRENCY_ENV)
    )

    return Settings(
        public_base_url=base_url.rstrip("/"),
        content_root=root,
        image_subdir=subdir,
        output_dir=out_dir,
        records_path=Path(records_path or env.get(RECORDS_ENV) or DEFAULT_RECORDS_PATH),
        module_path=Path(module_path or env.get(MODULE_ENV) or DEFAULT_MODULE_PATH),
        timeout_ms=timeout or DEFAULT_TIMEOUT_MS,
        concurrency=limit,
    )
