"""Error kinds raised by the thumbnail pipeline."""

from __future__ import annotations


class ThumbnailError(RuntimeError):
    """A per-record acquisition or transcode failure."""


class FetchTimeout(ThumbnailError):
    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(f"Timed out after {timeout_ms} ms fetching {url}")
        self.url = url
        self.timeout_ms = timeout_ms


class RemoteFetchError(ThumbnailError):
    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Failed to download {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class AssetNotFound(ThumbnailError):
    def __init__(self, path) -> None:
        super().__init__(f"Local asset not found: {path}")
        self.path = path


class DecodeError(ThumbnailError):
    pass


class EncodeError(ThumbnailError):
    pass


class PipelineError(RuntimeError):
    """A failure that aborts the whole run."""


class ConfigurationMissing(PipelineError):
    pass


class CatalogError(PipelineError):
    pass


class DirectoryCreateFailure(PipelineError):
    pass


class WriteFailure(PipelineError):
    pass
