"""Package for the video catalog data model."""

from .errors import (
    AssetNotFound,
    CatalogError,
    ConfigurationMissing,
    DecodeError,
    DirectoryCreateFailure,
    EncodeError,
    FetchTimeout,
    PipelineError,
    RemoteFetchError,
    ThumbnailError,
    WriteFailure,
)
from .records import OutputRecord, VideoRecord, load_records
from .slug import slugify

__all__ = [
    "AssetNotFound",
    "CatalogError",
    "ConfigurationMissing",
    "DecodeError",
    "DirectoryCreateFailure",
    "EncodeError",
    "FetchTimeout",
    "OutputRecord",
    "PipelineError",
    "RemoteFetchError",
    "ThumbnailError",
    "VideoRecord",
    "WriteFailure",
    "load_records",
    "slugify",
]
