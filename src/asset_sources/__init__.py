"""Package for acquiring raw thumbnail bytes from the network or the content root."""

from .fetcher import DEFAULT_TIMEOUT_MS, fetch
from .local_reader import local_asset_exists, read_local, resolve_local_path

__all__ = ["DEFAULT_TIMEOUT_MS", "fetch", "local_asset_exists", "read_local", "resolve_local_path"]
