"""Video records read from the catalog and the records written back out."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping

from .errors import CatalogError

THUMBNAIL_FIELD = "thumbnail"
WIDTH_FIELD = "thumbnailWidth"
HEIGHT_FIELD = "thumbnailHeight"


@dataclass(frozen=True)
class VideoRecord:
    """One catalog entry. ``fields`` keeps every key of the source object in order."""

    fields: Mapping[str, Any]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "VideoRecord":
        if "id" not in data:
            raise CatalogError(f"Video record is missing an id: {dict(data)!r}")
        return cls(fields=MappingProxyType(dict(data)))

    @property
    def id(self) -> Any:
        return self.fields["id"]

    @property
    def title(self) -> str | None:
        return self.fields.get("title")

    @property
    def thumbnail(self) -> str | None:
        return self.fields.get(THUMBNAIL_FIELD)

    def label(self) -> str:
        return f"{self.id} ({self.title})"


@dataclass(frozen=True)
class OutputRecord:
    fields: Mapping[str, Any]

    @classmethod
    def from_resolution(
        cls, record: VideoRecord, reference: str | None, width: int, height: int
    ) -> "OutputRecord":
        merged = dict(record.fields)
        merged[THUMBNAIL_FIELD] = reference
        merged[WIDTH_FIELD] = width
        merged[HEIGHT_FIELD] = height
        return cls(fields=MappingProxyType(merged))

    @property
    def thumbnail(self) -> str | None:
        return self.fields[THUMBNAIL_FIELD]

    @property
    def width(self) -> int:
        return self.fields[WIDTH_FIELD]

    @property
    def height(self) -> int:
        return self.fields[HEIGHT_FIELD]

    def as_dict(self) -> dict[str, Any]:
        return dict(self.fields)


def parse_records(data: Any) -> List[VideoRecord]:
    if not isinstance(data, list):
        raise CatalogError(f"Video catalog must be a JSON array, got {type(data).__name__}")

    records: List[VideoRecord] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise CatalogError(f"Video record #{idx} is not an object")
        records.append(VideoRecord.from_mapping(item))
    return records


def load_records(path: Path) -> List[VideoRecord]:
    """Read the catalog JSON array from ``path``."""

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"Video catalog not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Video catalog {path} is not valid JSON: {exc}") from exc
    return parse_records(data)
