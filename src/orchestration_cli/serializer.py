"""Render output records as the TypeScript data module read by the site build."""

from __future__ import annotations

import json
from typing import Iterable

from video_catalog.records import OutputRecord

DEFAULT_TYPE_NAME = "VideoData"
DEFAULT_TYPE_IMPORT = "../utils/data"
DEFAULT_EXPORT_NAME = "allVideos"


def serialize_records(
    records: Iterable[OutputRecord],
    *,
    type_name: str = DEFAULT_TYPE_NAME,
    type_import: str = DEFAULT_TYPE_IMPORT,
    export_name: str = DEFAULT_EXPORT_NAME,
) -> str:
    """Return the module source for ``records``, in the order given."""

    payload = json.dumps([record.as_dict() for record in records], indent=2, ensure_ascii=False)
    return (
        f"import type {{ {type_name} }} from '{type_import}';\n\n"
        f"const {export_name}: {type_name}[] = {payload};\n\n"
        f"export default {export_name};\n"
    )
