"""Write scraped records out as a JSON document."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from mcq_scraper.models import Record

DEFAULT_EXPORT_NAME = "scraped-mcqs.json"


def records_to_json(records: Sequence[Record]) -> str:
    payload = [r.model_dump(by_alias=True, mode="json") for r in records]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_json(records: Sequence[Record], path: Path | str = DEFAULT_EXPORT_NAME) -> Path:
    """Write *records* to *path* and return the path written."""
    target = Path(path)
    target.write_text(records_to_json(records), encoding="utf-8")
    return target
