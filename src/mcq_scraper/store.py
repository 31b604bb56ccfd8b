"""JSON file store that keeps accumulated records across sessions."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from mcq_scraper.models import Record

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_PATH = Path(".mcq_scraper") / "results.json"

_RECORDS = TypeAdapter(list[Record])


class ResultStore:
    """Persists the record list of the latest run as one JSON file."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path else DEFAULT_RESULTS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Record] | None:
        """Return saved records, or None when nothing usable is stored."""
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            records = _RECORDS.validate_python(raw)
        except (json.JSONDecodeError, OSError, ValidationError) as exc:
            logger.warning("Discarding unreadable results file %s: %s", self._path, exc)
            self.clear()
            return None
        return records or None

    def save(self, records: Sequence[Record]) -> None:
        if not records:
            self.clear()
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = _RECORDS.dump_python(list(records), by_alias=True, mode="json")
        self._path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        logger.debug("Saved %d records to %s", len(records), self._path)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.info("Results cleared")
