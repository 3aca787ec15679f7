"""
mathcoach/knowledge/history.py
Solved-problem history, newest first, stored as one JSON document per key.

Reads degrade to an empty log; writes raise StorageError. Timestamps are
integer epoch milliseconds. Legacy records (``problem``/``solution`` keys,
``timestamp`` as millis or ISO-8601) are migrated on read and written back
in the current shape on the next append.
"""
import json
import logging
import math
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pydantic

from mathcoach.core.config import (
    DEFAULT_HISTORY_KEY, DEFAULT_STATS_KEY,
    get_data_dir, get_history_key, get_stats_key, get_storage_backend,
)
from mathcoach.core.errors import StorageError
from mathcoach.knowledge.models import ProblemRecord, ProblemRecordInput, UserStats
from mathcoach.knowledge.stats import aggregate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Key-value backends
# ---------------------------------------------------------------------------

class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """One ``<key>.json`` file per key under data_dir."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Legacy record migration
# ---------------------------------------------------------------------------

def timestamp_to_millis(value) -> int:
    """Epoch millis (number or digit string) or ISO-8601 (naive = UTC) to epoch millis."""
    if isinstance(value, bool):
        raise ValueError("timestamp cannot be a boolean")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"timestamp must be finite, got {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if text.isdecimal():
        return int(text)
    dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def migrate_record(item: dict) -> dict:
    out = dict(item)
    if "problemText" not in out and "problem" in out:
        out["problemText"] = out.pop("problem")
    if "solutionText" not in out and "solution" in out:
        out["solutionText"] = out.pop("solution")
    if "timestampMillis" not in out and "timestamp" in out:
        out["timestampMillis"] = timestamp_to_millis(out.pop("timestamp"))
    return out


# ---------------------------------------------------------------------------
# History store
# ---------------------------------------------------------------------------

class HistoryStore:
    def __init__(
        self,
        kv,
        history_key: str = DEFAULT_HISTORY_KEY,
        stats_key: str = DEFAULT_STATS_KEY,
        clock: Callable[[], float] = time.time,
    ):
        self.kv = kv
        self.history_key = history_key
        self.stats_key = stats_key
        self._clock = clock

    def read_all(self) -> List[ProblemRecord]:
        try:
            raw = self.kv.get(self.history_key)
        except StorageError as exc:
            logger.warning(f"History unreadable, using empty log: {exc}")
            return []
        if not raw or not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"History is not valid JSON, using empty log: {exc.msg}")
            return []

        items = data.get("problems") if isinstance(data, dict) else data
        if not isinstance(items, list):
            logger.warning("History document has no problem list, using empty log")
            return []

        records: List[ProblemRecord] = []
        seen = set()
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                record = ProblemRecord.model_validate(migrate_record(item))
            except (pydantic.ValidationError, ValueError, OverflowError) as exc:
                logger.warning(f"Skipping unreadable history record {item.get('id')!r}: {exc}")
                continue
            if record.id in seen:
                continue
            seen.add(record.id)
            records.append(record)
        return records

    def append(self, entry: ProblemRecordInput) -> ProblemRecord:
        records = self.read_all()
        now_ms = int(self._clock() * 1000)
        newest = max((int(r.id) for r in records if r.id.isdecimal()), default=-1)
        record = ProblemRecord(
            id=str(max(now_ms, newest + 1)),
            topic=entry.topic,
            problem_text=entry.problem_text,
            solution_text=entry.solution_text,
            is_correct=entry.is_correct,
            timestamp_millis=now_ms,
        )
        self.kv.delete(self.stats_key)
        self._save([record] + records)
        logger.info(f"History append: id={record.id} topic={record.topic!r} correct={record.is_correct}")
        return record

    def clear(self) -> None:
        self.kv.delete(self.stats_key)
        self.kv.delete(self.history_key)
        logger.info("History cleared")

    def stats(self) -> UserStats:
        try:
            cached = self.kv.get(self.stats_key)
            if cached:
                return UserStats.model_validate_json(cached)
        except (StorageError, pydantic.ValidationError) as exc:
            logger.warning(f"Stats cache unusable, recomputing: {exc}")

        stats = aggregate(self.read_all())
        try:
            self.kv.set(self.stats_key, json.dumps(stats.to_json_dict(), ensure_ascii=False))
        except StorageError as exc:
            logger.warning(f"Stats cache not written: {exc}")
        return stats

    def _save(self, records: List[ProblemRecord]) -> None:
        doc = {"problems": [r.to_json_dict() for r in records]}
        self.kv.set(self.history_key, json.dumps(doc, ensure_ascii=False, indent=2))


def build_history_store() -> HistoryStore:
    """Pick the key-value backend from config once at startup."""
    backend = get_storage_backend()
    if backend == "memory":
        kv = InMemoryKeyValueStore()
    else:
        kv = JsonFileKeyValueStore(get_data_dir())
    logger.info(f"History store backend: {backend}")
    return HistoryStore(kv, history_key=get_history_key(), stats_key=get_stats_key())
