"""
engine/store.py
---------------
JSON-file day store: the persistence collaborator the workflow writes to.

Contract used by engine.orchestrator
------------------------------------
    read_day(date)     -> DailyRecord | None
    write_day(record)  -> None          (full overwrite of that date)
    read_all()         -> list[DailyRecord]
    list_page_names()  -> list[str]

File layout
-----------
    {"days": [<DailyRecord.to_dict()>, ...], "pageNames": ["Page A", ...]}

Writes go to a temp file in the same directory, then os.replace(), so a
crash mid-write never leaves a truncated file. There is no locking: the
last writer of a date wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from config.settings import get_data_path
from engine.records import DailyRecord

logger = logging.getLogger(__name__)

DEFAULT_PAGE_NAMES: list[str] = ["Page A", "Page B", "Health Zone"]


class JsonDayStore:
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else get_data_path()

    # ── raw file access ──────────────────────────────────────────────────────

    def _load(self) -> dict:
        if not self.path.is_file():
            return {"days": [], "pageNames": list(DEFAULT_PAGE_NAMES)}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        # Older files were a bare list of days
        if isinstance(data, list):
            data = {"days": data}
        data.setdefault("days", [])
        data.setdefault("pageNames", list(DEFAULT_PAGE_NAMES))
        return data

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    # ── day records ──────────────────────────────────────────────────────────

    def read_all(self) -> list[DailyRecord]:
        return [DailyRecord.from_dict(d) for d in self._load()["days"]]

    def read_day(self, date: str) -> DailyRecord | None:
        for d in self._load()["days"]:
            if d.get("date") == date:
                return DailyRecord.from_dict(d)
        return None

    def write_day(self, record: DailyRecord) -> None:
        data = self._load()
        data["days"] = [d for d in data["days"] if d.get("date") != record.date]
        data["days"].append(record.to_dict())
        self._save(data)
        logger.info(f"Wrote {record.date} ({len(record.batches)} batches) to {self.path}")

    # ── page names ───────────────────────────────────────────────────────────

    def list_page_names(self) -> list[str]:
        return list(self._load()["pageNames"])

    def save_page_name(self, name: str) -> None:
        name = name.strip()
        data = self._load()
        if not name or name in data["pageNames"]:
            return
        data["pageNames"].append(name)
        self._save(data)

    def delete_page_name(self, name: str) -> None:
        data = self._load()
        data["pageNames"] = [n for n in data["pageNames"] if n != name]
        self._save(data)
