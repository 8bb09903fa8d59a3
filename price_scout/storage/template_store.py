# price_scout/storage/template_store.py

"""JSON-file key-value store for saved listing templates."""

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from price_scout.config.settings import Settings
from price_scout.models.listing import TemplateRecord

logger = logging.getLogger("price_scout.storage")


def _now_iso() -> str:
    """UTC timestamp like ``2026-10-19T08:15:30.123Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class TemplateStore:
    """Stores :class:`TemplateRecord` objects keyed by id.

    The whole collection lives in one JSON array on disk and is rewritten
    on every change. Single-user, local only.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.TEMPLATES_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("TemplateStore initialised, path=%s", self.path)

    # ── Persistence ──────────────────────────────────────

    def _read(self) -> list[TemplateRecord]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            raw: Any = json.load(f)
        if not isinstance(raw, list):
            logger.error(
                "Template file %s is not a JSON array, ignoring",
                self.path,
            )
            return []
        return [
            TemplateRecord.from_dict(item)
            for item in raw
            if isinstance(item, dict) and "id" in item
        ]

    def _write(self, records: list[TemplateRecord]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(
                [r.to_dict() for r in records],
                f,
                ensure_ascii=False,
                indent=2,
            )

    # ── Key-value operations ─────────────────────────────

    def list(self) -> list[TemplateRecord]:
        """Return every stored template in insertion order."""
        return self._read()

    def get(self, template_id: str) -> TemplateRecord | None:
        """Return the template with *template_id*, if any."""
        for record in self._read():
            if record.id == template_id:
                return record
        return None

    def put(self, record: TemplateRecord) -> None:
        """Insert *record*, or replace the stored one with the same id."""
        records = self._read()
        for idx, existing in enumerate(records):
            if existing.id == record.id:
                records[idx] = record
                break
        else:
            records.append(record)
        self._write(records)
        logger.info("Saved template %s (%s)", record.id, record.category)

    def delete(self, template_id: str) -> bool:
        """Remove *template_id*; returns False when it did not exist."""
        records = self._read()
        kept = [r for r in records if r.id != template_id]
        if len(kept) == len(records):
            return False
        self._write(kept)
        logger.info("Deleted template %s", template_id)
        return True

    # ── Record helpers ───────────────────────────────────

    @staticmethod
    def _validate(category: str, title: str, description: str) -> None:
        if not category.strip():
            raise ValueError("カテゴリー名を入力してください")
        if not title.strip() or not description.strip():
            raise ValueError("タイトルと説明文を入力してください")

    def _new_id(self) -> str:
        """Millisecond timestamp id, bumped past any existing id."""
        taken = {r.id for r in self._read()}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def create(
        self, category: str, title: str, description: str,
    ) -> TemplateRecord:
        """Validate and store a new template.

        Raises:
            ValueError: When category, title or description is blank.
        """
        self._validate(category, title, description)
        stamp = _now_iso()
        record = TemplateRecord(
            id=self._new_id(),
            category=category.strip(),
            title=title.strip(),
            description=description.strip(),
            created_at=stamp,
            updated_at=stamp,
        )
        self.put(record)
        return record

    def update(
        self,
        template_id: str,
        category: str,
        title: str,
        description: str,
    ) -> TemplateRecord:
        """Replace the editable fields of an existing template.

        Raises:
            KeyError: When *template_id* is unknown.
            ValueError: When category, title or description is blank.
        """
        self._validate(category, title, description)
        record = self.get(template_id)
        if record is None:
            raise KeyError(template_id)
        record.category = category.strip()
        record.title = title.strip()
        record.description = description.strip()
        record.updated_at = _now_iso()
        self.put(record)
        return record
