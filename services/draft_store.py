"""
Local single-slot draft persistence.

The in-progress application is kept as one JSON document at a fixed path so a
restart picks up where the applicant left off. Persistence is best-effort:
write failures are logged and swallowed, and a slot that cannot be read or
parsed is treated as "no saved draft".
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from schemas.application import ApplicationDraft
from services.exceptions import StorageReadError

logger = logging.getLogger(__name__)


class DraftStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, draft: ApplicationDraft) -> bool:
        """Overwrite the slot with ``draft``. Returns False (never raises) when the write fails."""
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(draft.model_dump_json(), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, ValueError) as e:
            logger.warning("Could not write draft to %s: %s", self.path, e)
            return False
        return True

    def load(self) -> ApplicationDraft | None:
        try:
            return self._read()
        except StorageReadError as e:
            logger.warning("Ignoring unreadable draft at %s: %s", self.path, e.message)
            return None

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove draft at %s: %s", self.path, e)

    def _read(self) -> ApplicationDraft | None:
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(str(e)) from e
        try:
            return ApplicationDraft.model_validate_json(raw)
        except ValidationError as e:
            raise StorageReadError(f"invalid draft document ({e.error_count()} errors)") from e
