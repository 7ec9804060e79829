from __future__ import annotations

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)


class FileSessionStore:
    """Persists the logged-in flag as a tiny JSON file next to the logs."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def is_logged_in(self) -> bool:
        if not self.path.exists():
            return False
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("session_flag_unreadable path=%s error=%s", self.path, e)
            return False
        return isinstance(data, dict) and data.get("logged_in") is True

    def set_logged_in(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"logged_in": True}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemorySessionStore:
    def __init__(self, logged_in: bool = False):
        self._logged_in = logged_in

    def is_logged_in(self) -> bool:
        return self._logged_in

    def set_logged_in(self) -> None:
        self._logged_in = True

    def clear(self) -> None:
        self._logged_in = False
