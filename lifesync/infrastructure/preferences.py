"""
Persisted "current user" snapshot.

A small JSON file holding one entry under USER_KEY; the snapshot itself is
opaque to the rest of the application.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from lifesync.domain.errors import StorageError

logger = logging.getLogger(__name__)

USER_KEY = "lifesync_user"


class CurrentUserPreference:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read preferences from {self.path}: {exc}") from exc

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write preferences to {self.path}: {exc}") from exc

    def load(self) -> Optional[Dict[str, Any]]:
        return self._read_all().get(USER_KEY)

    def save(self, snapshot: Dict[str, Any]) -> None:
        data = self._read_all()
        data[USER_KEY] = snapshot
        self._write_all(data)
        logger.debug("Saved current user %s", snapshot.get("id"))

    def update(self, **changes) -> Optional[Dict[str, Any]]:
        """Merge changes into the stored snapshot; nothing stored means nothing to update."""
        snapshot = self.load()
        if snapshot is None:
            return None
        snapshot.update(changes)
        self.save(snapshot)
        return snapshot

    def clear(self) -> None:
        data = self._read_all()
        if data.pop(USER_KEY, None) is not None:
            self._write_all(data)
