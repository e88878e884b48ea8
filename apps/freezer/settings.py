from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from packages.contracts.errors import CredentialStoreError
from packages.perception.cloud_vision import API_KEY_SETTING

logger = logging.getLogger("freezer.settings")


class CredentialStore:
    """JSON-file settings shared by the session and the settings surface.

    Every read reloads the file so edits made elsewhere are picked up; every write is read
    back to confirm it landed.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise CredentialStoreError(f"cannot read settings {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CredentialStoreError(f"settings {self.path} must hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise CredentialStoreError(f"cannot write settings {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str | None) -> str | None:
        data = self._read()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self._write(data)
        stored = self.get(key)
        if stored != value:
            raise CredentialStoreError(f"settings write for {key!r} was not persisted")
        logger.info("settings updated key=%s", key)
        return stored

    def get_api_key(self) -> str | None:
        return self.get(API_KEY_SETTING)

    def set_api_key(self, value: str | None) -> str | None:
        return self.set(API_KEY_SETTING, value)
