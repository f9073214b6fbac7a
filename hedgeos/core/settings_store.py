from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.settings_model import SettingsModel

logger = get_logger(__name__)


class SettingsStore:
    """Read HedgeOS user settings.

    The session never writes settings back; the file is edited by hand.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Read settings from disk, injecting expected sections."""
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                log_event(logger, "settings_unreadable", path=str(self._path), error=str(exc))
                raw = {}
        else:
            raw = {}
        return self._normalize(self._migrate(raw))

    def load_model(self) -> SettingsModel:
        return SettingsModel.model_validate(self.load())

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            model = SettingsModel.model_validate(data or {})
        except ValidationError as exc:
            log_event(logger, "settings_invalid", path=str(self._path), error=str(exc))
            model = SettingsModel()
        return model.model_dump()

    def _migrate(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        version = data.get("schemaVersion")
        if not isinstance(version, int):
            version = 0
        if version < 1:
            data = dict(data)
            data["schemaVersion"] = 1
        return data
