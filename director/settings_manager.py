"""Persistence utilities for director defaults."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Dict, Optional

from .models import DEFAULT_DELAY_BETWEEN_STEPS, LogTarget, TypingStyle


@dataclass
class DirectorSettings:
    """Defaults applied to scripts that leave an option unset."""

    delay_between_steps: float = DEFAULT_DELAY_BETWEEN_STEPS
    typing_style: TypingStyle = TypingStyle.INSTANT
    log_target: Optional[LogTarget] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to primitive types for JSON storage."""
        return {
            "delay_between_steps": self.delay_between_steps,
            "typing_style": self.typing_style.value,
            "log_target": self.log_target.to_dict() if self.log_target else None,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DirectorSettings":
        """Create settings instance from JSON dictionary."""
        delay_raw = data.get("delay_between_steps", DEFAULT_DELAY_BETWEEN_STEPS)
        return DirectorSettings(
            delay_between_steps=float(DEFAULT_DELAY_BETWEEN_STEPS if delay_raw is None else delay_raw),
            typing_style=TypingStyle.coerce(data.get("typing_style", TypingStyle.INSTANT.value)),
            log_target=LogTarget.coerce(data.get("log_target")),
        )


class SettingsManager:
    """Handles loading and saving director defaults to disk."""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self._storage_path = storage_path or Path.home() / ".tk-director.json"

    @property
    def storage_path(self) -> Path:
        """Absolute path to the settings file."""
        return self._storage_path

    def load(self) -> DirectorSettings:
        """Load settings from disk, returning defaults if the file is missing or corrupt."""
        path = self.storage_path
        if not path.exists():
            return DirectorSettings()

        try:
            raw_data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw_data, dict):
                raise ValueError("Settings file has invalid structure")
            return DirectorSettings.from_dict(raw_data)
        except Exception:
            # Corrupt or unreadable file; fall back to defaults but keep backup for inspection.
            backup_path = path.with_suffix(".bak")
            try:
                path.replace(backup_path)
            except OSError:
                pass
            return DirectorSettings()

    def save(self, settings: DirectorSettings) -> None:
        """Persist settings atomically to disk."""
        path = self.storage_path
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_suffix(".tmp")
        payload = json.dumps(settings.to_dict(), indent=2, ensure_ascii=False)
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(path)
