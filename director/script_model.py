"""
Director script data model and JSON parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError
from .models import LogTarget, SessionConfig, SessionHooks, TypingStyle
from .steps import coerce_step


@dataclass
class DirectorScript:
    name: str
    steps: List[Any] = field(default_factory=list)
    # None means "use the configured default"
    delay_between_steps: Optional[float] = None
    typing_style: Optional[TypingStyle] = None
    log_target: Optional[LogTarget] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DirectorScript":
        if not isinstance(data, dict):
            raise ConfigurationError("A script must be a JSON object")
        name = str(data.get("name", "Unnamed Script"))
        steps_data = data.get("steps", []) or []
        steps: List[Any] = []
        if isinstance(steps_data, list):
            steps = [coerce_step(raw) for raw in steps_data]

        delay = data.get("delay_between_steps")
        if delay is not None:
            try:
                delay = float(delay)
            except (TypeError, ValueError):
                raise ConfigurationError(f"delay_between_steps must be a number, got {delay!r}")
        style = data.get("typing_style")
        return DirectorScript(
            name=name,
            steps=steps,
            delay_between_steps=delay,
            typing_style=TypingStyle.coerce(style) if style is not None else None,
            log_target=LogTarget.coerce(data.get("log_target")),
        )

    def to_config(
        self,
        settings=None,
        hooks: Optional[SessionHooks] = None,
        namespace: Optional[Dict[str, Any]] = None,
    ) -> SessionConfig:
        """Build a SessionConfig, filling unset options from DirectorSettings."""
        options: Dict[str, Any] = {
            "steps": self.steps,
            "hooks": hooks or SessionHooks(),
            "namespace": dict(namespace or {}),
        }
        delay = self.delay_between_steps
        style = self.typing_style
        target = self.log_target
        if settings is not None:
            delay = settings.delay_between_steps if delay is None else delay
            style = settings.typing_style if style is None else style
            target = settings.log_target if target is None else target
        if delay is not None:
            options["delay_between_steps"] = delay
        if style is not None:
            options["typing_style"] = style
        options["log_target"] = target
        return SessionConfig(**options)
