"""
Configuration models for director sessions.
Each class follows the Single Responsibility Principle (SRP).
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import ConfigurationError, UnknownLogTargetKind
from .steps import coerce_step

Hook = Optional[Callable[[], None]]

DEFAULT_DELAY_BETWEEN_STEPS = 0.1


class TypingStyle(Enum):
    """Pacing strategy for type steps."""
    INSTANT = "instant"
    HUMAN = "human"

    @staticmethod
    def coerce(value: Any) -> "TypingStyle":
        if isinstance(value, TypingStyle):
            return value
        try:
            return TypingStyle(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown typing style: {value!r}")


class LogTargetKind(Enum):
    BUFFER = "buffer"
    FILE = "file"


class SessionPhase(Enum):
    """Enumeration of scheduler states."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINALIZING = "finalizing"
    ENDED = "ended"


@dataclass(frozen=True)
class LogTarget:
    """Where trace lines go: a named host buffer or a file path."""
    kind: str
    name: str

    @staticmethod
    def coerce(value: Any) -> Optional["LogTarget"]:
        """Accept a LogTarget, a (kind, name) pair or a {"kind", "name"} dict."""
        if value is None or isinstance(value, LogTarget):
            return value
        if isinstance(value, dict):
            return LogTarget(kind=str(value.get("kind", "")), name=str(value.get("name", "")))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return LogTarget(kind=str(value[0]), name=str(value[1]))
        raise ConfigurationError(f"Invalid log target: {value!r}")

    def resolved_kind(self) -> LogTargetKind:
        try:
            return LogTargetKind(self.kind.strip().lower())
        except ValueError:
            raise UnknownLogTargetKind(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "name": self.name}


@dataclass
class SessionHooks:
    """User callbacks for the session lifecycle. Absent hooks are no-ops."""
    before_start: Hook = None
    before_step: Hook = None
    after_step: Hook = None
    after_end: Hook = None
    on_error: Hook = None

    def __post_init__(self):
        for name in ("before_start", "before_step", "after_step", "after_end", "on_error"):
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"Hook '{name}' must be callable")


@dataclass
class SessionConfig:
    """
    Everything a session needs before it starts.

    steps is required; the rest has defaults. Steps may be given as Step
    objects, dicts ({"type": "wait", "seconds": 0.2}) or (kind, payload)
    pairs. Descriptors that match no variant are kept as-is and fail with
    MalformedStep once the scheduler reaches them.
    """
    steps: Optional[List[Any]] = None
    delay_between_steps: float = DEFAULT_DELAY_BETWEEN_STEPS
    typing_style: TypingStyle = TypingStyle.INSTANT
    log_target: Optional[LogTarget] = None
    hooks: SessionHooks = field(default_factory=SessionHooks)
    namespace: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.steps is None or isinstance(self.steps, (str, bytes)):
            raise ConfigurationError("'steps' is required")
        self.steps = [coerce_step(raw) for raw in self.steps]
        if not self.steps:
            raise ConfigurationError("'steps' must contain at least one step")

        try:
            self.delay_between_steps = float(self.delay_between_steps)
        except (TypeError, ValueError):
            raise ConfigurationError("'delay_between_steps' must be a number of seconds")
        if self.delay_between_steps < 0:
            raise ConfigurationError("'delay_between_steps' cannot be negative")

        self.typing_style = TypingStyle.coerce(self.typing_style)
        self.log_target = LogTarget.coerce(self.log_target)

    @staticmethod
    def from_options(**options: Any) -> "SessionConfig":
        """Build a config from flat keyword options (hooks included)."""
        hook_names = ("before_start", "before_step", "after_step", "after_end", "on_error")
        hooks = SessionHooks(**{name: options.pop(name) for name in hook_names if name in options})
        unknown = set(options) - {"steps", "delay_between_steps", "typing_style", "log_target", "namespace"}
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        return SessionConfig(hooks=hooks, **options)
