"""
Step execution: runs one step and guarantees the scheduler is released.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from .errors import MalformedStep
from .steps import Expression, Step
from .typing_sim import TypingSimulator


class StepAborted(Exception):
    """Raised out of a step when releasing the scheduler ended its session."""


class StepContext:
    """Small helper object passed to steps at runtime."""

    def __init__(
        self,
        host,
        schedule_next: Callable[..., None],
        log: Callable[[str], None],
        record_error: Callable[[BaseException], None],
        namespace: Optional[Dict[str, Any]] = None,
        typist: Optional[TypingSimulator] = None,
        is_live: Optional[Callable[[], bool]] = None,
    ):
        self._host = host
        self._schedule_next = schedule_next
        self._log = log
        self._record_error = record_error
        self._namespace = namespace or {}
        self._typist = typist
        self._is_live = is_live or (lambda: True)
        self.released = False

    @property
    def human_typing(self) -> bool:
        return self._typist is not None

    def schedule_next(self, delay_override: Optional[float] = None) -> None:
        self.released = True
        self._schedule_next(delay_override)
        # A failing after_step hook finalizes the session right here; the
        # step's own effect must not run after that.
        if not self._is_live():
            raise StepAborted()

    def type_like_human(self, events: Sequence[str]) -> None:
        # The typist owns the continuation from here on.
        self.released = True
        self._typist.type(events, on_done=self._schedule_next, on_error=self._record_error)

    def log(self, message: str) -> None:
        self._log(message)

    def evaluate(self, value: Any) -> Any:
        """Expressions are resolved, callables are called, anything else is a literal."""
        if isinstance(value, Expression):
            return value.resolve(self._namespace)
        if callable(value):
            return value()
        return value

    def call_command(self, command: Any) -> None:
        self._host.call_command(command)

    def send_input(self, events: Sequence[str]) -> None:
        self._host.send_input(events)


class StepExecutor:
    """
    Interprets a single step.

    Failures never propagate: they are handed to record_error and left for
    the next scheduler turn to act on. If a step failed before releasing the
    scheduler, the executor releases it so that turn still happens.
    """

    def __init__(self, log: Callable[[str], None], record_error: Callable[[BaseException], None]):
        self._log = log
        self._record_error = record_error

    def execute(self, step: Any, ctx: StepContext) -> None:
        try:
            self._log(f"STEP {step.form() if isinstance(step, Step) else repr(step)}")
            if not isinstance(step, Step):
                ctx.schedule_next()
                raise MalformedStep(step)
            step.run(ctx)
        except StepAborted:
            return
        except Exception as e:
            self._record_error(e)
            if not ctx.released:
                try:
                    ctx.schedule_next()
                except StepAborted:
                    pass
