"""
Director engine: plays a session's steps back on the host's event loop.

The engine never blocks. Every unit of work is a turn handed to the timer
facade, and exactly one step is in flight at a time: a step only gets
dispatched after the previous one released the scheduler.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import random
import time
from typing import Any, Callable, Deque, List, Optional

from .errors import ConfigurationError, DirectorError
from .executor import StepContext, StepExecutor
from .hooks import HookDispatcher
from .logger import SessionLogger
from .models import SessionConfig, SessionPhase, TypingStyle
from .steps import CallStep, TypeStep
from .typing_sim import TypingSimulator

# Delay before bookkeeping steps (log, wait, assert); just enough to yield.
PACING_DELAY = 0.05
# Delay before on_error runs, so the finalizing turn drains first.
ERROR_HOOK_DELAY = 0.05


@dataclass
class SessionState:
    """Mutable state of one session. Only the engine and its steps touch it."""
    steps: Deque[Any] = field(default_factory=deque)
    counter: int = 0
    start_time: Optional[float] = None
    pending_error: Optional[BaseException] = None

    def reset(self) -> None:
        self.steps.clear()
        self.counter = 0
        self.start_time = None
        self.pending_error = None


def describe_error(error: BaseException) -> str:
    if isinstance(error, DirectorError):
        return str(error)
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


class DirectorEngine:
    def __init__(
        self,
        host,
        timer,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        self._host = host
        self._timer = timer
        self._clock = clock
        self._rng = rng
        self._state = SessionState()
        self._phase = SessionPhase.NOT_STARTED
        self._config: Optional[SessionConfig] = None
        self._hooks = HookDispatcher()
        self._logger = SessionLogger(None, clock)
        self._typist: Optional[TypingSimulator] = None
        self._executor = StepExecutor(self._log, self._record_error)
        self._on_log: List[Callable[[str], None]] = []
        self._on_done: List[Callable[[bool, str], None]] = []
        self.last_error: Optional[BaseException] = None
        self._session_id = 0

    def on_log(self, cb: Callable[[str], None]) -> None:
        """Receive every trace line written and every status note."""
        self._on_log.append(cb)

    def on_done(self, cb: Callable[[bool, str], None]) -> None:
        self._on_done.append(cb)

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def counter(self) -> int:
        return self._state.counter

    @property
    def logger(self) -> SessionLogger:
        return self._logger

    def is_running(self) -> bool:
        return self._phase in (SessionPhase.RUNNING, SessionPhase.FINALIZING)

    def run(self, config: Optional[Any] = None, **options: Any) -> bool:
        """
        Validate the configuration and start playing the steps back.

        Returns as soon as the first turn is scheduled. Raises
        ConfigurationError (or UnknownLogTargetKind) for a bad configuration;
        nothing else escapes from a running session.
        """
        if self.is_running():
            self._notify("Already running")
            return False

        if config is None:
            config = SessionConfig.from_options(**options)
        elif isinstance(config, dict):
            config = SessionConfig.from_options(**{**config, **options})
        elif options:
            raise ConfigurationError("Pass either a SessionConfig or keyword options, not both")
        elif not isinstance(config, SessionConfig):
            raise ConfigurationError(f"Unsupported configuration: {config!r}")

        self._logger = SessionLogger(
            config.log_target, self._clock, getattr(self._host, "append_to_buffer", None)
        )
        self._config = config
        self._hooks = HookDispatcher(config.hooks)
        self._typist = None
        if config.typing_style is TypingStyle.HUMAN:
            self._typist = TypingSimulator(self._timer, self._host.send_input, self._rng)
        self._state = SessionState(steps=deque(config.steps), start_time=self._clock())
        self._session_id += 1
        self.last_error = None

        self._phase = SessionPhase.RUNNING
        # A failing before_start hook is picked up by the first decision below.
        self._fire("before_start")
        self._schedule_next()
        return True

    def capture_frame(self, pattern: str, command: Optional[List[str]] = None):
        """Capture the screen to pattern % <current step counter>."""
        from .capture import capture_frame

        return capture_frame(pattern, self._state.counter, command)

    # Scheduler ---------------------------------------------------------

    def _schedule_next(self, delay_override: Optional[float] = None) -> None:
        if self._phase is not SessionPhase.RUNNING:
            return
        state = self._state
        if state.pending_error is not None:
            self._fail()
            return

        if not state.steps:
            if not self._fire("after_step"):
                self._fail()
                return
            self._timer.schedule(self._config.delay_between_steps, self._final_turn)
            return

        if state.counter != 0 and not self._fire("after_step"):
            self._fail()
            return
        self._timer.schedule(self._delay_before(state.steps[0], delay_override), self._step_turn)

    def _delay_before(self, step: Any, delay_override: Optional[float]) -> float:
        if delay_override is not None:
            return delay_override
        if isinstance(step, (CallStep, TypeStep)):
            return self._config.delay_between_steps
        return PACING_DELAY

    def _step_turn(self) -> None:
        if self._phase is not SessionPhase.RUNNING:
            return
        state = self._state
        # An error recorded after this turn was scheduled wins over the next step.
        if state.pending_error is not None or not self._fire("before_step"):
            self._fail()
            return

        step = state.steps.popleft()
        state.counter += 1
        ctx = StepContext(
            self._host,
            schedule_next=self._schedule_next,
            log=self._log,
            record_error=self._record_error,
            namespace=self._config.namespace,
            typist=self._typist,
            is_live=self._is_live_check(),
        )
        self._executor.execute(step, ctx)

    def _final_turn(self) -> None:
        if self._phase is not SessionPhase.RUNNING:
            return
        if self._state.pending_error is not None:
            self._fail()
            return
        self._phase = SessionPhase.FINALIZING
        self._after_end(True, "Completed")

    def _fail(self) -> None:
        error = self._state.pending_error
        detail = describe_error(error)
        self._log_quietly(f"ERROR {detail}")
        self._phase = SessionPhase.FINALIZING
        self.last_error = error
        # after_end may start the next session, which replaces self._hooks.
        hooks = self._hooks
        self._after_end(False, detail)
        hooks.schedule_on_error(
            self._timer, ERROR_HOOK_DELAY,
            on_failure=lambda e: self._notify(f"on_error hook failed: {describe_error(e)}"),
        )

    def _after_end(self, ok: bool, message: str) -> None:
        self._log_quietly("END")
        self._state.reset()
        self._phase = SessionPhase.ENDED
        try:
            self._hooks.fire("after_end")
        except Exception as e:
            self._notify(f"after_end hook failed: {describe_error(e)}")
        for cb in list(self._on_done):
            try:
                cb(ok, message)
            except Exception:
                pass

    # Helpers -----------------------------------------------------------

    def _is_live_check(self) -> Callable[[], bool]:
        """True while the session that is current now is still running."""
        session_id = self._session_id
        return lambda: self._session_id == session_id and self._phase is SessionPhase.RUNNING

    def _fire(self, point: str) -> bool:
        """Run a hook; a failing hook becomes the session's pending error."""
        try:
            self._hooks.fire(point)
            return True
        except Exception as e:
            self._record_error(e)
            return False

    def _record_error(self, error: BaseException) -> None:
        if self._phase is not SessionPhase.RUNNING:
            self._notify(f"Error after session end: {describe_error(error)}")
            return
        if self._state.pending_error is None:
            self._state.pending_error = error
        else:
            self._notify(f"Ignoring further error: {describe_error(error)}")

    def _log(self, message: str) -> None:
        entry = self._logger.log(message, self._state.counter, self._state.start_time)
        if entry is not None:
            self._notify(str(entry).rstrip("\n"))

    def _log_quietly(self, message: str) -> None:
        # Terminal lines must not stop the session from finalizing.
        try:
            self._log(message)
        except Exception as e:
            self._notify(f"Could not write log line {message!r}: {e}")

    def _notify(self, message: str) -> None:
        for cb in list(self._on_log):
            try:
                cb(message)
            except Exception:
                pass


def run_session(config: Optional[Any] = None, *, host, timer, **options: Any) -> DirectorEngine:
    """Create an engine and start a session on it. Returns the engine."""
    engine = DirectorEngine(host, timer)
    engine.run(config, **options)
    return engine
