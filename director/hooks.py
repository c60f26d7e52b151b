"""Lifecycle hook dispatch for director sessions."""

from __future__ import annotations

from typing import Callable, Optional

from .models import SessionHooks

SYNC_POINTS = ("before_start", "before_step", "after_step", "after_end")


class HookDispatcher:
    """Invokes the user's hooks at fixed lifecycle points."""

    def __init__(self, hooks: Optional[SessionHooks] = None):
        self._hooks = hooks or SessionHooks()

    def fire(self, point: str) -> None:
        """Call the hook for a synchronous lifecycle point; missing hooks are no-ops."""
        if point not in SYNC_POINTS:
            raise ValueError(f"Unknown hook point: {point}")
        hook = getattr(self._hooks, point)
        if hook is not None:
            hook()

    def has_on_error(self) -> bool:
        return self._hooks.on_error is not None

    def schedule_on_error(self, timer, delay: float, on_failure: Optional[Callable[[BaseException], None]] = None) -> None:
        """
        Run on_error on a fresh timer turn, never inline.

        The hook may tear down the host (e.g. exit the process), so it must not
        run inside the turn that is still finalizing the session.
        """
        hook = self._hooks.on_error
        if hook is None:
            return

        def run() -> None:
            try:
                hook()
            except Exception as e:
                if on_failure is None:
                    raise
                on_failure(e)

        timer.schedule(delay, run)
