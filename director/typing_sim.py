"""Human-paced typing: one input event per timer turn with jittered delays."""

from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence


class TypingSimulator:
    """
    Replays input events one at a time on the timer, then calls on_done once.

    Each call to type() is independent; nothing but the random source is
    shared between runs.
    """

    BASE_DELAY_MS = 50
    JITTER_MS = 25

    def __init__(self, timer, send: Callable[[Sequence[str]], None], rng: Optional[random.Random] = None):
        self._timer = timer
        self._send = send
        self._rng = rng or random.Random()

    def next_delay(self) -> float:
        """Seconds until the next key: 50ms +/- 25ms, whole milliseconds."""
        jitter = self._rng.uniform(-self.JITTER_MS, self.JITTER_MS)
        return int(self.BASE_DELAY_MS + jitter) / 1000.0

    def type(
        self,
        events: Sequence[str],
        on_done: Callable[[], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self._continue(list(events), on_done, on_error)

    def _continue(self, remaining: List[str], on_done, on_error) -> None:
        if not remaining:
            on_done()
            return
        head, rest = remaining[0], remaining[1:]
        try:
            self._send([head])
        except Exception as e:
            # Stop typing; the caller still gets control back exactly once.
            if on_error is None:
                raise
            on_error(e)
            on_done()
            return
        self._timer.schedule(self.next_delay(), lambda: self._continue(rest, on_done, on_error))
