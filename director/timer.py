"""Timer facade: run a callback later on the host's event loop."""

from __future__ import annotations

from typing import Callable, Optional
import tkinter as tk


class TkTimer:
    """Schedules callbacks with Tk's after(); timing is best-effort."""

    def __init__(self, root: tk.Misc):
        self._root = root

    def schedule(self, seconds: float, callback: Callable[[], None]) -> Optional[str]:
        ms = max(0, int(round(seconds * 1000)))
        return self._root.after(ms, callback)
