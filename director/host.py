"""
Desktop host: the bridge between a session and the application under test.

A host provides three things to the engine:
- call_command:     dispatch a named interactive command
- send_input:       inject simulated keyboard events
- append_to_buffer: append text to a named buffer-like destination
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence
import tkinter as tk

from .errors import CommandNotFound
from .input_backend import send_events


class DesktopHost:
    """Host backed by a Tk root window and the OS keyboard backends."""

    def __init__(
        self,
        root: Optional[tk.Misc] = None,
        commands: Optional[Dict[str, Callable[[], Any]]] = None,
    ) -> None:
        self._root = root
        self._commands: Dict[str, Callable[[], Any]] = dict(commands or {})
        self._buffers: Dict[str, List[str]] = {}
        self._widgets: Dict[str, tk.Text] = {}

    def register_command(self, name: str, command: Callable[[], Any]) -> None:
        self._commands[name] = command

    def register_buffer(self, name: str, widget: tk.Text) -> None:
        """Route a buffer log target to a Text widget instead of memory."""
        self._widgets[name] = widget

    def call_command(self, command: Any) -> None:
        """
        Run a command interactively.

        Callables are called directly. Strings are looked up in the command
        registry first; Tk virtual events (<<Name>>) are generated on the root.
        """
        if callable(command):
            command()
            return
        name = str(command)
        registered = self._commands.get(name)
        if registered is not None:
            registered()
            return
        if self._root is not None and name.startswith("<<") and name.endswith(">>"):
            self._root.event_generate(name, when="tail")
            return
        raise CommandNotFound(name)

    def send_input(self, events: Sequence[str]) -> None:
        send_events(events)

    def append_to_buffer(self, name: str, text: str) -> None:
        widget = self._widgets.get(name)
        if widget is None:
            self._buffers.setdefault(name, []).append(text)
            return
        previous_state = widget.cget("state")
        widget.configure(state=tk.NORMAL)
        widget.insert(tk.END, text)
        widget.see(tk.END)
        widget.configure(state=previous_state)

    def buffer_text(self, name: str) -> str:
        """Contents of an in-memory buffer ("" if nothing was written)."""
        return "".join(self._buffers.get(name, []))
