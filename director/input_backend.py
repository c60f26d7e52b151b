"""
Keyboard backends used to inject simulated input into the focused window.

On Windows, we use pywinauto for reliable key dispatch. On other platforms we
send keystrokes through pynput, and fall back to pyautogui when pynput has no
usable backend (e.g. no X server connection).
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, Sequence, Tuple


class InputBackendError(Exception):
    pass


# Bracketed tokens understood in type steps, mapped to pynput Key names
# and pyautogui key names respectively.
SPECIAL_KEYS = {
    "<ENTER>": ("enter", "enter"),
    "<TAB>": ("tab", "tab"),
    "<ESC>": ("esc", "esc"),
    "<BACKSPACE>": ("backspace", "backspace"),
    "<DELETE>": ("delete", "delete"),
    "<HOME>": ("home", "home"),
    "<END>": ("end", "end"),
    "<PAGE_UP>": ("page_up", "pageup"),
    "<PAGE_DOWN>": ("page_down", "pagedown"),
    "<UP>": ("up", "up"),
    "<DOWN>": ("down", "down"),
    "<LEFT>": ("left", "left"),
    "<RIGHT>": ("right", "right"),
    "<SPACE>": ("space", "space"),
}

# pywinauto send_keys spelling of the same tokens
_PYWINAUTO_KEYS = {
    "<ENTER>": "{ENTER}",
    "<TAB>": "{TAB}",
    "<ESC>": "{ESC}",
    "<BACKSPACE>": "{BACKSPACE}",
    "<DELETE>": "{DELETE}",
    "<HOME>": "{HOME}",
    "<END>": "{END}",
    "<PAGE_UP>": "{PGUP}",
    "<PAGE_DOWN>": "{PGDN}",
    "<UP>": "{UP}",
    "<DOWN>": "{DOWN}",
    "<LEFT>": "{LEFT}",
    "<RIGHT>": "{RIGHT}",
    "<SPACE>": "{SPACE}",
}


def tokenize_keys(sequence: str) -> List[str]:
    """Split text into input events: one per character, <TOKEN>s kept whole."""
    out: List[str] = []
    buf = ""
    in_tag = False
    for ch in sequence:
        if ch == "<":
            # A second "<" leaves the first one as plain text.
            out.extend(buf)
            buf = ch
            in_tag = True
        elif ch == ">" and in_tag:
            buf += ch
            if buf.upper() in SPECIAL_KEYS:
                out.append(buf.upper())
            else:
                out.extend(buf)
            buf = ""
            in_tag = False
        else:
            buf += ch
    out.extend(buf)
    return out


def send_events(events: Sequence[str]) -> None:
    """Send a batch of input events to whatever window has focus."""
    if not events:
        return
    if sys.platform.startswith("win") and _try_pywinauto_send_keys(events):
        return
    kb_cls, key_mod = _get_pynput()
    if kb_cls is not None and key_mod is not None:
        sent = 0  # events fully sent
        typed = 0  # characters of events[sent] already sent
        try:
            kb = kb_cls()
            for event in events:
                special = SPECIAL_KEYS.get(event)
                key = getattr(key_mod, special[0], None) if special else None
                if key is None:
                    for ch in event:
                        kb.press(ch); kb.release(ch)
                        typed += 1
                else:
                    kb.press(key); kb.release(key)
                sent += 1
                typed = 0
            return
        except Exception:
            # Only what pynput did not deliver goes to pyautogui.
            events = list(events[sent:])
            if typed:
                events[0] = events[0][typed:]
    _send_with_pyautogui(events)


def _send_with_pyautogui(events: Sequence[str]) -> None:
    try:
        import pyautogui  # local import to avoid hard dep at import time
    except Exception as e:  # pragma: no cover
        raise InputBackendError(f"No keyboard backend available (install pynput or pyautogui): {e}")
    for event in events:
        special = SPECIAL_KEYS.get(event)
        if special:
            pyautogui.press(special[1])
        else:
            pyautogui.write(event)


def _get_pynput() -> Tuple[Optional[Any], Optional[Any]]:
    """Import pynput lazily and return (KeyboardControllerClass, KeyModule)."""
    try:
        from pynput.keyboard import Controller as KeyboardController, Key as KeyModule  # type: ignore
        return KeyboardController, KeyModule
    except Exception:
        return None, None


def _to_pywinauto(events: Sequence[str]) -> str:
    parts = []
    for event in events:
        if event in _PYWINAUTO_KEYS:
            parts.append(_PYWINAUTO_KEYS[event])
        elif len(event) == 1 and event in "+^%~(){}[]":
            parts.append("{" + event + "}")
        else:
            parts.append(event)
    return "".join(parts)


def _try_pywinauto_send_keys(events: Sequence[str], *, pause: float = 0.0) -> bool:
    """Try to send keys via pywinauto on Windows; return True on success."""
    if not sys.platform.startswith("win"):
        return False
    try:
        from pywinauto.keyboard import send_keys as pw_send_keys  # type: ignore
        pw_send_keys(_to_pywinauto(events), with_spaces=True, pause=max(0.0, float(pause)))
        return True
    except Exception:  # pragma: no cover
        return False
