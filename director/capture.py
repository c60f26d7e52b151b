"""Frame capture helper for recording a session one screenshot per step."""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import List, Optional, Sequence


def frame_path(pattern: str, counter: int) -> Path:
    """Substitute the step counter into a %d-style pattern (e.g. "frames/%04d.png")."""
    try:
        return Path(pattern % counter)
    except TypeError as e:
        raise ValueError(f"Pattern needs exactly one integer placeholder: {pattern!r}") from e


def capture_frame(pattern: str, counter: int, command: Optional[Sequence[str]] = None) -> Path:
    """
    Capture the screen to the file named by pattern and counter.

    With a command (e.g. ["import", "-window", "root"]) the external program
    is run with the path substituted for "{path}", or appended when no
    argument contains it. Without one, pyautogui takes the screenshot.
    """
    out = frame_path(pattern, counter)
    out.parent.mkdir(parents=True, exist_ok=True)

    if command:
        args: List[str] = [str(arg).replace("{path}", str(out)) for arg in command]
        if not any("{path}" in str(arg) for arg in command):
            args.append(str(out))
        subprocess.run(args, check=True)
        return out

    import pyautogui  # local import; needs a display

    pyautogui.screenshot(str(out))
    return out
