"""
Small CLI to play a director script JSON file against a hidden Tk root.

Usage:
    python run_script.py path/to/script.json [settings.json]

Trace lines are printed as they are written; the exit code is 0 when the
session completes, 1 when it ends with an error and 2 for usage problems.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
import tkinter as tk

from director import DirectorEngine, SessionHooks
from director.errors import DirectorError
from director.host import DesktopHost
from director.script_model import DirectorScript
from director.settings_manager import SettingsManager
from director.timer import TkTimer


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Provide path to a JSON script.")
        return 2
    path = Path(args[0])
    if not path.exists():
        print(f"File not found: {path}")
        return 2
    settings_path = Path(args[1]) if len(args) > 1 else None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        script = DirectorScript.from_dict(data)
        settings = SettingsManager(settings_path).load()
    except (TypeError, ValueError, DirectorError) as exc:
        print(f"Invalid script: {exc}")
        return 2

    root = tk.Tk()
    root.withdraw()
    result = {"ok": False}

    def finish(ok: bool, msg: str) -> None:
        result["ok"] = ok
        print(f"DONE: {ok} - {msg}")

    engine = DirectorEngine(DesktopHost(root), TkTimer(root))
    engine.on_log(lambda m: print(m))
    engine.on_done(finish)
    # Quit on a fresh turn so on_error (scheduled right after finalize) still runs.
    hooks = SessionHooks(after_end=lambda: root.after(100, root.quit))
    try:
        engine.run(script.to_config(settings, hooks=hooks))
    except DirectorError as exc:
        print(f"Invalid script: {exc}")
        root.destroy()
        return 2
    root.mainloop()
    root.destroy()
    return 0 if result["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
