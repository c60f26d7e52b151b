import subprocess
import sys
import types

import pytest

from director.capture import capture_frame, frame_path


def test_frame_path_substitutes_counter():
    assert str(frame_path("shots/%04d.png", 12)).endswith("0012.png")
    with pytest.raises(ValueError):
        frame_path("shots/%d-%d.png", 1)


def test_external_command_with_placeholder(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", lambda args, check: calls.append((args, check)))

    out = capture_frame(str(tmp_path / "deep" / "dir" / "f%02d.png"), 3, ["import", "-window", "root", "{path}"])
    assert out == tmp_path / "deep" / "dir" / "f03.png"
    assert out.parent.is_dir()
    assert calls == [(["import", "-window", "root", str(out)], True)]


def test_falls_back_to_pyautogui(tmp_path, monkeypatch):
    shots = []
    # pyautogui needs a display at import time; stand in for the screenshot call only.
    monkeypatch.setitem(sys.modules, "pyautogui", types.SimpleNamespace(screenshot=shots.append))

    out = capture_frame(str(tmp_path / "%d.png"), 1)
    assert shots == [str(out)]
