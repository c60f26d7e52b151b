import sys
import types

from director import input_backend


class FakeController:
    pressed = []

    def press(self, key):
        FakeController.pressed.append(key)

    def release(self, key):
        pass


def test_pynput_path_maps_special_keys(monkeypatch):
    FakeController.pressed = []
    keys = types.SimpleNamespace(enter="KEY_ENTER", tab="KEY_TAB")
    monkeypatch.setattr(input_backend.sys, "platform", "linux")
    monkeypatch.setattr(input_backend, "_get_pynput", lambda: (FakeController, keys))

    input_backend.send_events(["h", "<ENTER>", "<TAB>"])
    assert FakeController.pressed == ["h", "KEY_ENTER", "KEY_TAB"]


def test_pyautogui_fallback(monkeypatch):
    calls = []
    fake = types.SimpleNamespace(
        press=lambda key: calls.append(("press", key)),
        write=lambda text: calls.append(("write", text)),
    )
    monkeypatch.setattr(input_backend.sys, "platform", "linux")
    monkeypatch.setattr(input_backend, "_get_pynput", lambda: (None, None))
    monkeypatch.setitem(sys.modules, "pyautogui", fake)

    input_backend.send_events(["a", "<PAGE_DOWN>"])
    assert calls == [("write", "a"), ("press", "pagedown")]


def test_empty_batch_sends_nothing(monkeypatch):
    def unexpected():
        raise AssertionError("backend should not be touched")

    monkeypatch.setattr(input_backend, "_get_pynput", unexpected)
    input_backend.send_events([])


def test_pywinauto_spelling():
    assert input_backend._to_pywinauto(["a", "+", "<ENTER>", "("]) == "a{+}{ENTER}{(}"


def test_pynput_failure_falls_back_for_unsent_events_only(monkeypatch):
    FakeController.pressed = []
    fallback = []

    class FlakyController(FakeController):
        def press(self, key):
            if key == "d":
                raise OSError("display went away")
            super().press(key)

    keys = types.SimpleNamespace(enter="KEY_ENTER")
    fake_pyautogui = types.SimpleNamespace(
        press=lambda key: fallback.append(("press", key)),
        write=lambda text: fallback.append(("write", text)),
    )
    monkeypatch.setattr(input_backend.sys, "platform", "linux")
    monkeypatch.setattr(input_backend, "_get_pynput", lambda: (FlakyController, keys))
    monkeypatch.setitem(sys.modules, "pyautogui", fake_pyautogui)

    input_backend.send_events(["a", "<ENTER>", "cde", "f"])
    assert FakeController.pressed == ["a", "KEY_ENTER", "c"]
    assert fallback == [("write", "de"), ("write", "f")]
