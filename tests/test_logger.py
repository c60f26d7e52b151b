import pytest

from director.errors import ConfigurationError, UnknownLogTargetKind
from director.logger import LogEntry, SessionLogger
from director.models import LogTarget


def test_line_format():
    assert str(LogEntry(elapsed_ms=1234, counter=7, message="STEP (Wait 1)")) == "001234 007 STEP (Wait 1)\n"


def test_no_target_is_noop():
    logger = SessionLogger(None, clock=lambda: 5.0)
    assert logger.log("END", 1, 0.0) is None
    assert logger.get_all_logs() == []


def test_buffer_target_appends_relative_time():
    written = []
    logger = SessionLogger(
        LogTarget("buffer", "*director*"), clock=lambda: 10.25,
        append_to_buffer=lambda name, text: written.append((name, text)),
    )
    logger.log("LOG a", 2, start_time=10.0)
    assert written == [("*director*", "000250 002 LOG a\n")]


def test_missing_start_time_logs_zero():
    written = []
    logger = SessionLogger(LogTarget("buffer", "b"), clock=lambda: 99.0,
                           append_to_buffer=lambda name, text: written.append(text))
    logger.log("END", 0, None)
    assert written == ["000000 000 END\n"]


def test_file_target_appends(tmp_path):
    path = tmp_path / "trace.log"
    path.write_text("existing\n", encoding="utf-8")
    logger = SessionLogger(LogTarget("FILE", str(path)), clock=lambda: 1.0)
    logger.log("END", 3, 0.5)
    assert path.read_text(encoding="utf-8") == "existing\n000500 003 END\n"


def test_unknown_kind_is_rejected():
    with pytest.raises(UnknownLogTargetKind):
        SessionLogger(LogTarget("printer", "lp0"), clock=lambda: 0.0)


def test_buffer_target_needs_sink():
    with pytest.raises(ConfigurationError):
        SessionLogger(LogTarget("buffer", "b"), clock=lambda: 0.0)


def test_history_is_trimmed_and_exportable(tmp_path):
    logger = SessionLogger(LogTarget("buffer", "b"), clock=lambda: 0.0,
                           append_to_buffer=lambda name, text: None, max_entries=3)
    for i in range(5):
        logger.log(f"LOG {i}", i, 0.0)
    assert [e.message for e in logger.get_all_logs()] == ["LOG 2", "LOG 3", "LOG 4"]
    assert [e.message for e in logger.get_recent_logs(1)] == ["LOG 4"]

    out = tmp_path / "export.log"
    assert logger.export_logs_to_file(str(out)) is True
    assert out.read_text(encoding="utf-8").splitlines()[0] == "000000 002 LOG 2"
    logger.clear_logs()
    assert logger.get_all_logs() == []
