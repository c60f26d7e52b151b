import pytest

from director.errors import ConfigurationError
from director.models import LogTarget, TypingStyle
from director.script_model import DirectorScript
from director.settings_manager import DirectorSettings
from director.steps import CallStep, LogStep, WaitStep


def test_from_dict_parses_steps_and_options():
    script = DirectorScript.from_dict({
        "name": "smoke",
        "delay_between_steps": 0.25,
        "typing_style": "human",
        "log_target": {"kind": "file", "name": "trace.log"},
        "steps": [
            {"type": "call", "command": "<<Open>>"},
            {"type": "wait", "milliseconds": 500},
            {"type": "log", "value": "opened"},
            {"type": "levitate"},
        ],
    })
    assert script.name == "smoke"
    assert script.steps[:3] == [CallStep("<<Open>>"), WaitStep(0.5), LogStep("opened")]
    assert script.steps[3] == {"type": "levitate"}
    assert script.typing_style is TypingStyle.HUMAN
    assert script.log_target == LogTarget("file", "trace.log")


def test_to_config_fills_unset_options_from_settings():
    script = DirectorScript.from_dict({"steps": [{"type": "log", "value": 1}], "delay_between_steps": 0.3})
    settings = DirectorSettings(1.0, TypingStyle.HUMAN, LogTarget("buffer", "trace"))

    config = script.to_config(settings)
    assert config.delay_between_steps == 0.3
    assert config.typing_style is TypingStyle.HUMAN
    assert config.log_target == LogTarget("buffer", "trace")


def test_to_config_without_steps_fails():
    with pytest.raises(ConfigurationError):
        DirectorScript.from_dict({"name": "empty"}).to_config()


@pytest.mark.parametrize("delay", [[1], {"ms": 5}, "soon"])
def test_non_numeric_delay_is_a_configuration_error(delay):
    with pytest.raises(ConfigurationError):
        DirectorScript.from_dict({"steps": [{"type": "log", "value": 1}], "delay_between_steps": delay})
