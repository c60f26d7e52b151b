"""
Director: scripted interactive sessions for Tk-driven desktop applications.

A session plays back a list of steps (commands, typed input, waits, asserts
and log statements) on the host's event loop with realistic pacing, so
interactive behavior can be exercised and verified automatically.

Key parts
---------
- steps:       Step variants and their parser
- engine:      Scheduler that drives a session turn by turn on the timer
- executor:    Runs one step and captures its failures
- typing_sim:  Human-paced typing, one key per timer turn
- logger:      Trace lines ("%06d %03d %s") to a buffer or file
- host/timer:  Tk-backed host, keyboard injection and timer facade
"""

from .engine import DirectorEngine, run_session
from .errors import (
    AssertionFailed,
    CommandNotFound,
    ConfigurationError,
    DirectorError,
    MalformedStep,
    UnknownLogTargetKind,
)
from .models import LogTarget, SessionConfig, SessionHooks, SessionPhase, TypingStyle
from .steps import AssertStep, CallStep, Expression, LogStep, TypeStep, WaitStep

__all__ = [
    "DirectorEngine",
    "run_session",
    "SessionConfig",
    "SessionHooks",
    "SessionPhase",
    "LogTarget",
    "TypingStyle",
    "CallStep",
    "LogStep",
    "TypeStep",
    "WaitStep",
    "AssertStep",
    "Expression",
    "DirectorError",
    "ConfigurationError",
    "AssertionFailed",
    "MalformedStep",
    "UnknownLogTargetKind",
    "CommandNotFound",
]
