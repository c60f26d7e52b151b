"""
Error taxonomy for director sessions.

Only ConfigurationError (and UnknownLogTargetKind, detected while the session
is being set up) escapes to the caller. Everything raised while a step runs is
captured by the engine and reported through the session's error path.
"""


class DirectorError(Exception):
    pass


class ConfigurationError(DirectorError):
    """A required option is missing or an option has an invalid value."""


class AssertionFailed(DirectorError):
    """An assert step evaluated to a false value."""

    def __init__(self, form: str):
        super().__init__(f"Expectation failed: {form}")
        self.form = form


class MalformedStep(DirectorError):
    """A step descriptor did not match any known variant."""

    def __init__(self, descriptor):
        super().__init__(f"Malformed step: {descriptor!r}")
        self.descriptor = descriptor


class UnknownLogTargetKind(DirectorError):
    def __init__(self, kind):
        super().__init__(f"Unknown log target kind: {kind!r}")
        self.kind = kind


class CommandNotFound(DirectorError):
    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name
