"""
Session steps: the closed set of things a script can do.

Supported steps (type field in JSON):
- call:   invoke a host command (callable, registered name or <<VirtualEvent>>)
- log:    evaluate a value and write it to the trace log
- type:   inject keyboard events into the focused window
- wait:   pause before the next step
- assert: evaluate a condition; a false value ends the session with an error

Every step receives a StepContext and is responsible for releasing the
scheduler (ctx.schedule_next) at the right moment. The order of "release the
scheduler" and "perform the effect" differs per step and must be preserved:
commands may block waiting for input, so a call step releases first.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
import json
import keyword
from typing import Any, Callable, Dict, Optional, Tuple, TYPE_CHECKING

from .errors import AssertionFailed, MalformedStep
from .input_backend import tokenize_keys

if TYPE_CHECKING:  # pragma: no cover
    from .executor import StepContext


@dataclass(frozen=True)
class Expression:
    """
    A value looked up in the session namespace when the step runs.

    The source is either a dotted name (``window.title``, attributes after
    the first part) or a Python literal (``[1, 2]``, ``True``). A callable
    result is called without arguments. Nothing else is evaluated.
    """
    source: str

    def __str__(self) -> str:
        return self.source

    def resolve(self, namespace: Dict[str, Any]) -> Any:
        source = self.source.strip()
        parts = source.split(".")
        if not all(part.isidentifier() and not keyword.iskeyword(part) for part in parts):
            return ast.literal_eval(source)
        if parts[0] not in namespace:
            raise NameError(f"name {parts[0]!r} is not defined")
        value = namespace[parts[0]]
        for attr in parts[1:]:
            value = getattr(value, attr)
        return value() if callable(value) else value


def describe(value: Any) -> str:
    """Textual form of a step payload, as written to the trace log."""
    if isinstance(value, Expression):
        return value.source
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return repr(value)


@dataclass(frozen=True)
class Step:
    """Common interface for all steps."""

    kind = "Step"

    def run(self, ctx: "StepContext") -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    def payload_form(self) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def form(self) -> str:
        return f"({self.kind} {self.payload_form()})"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Step":
        step_type = str(data.get("type", "")).strip().lower()
        try:
            if step_type == "call":
                command = data.get("command")
                if not command:
                    raise MalformedStep(data)
                return CallStep(command=command)
            if step_type == "log":
                return LogStep(expression=_value_or_expression(data))
            if step_type == "type":
                if "events" in data:
                    return TypeStep(events=tuple(str(e) for e in data.get("events") or ()))
                return TypeStep.from_text(str(data.get("text", "")))
            if step_type == "wait":
                if "milliseconds" in data:
                    return WaitStep(seconds=int(data.get("milliseconds") or 0) / 1000.0)
                return WaitStep(seconds=float(data.get("seconds", 0.0) or 0.0))
            if step_type == "assert":
                return AssertStep(
                    condition=_value_or_expression(data),
                    description=data.get("description"),
                )
        except (TypeError, ValueError) as e:
            raise MalformedStep(data) from e
        raise MalformedStep(data)


def _value_or_expression(data: Dict[str, Any]) -> Any:
    if "expr" in data:
        return Expression(str(data["expr"]))
    return data.get("value")


@dataclass(frozen=True)
class CallStep(Step):
    command: Any

    kind = "Call"

    def payload_form(self) -> str:
        if isinstance(self.command, str):
            return self.command
        return describe(self.command)

    def run(self, ctx: "StepContext") -> None:
        ctx.schedule_next()
        ctx.call_command(self.command)


@dataclass(frozen=True)
class LogStep(Step):
    expression: Any

    kind = "Log"

    def payload_form(self) -> str:
        return describe(self.expression)

    def run(self, ctx: "StepContext") -> None:
        ctx.schedule_next()
        value = ctx.evaluate(self.expression)
        ctx.log(f"LOG {value}")


@dataclass(frozen=True)
class TypeStep(Step):
    events: Tuple[str, ...]

    kind = "Type"

    @staticmethod
    def from_text(text: str) -> "TypeStep":
        return TypeStep(events=tuple(tokenize_keys(text)))

    def payload_form(self) -> str:
        return " ".join(describe(e) for e in self.events) or '""'

    def run(self, ctx: "StepContext") -> None:
        if ctx.human_typing:
            # The typing simulator releases the scheduler once the last key is sent.
            ctx.type_like_human(self.events)
            return
        ctx.schedule_next()
        ctx.send_input(self.events)


@dataclass(frozen=True)
class WaitStep(Step):
    seconds: float

    kind = "Wait"

    def payload_form(self) -> str:
        return repr(self.seconds)

    def run(self, ctx: "StepContext") -> None:
        ctx.schedule_next(delay_override=self.seconds)


@dataclass(frozen=True)
class AssertStep(Step):
    condition: Any
    description: Optional[str] = None

    kind = "Assert"

    def payload_form(self) -> str:
        return self.description or describe(self.condition)

    def run(self, ctx: "StepContext") -> None:
        ctx.schedule_next()
        if not ctx.evaluate(self.condition):
            raise AssertionFailed(self.payload_form())


_POSITIONAL: Dict[str, Callable[[Any], Step]] = {
    "call": lambda payload: CallStep(command=payload),
    "log": lambda payload: LogStep(expression=payload),
    "type": lambda payload: (
        TypeStep.from_text(payload) if isinstance(payload, str) else TypeStep(events=tuple(payload))
    ),
    "wait": lambda payload: WaitStep(seconds=float(payload)),
    "assert": lambda payload: AssertStep(condition=payload),
}


def coerce_step(raw: Any) -> Any:
    """
    Turn a step descriptor into a Step.

    Accepts Step objects, dicts with a "type" key and (kind, payload) pairs.
    Anything that does not match a variant is returned unchanged so that the
    executor can reject it with MalformedStep when it is dispatched.
    """
    if isinstance(raw, Step):
        return raw
    try:
        if isinstance(raw, dict):
            return Step.from_dict(raw)
        if isinstance(raw, (list, tuple)) and len(raw) == 2 and isinstance(raw[0], str):
            factory = _POSITIONAL.get(raw[0].strip().lower())
            if factory is not None:
                return factory(raw[1])
    except (MalformedStep, TypeError, ValueError):
        pass
    return raw
