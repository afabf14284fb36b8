"""Deferred client behavior recorded as literal JavaScript source.

Handlers never cross into the browser as Python objects. Callers author them
as text, either a complete function expression::

    "() => alert('hi')"
    "function (event) { event.preventDefault(); }"

or a bare body, which is wrapped for them (statements for events and
lifecycle hooks, a single expression over ``val`` for text transforms)::

    "console.log(1)"
    "`Count: ${val}`"

The text is not parsed here. It must be valid JavaScript and must only refer
to globals available in the page (``UI``, ``State``, ``watchState``, DOM APIs).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

from .errors import InvalidHandlerError
from .io_utils import script_json_dumps

_ASYNC = re.compile(r"^async\s+")
_NAMED_FUNCTION = re.compile(r"^(?:function\b|[A-Za-z_$][\w$]*\s*=>)")
_ARROW = re.compile(r"^\s*=>")


def _closing_paren(text: str) -> int:
    """Index of the parenthesis closing ``text[0]``, or -1 when unbalanced."""
    depth = 0
    quote = ""
    for index, char in enumerate(text):
        if quote:
            if char == quote and text[index - 1] != "\\":
                quote = ""
        elif char in "\"'`":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def is_function_expression(source: str) -> bool:
    text = _ASYNC.sub("", source.strip())
    if _NAMED_FUNCTION.match(text):
        return True
    if not text.startswith("("):
        return False
    end = _closing_paren(text)
    return end != -1 and bool(_ARROW.match(text[end + 1 :]))


class JsSource(str):
    """JavaScript source text destined for the emitted ``<script>``."""

    @property
    def is_function(self) -> bool:
        return is_function_expression(self)

    def as_callable(self, params: str = "event") -> str:
        """Return the source as a function expression taking ``params``."""
        if self.is_function:
            return f"({self.strip()})"
        return f"(function ({params}) {{ {self.strip()} }})"

    def as_transform(self) -> str:
        if self.is_function:
            return f"({self.strip()})"
        return f"((val) => ({self.strip()}))"


Handler = Union[str, JsSource]

IDENTITY = JsSource("(val) => val")


def coerce_handler(value: object, *, role: str = "handler") -> JsSource:
    """Validate a handler argument and wrap it as ``JsSource``."""
    if isinstance(value, JsSource):
        source = value
    elif isinstance(value, str):
        source = JsSource(value)
    elif callable(value):
        raise InvalidHandlerError(
            f"{role} must be JavaScript source text, not a Python callable "
            f"({value!r}); Python functions cannot run in the browser"
        )
    else:
        raise InvalidHandlerError(f"{role} must be JavaScript source text, got {type(value).__name__}")
    if not source.strip():
        raise InvalidHandlerError(f"{role} is empty")
    return source


@dataclass(frozen=True)
class EventBinding:
    element_id: str
    event: str
    source: JsSource

    def to_js(self) -> str:
        return (
            f"document.getElementById({script_json_dumps(self.element_id)})"
            f".addEventListener({script_json_dumps(self.event)}, {self.source.as_callable('event')});"
        )


@dataclass(frozen=True)
class StateWatch:
    state_key: str
    element_id: str
    transform: JsSource

    def to_js(self) -> str:
        return (
            f"window.watchState({script_json_dumps(self.state_key)}, (val) => {{\n"
            f"  const el = document.getElementById({script_json_dumps(self.element_id)});\n"
            f"  if (el) el.textContent = {self.transform.as_transform()}(val);\n"
            f"}});"
        )


@dataclass(frozen=True)
class Lifecycle:
    source: JsSource

    def to_js(self) -> str:
        return f"{self.source.as_callable('')}();"


BehaviorEntry = Union[EventBinding, StateWatch, Lifecycle]


class BehaviorBuffer:
    """Ordered deferred statements, emitted in registration order."""

    def __init__(self) -> None:
        self.entries: List[BehaviorEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def record_event(self, element_id: str, event: str, handler: Handler) -> EventBinding:
        if not isinstance(event, str) or not event.strip():
            raise InvalidHandlerError(f"event name must be a non-empty string, got {event!r}")
        entry = EventBinding(element_id, event.strip(), coerce_handler(handler))
        self.entries.append(entry)
        return entry

    def record_state_watch(
        self, state_key: str, element_id: str, transform: Handler | None = None
    ) -> StateWatch:
        source = IDENTITY if transform is None else coerce_handler(transform, role="transform")
        entry = StateWatch(state_key, element_id, source)
        self.entries.append(entry)
        return entry

    def record_lifecycle(self, handler: Handler) -> Lifecycle:
        entry = Lifecycle(coerce_handler(handler, role="lifecycle handler"))
        self.entries.append(entry)
        return entry

    def render(self) -> str:
        return "\n".join(entry.to_js() for entry in self.entries)

    def clear(self) -> None:
        self.entries.clear()

    def flush(self) -> str:
        js = self.render()
        self.clear()
        return js


__all__ = [
    "BehaviorBuffer",
    "BehaviorEntry",
    "EventBinding",
    "Handler",
    "JsSource",
    "Lifecycle",
    "StateWatch",
    "coerce_handler",
    "is_function_expression",
]
