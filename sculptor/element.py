"""Fluent builder wrapper around one document element."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Union

from bs4.element import PageElement, Tag

from .behavior import Handler, coerce_handler
from .errors import AppendError, BindingError
from .io_utils import warn
from .styles import inline_style, normalize_declarations

if TYPE_CHECKING:  # pragma: no cover
    from .engine import Sculptor


def _flatten(items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        if isinstance(item, (list, tuple)):
            yield from _flatten(item)
        else:
            yield item


class Element:
    """One tag in the output tree.

    Mutators return the element so construction can be chained. Hooks that
    need to find the element client-side (events, refs, text bindings) assign
    an id the first time one is needed and reuse it afterwards.
    """

    def __init__(self, tag: str, engine: "Sculptor") -> None:
        self.engine = engine
        self.el: Tag = engine.document.create_element(tag)
        self.tag = self.el.name
        self._hooked = False
        self._style_base = ""
        self._style: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"Element(<{self.tag}> id={self.id!r})"

    @property
    def id(self) -> str | None:
        return self.el.get("id")

    def ensure_id(self) -> str:
        """Return the element id, allocating one on first use by a hook."""
        if not self.el.get("id"):
            self.el["id"] = self.engine.ids.element_id()
        self._hooked = True
        return self.el["id"]

    # --- core mutators ---

    def set_id(self, value: str) -> "Element":
        current = self.el.get("id")
        if self._hooked and current != value:
            raise BindingError(
                f"<{self.tag}> id {current!r} is already referenced by bound behavior"
            )
        self.engine.ids.reserve_id(value)
        self.el["id"] = value
        return self

    def set_text(self, value: Any) -> "Element":
        """Replace children with one text node; markup in ``value`` is escaped."""
        self.el.string = "" if value is None else str(value)
        return self

    def set_attribute(self, key: str, value: Any) -> "Element":
        if key == "id":
            return self.set_id(str(value))
        if key == "class":
            self.el["class"] = []
            return self.add_class(str(value))
        if key == "style":
            base = str(value).strip()
            self._style_base = base if not base or base.endswith(";") else base + ";"
            self._style.clear()
        self.el[key] = "" if value is True else str(value)
        return self

    def set_inline_style(self, declarations: Mapping[str, Any]) -> "Element":
        """Merge declarations into the inline style; values are kept verbatim."""
        self._style.update(normalize_declarations(declarations))
        parts = [self._style_base, inline_style(list(self._style.items()))]
        self.el["style"] = " ".join(part for part in parts if part)
        return self

    def add_class(self, names: Union[str, Iterable[str]]) -> "Element":
        if isinstance(names, str):
            names = names.split()
        classes = list(self.el.get("class", []))
        for name in names:
            if name and name not in classes:
                classes.append(name)
        self.el["class"] = classes
        return self

    def scoped_class(self, declarations: Mapping[str, Any]) -> "Element":
        """Generate a fresh class, register its rule, and apply it here."""
        name = self.engine.ids.class_name()
        if self.engine.styles.define_rule(name, declarations):
            self.add_class(name)
        return self

    # --- reactivity and behavior ---

    def bind_text(self, state_key: str, transform: Handler | None = None) -> "Element":
        if transform is not None:
            transform = coerce_handler(transform, role="transform")
        self.engine.behavior.record_state_watch(state_key, self.ensure_id(), transform)
        return self

    def ref(self, name: str) -> "Element":
        self.engine.refs.register(name, self.ensure_id())
        return self

    def on(self, event: str, handler: Handler) -> "Element":
        source = coerce_handler(handler)
        self.engine.behavior.record_event(self.ensure_id(), event, source)
        return self

    def on_click(self, handler: Handler) -> "Element":
        return self.on("click", handler)

    def oncreate(self, handler: Handler) -> "Element":
        self.engine.oncreate(handler)
        return self

    # --- structure ---

    def append(self, *items: Any) -> "Element":
        """Append elements, raw soup nodes or text; nested lists are flattened.

        Falsy items are skipped. Anything else raises ``AppendError`` unless
        the engine is lenient, in which case it is logged and skipped.
        """
        for item in _flatten(items):
            if not item:
                continue
            if isinstance(item, Element):
                self.el.append(item.el)
            elif isinstance(item, (PageElement, str)):
                self.el.append(item)
            elif self.engine.settings.lenient:
                warn(f"Skipped unsupported child {item!r} of <{self.tag}>", component="element")
            else:
                raise AppendError(f"cannot append {type(item).__name__} to <{self.tag}>: {item!r}")
        return self

    def create_child(self, tag: str) -> "Element":
        child = self.engine.create(tag)
        self.append(child)
        return child


__all__ = ["Element"]
