"""Render engine: builds a page tree and compiles it to one HTML document."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from bs4.element import PageElement

from .behavior import BehaviorBuffer, Handler
from .document import Document
from .element import Element
from .errors import NotRenderedError, PersistenceError, RenderError, SculptorError
from .ids import IdAllocator
from .io_utils import info, warn
from .models import EngineSettings, RenderConfig
from .registry import RefMap, StateTable
from .runtime import compose_bootstrap
from .styles import StyleRegistry
from .util_fs import write_text

Root = Union[Element, PageElement, Iterable[Union[Element, PageElement]]]


class Phase(str, Enum):
    IDLE = "idle"
    COMPILING = "compiling"
    COMPILED = "compiled"


class Sculptor:
    """One engine per document.

    Builder calls only mutate elements and the engine's buffers (styles,
    behavior, refs, state). ``render`` compiles everything into
    ``last_rendered`` and, on success, clears the buffers: a second render
    with no new registrations emits an empty stylesheet, empty ref and state
    tables and no behavior statements. Element ids stay on their elements.

    Errors raised while building propagate. Errors inside ``render`` and
    ``save`` are logged, stored on ``last_error`` and never raised, and a
    failed render keeps both the previous output and the buffers.
    """

    def __init__(self, settings: Optional[EngineSettings] = None, **overrides: Any) -> None:
        if settings is None:
            settings = EngineSettings(**overrides)
        elif overrides:
            settings = settings.model_copy(update=overrides)
        self.settings = settings
        self.document = Document()
        self.ids = IdAllocator(
            id_prefix=settings.id_prefix,
            class_prefix=settings.class_prefix,
            deterministic=settings.deterministic,
        )
        self.styles = StyleRegistry()
        self.behavior = BehaviorBuffer()
        self.refs = RefMap()
        self.states = StateTable()
        self.phase = Phase.IDLE
        self.last_rendered: Optional[str] = None
        self.last_error: Optional[SculptorError] = None

    # --- element factory ---

    def create(self, tag: str) -> Element:
        return Element(tag, self)

    def div(self) -> Element:
        return self.create("div")

    def span(self) -> Element:
        return self.create("span")

    def p(self) -> Element:
        return self.create("p")

    def h1(self) -> Element:
        return self.create("h1")

    def h2(self) -> Element:
        return self.create("h2")

    def h3(self) -> Element:
        return self.create("h3")

    def button(self) -> Element:
        return self.create("button")

    def input(self) -> Element:
        return self.create("input")

    def a(self) -> Element:
        return self.create("a")

    def img(self) -> Element:
        return self.create("img")

    def ul(self) -> Element:
        return self.create("ul")

    def li(self) -> Element:
        return self.create("li")

    def form(self) -> Element:
        return self.create("form")

    def label(self) -> Element:
        return self.create("label")

    def section(self) -> Element:
        return self.create("section")

    # --- page-level registrations ---

    def state(self, key: str, value: Any) -> "Sculptor":
        self.states.set(key, value)
        return self

    def define_class(
        self, selector: str, declarations: Mapping[str, Any], raw: bool = False
    ) -> "Sculptor":
        self.styles.define_rule(selector, declarations, raw)
        return self

    def shared_class(self, name: str, declarations: Mapping[str, Any]) -> "Sculptor":
        """Register ``.name`` for use by several elements via ``add_class``."""
        self.ids.reserve_class(name)
        return self.define_class(name, declarations)

    def oncreate(self, handler: Handler) -> "Sculptor":
        self.behavior.record_lifecycle(handler)
        return self

    # --- compile ---

    def _resolve_config(
        self, config: Union[RenderConfig, Mapping[str, Any], None], overrides: Mapping[str, Any]
    ) -> RenderConfig:
        if isinstance(config, RenderConfig):
            if not overrides:
                return config
            data = config.model_dump()
        else:
            data = dict(config or {})
        data.update(overrides)
        return RenderConfig.model_validate(data)

    def _roots(self, root: Root) -> List[PageElement]:
        if isinstance(root, (Element, PageElement, str, bytes)) or not isinstance(root, Iterable):
            items = [root]
        else:
            items = list(root)
        nodes: List[PageElement] = []
        for item in items:
            if isinstance(item, Element):
                nodes.append(item.el)
            elif isinstance(item, PageElement):
                nodes.append(item)
            else:
                raise RenderError(f"cannot mount {type(item).__name__} into <body>: {item!r}")
        return nodes

    def _compile(self, root: Root, cfg: RenderConfig) -> str:
        nodes = self._roots(root)
        doc = self.document
        doc.reset(lang=cfg.lang)
        head, body = doc.head, doc.body

        title = doc.create_element("title")
        title.string = cfg.title
        head.append(title)
        for attrs in cfg.meta:
            head.append(doc.create_element("meta", attrs))
        for src in cfg.scripts:
            head.append(doc.create_element("script", {"src": src, "defer": ""}))
        for href in cfg.css:
            head.append(doc.create_element("link", {"rel": "stylesheet", "href": href}))
        if cfg.icon:
            head.append(doc.create_element("link", {"rel": "icon", "href": cfg.icon}))
        style = doc.create_element("style")
        style.string = self.styles.render()
        head.append(style)

        for node in nodes:
            body.append(node)

        script = doc.create_element("script")
        script.string = compose_bootstrap(
            self.refs.serialize(), self.states.snapshot(), self.behavior.render()
        )
        body.append(script)
        return doc.serialize()

    def _flush(self) -> None:
        self.styles.clear()
        self.behavior.clear()
        self.refs.clear()
        self.states.clear()

    def _contain(self, error: SculptorError, cause: BaseException) -> None:
        if cause is not error:
            error.__cause__ = cause
        self.last_error = error
        warn(str(error), exc_info=True)

    def render(
        self,
        root: Root,
        config: Union[RenderConfig, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> "Sculptor":
        """Compile ``root`` (one node or any iterable of nodes, mounted flat) into HTML."""
        previous = self.phase
        self.phase = Phase.COMPILING
        try:
            cfg = self._resolve_config(config, overrides)
            html = self._compile(root, cfg)
        except Exception as exc:
            if isinstance(exc, RenderError):
                error = exc
            else:
                error = RenderError(f"Render failed: {type(exc).__name__}: {exc}")
            self._contain(error, exc)
            self.phase = previous
            return self

        self._flush()
        self.last_rendered = html
        self.last_error = None
        self.phase = Phase.COMPILED
        info(f"Rendered {len(html)} characters titled {cfg.title!r}")
        return self

    # --- output ---

    def output(self) -> str:
        if self.last_rendered is None:
            raise NotRenderedError()
        return self.last_rendered

    def save(self, path: Union[str, Path]) -> "Sculptor":
        html = self.output()
        try:
            written = write_text(path, html)
        except OSError as exc:
            self._contain(PersistenceError(path, str(exc)), exc)
            return self
        info(f"Saved {written}")
        return self


__all__ = ["Phase", "Root", "Sculptor"]
