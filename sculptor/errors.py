"""Exception hierarchy for the page compiler.

Builder misuse (bad tag names, handlers that are not source text, state that
cannot be serialized) raises immediately. Failures inside ``render`` and
``save`` are wrapped in ``RenderError``/``PersistenceError``, logged, and kept
on the engine instead of propagating.
"""

from __future__ import annotations


class SculptorError(Exception):
    """Base class for all compiler errors."""


class ElementCreationError(SculptorError, ValueError):
    """The document rejected a tag name."""

    def __init__(self, tag: object, reason: str) -> None:
        self.tag = tag
        super().__init__(f"Failed to create <{tag}>: {reason}")


class InvalidHandlerError(SculptorError, TypeError):
    """A handler was not usable client-side source text."""


class StyleDefinitionError(SculptorError, ValueError):
    """A declaration map could not be turned into a CSS rule."""


class InvalidStateError(SculptorError, ValueError):
    """A state entry cannot be seeded into the client store."""


class AppendError(SculptorError, TypeError):
    """An item passed to ``append`` is not a node, raw node, or text."""


class BindingError(SculptorError, ValueError):
    """An element identifier was changed after hooks referenced it."""


class NotRenderedError(SculptorError, RuntimeError):
    """Output was requested before any successful render."""

    def __init__(self) -> None:
        super().__init__("Nothing has been rendered yet; call render() first")


class RenderError(SculptorError):
    """A render call failed; the previous output is kept."""


class PersistenceError(SculptorError, OSError):
    """Writing the rendered document to disk failed."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to write {path}: {reason}")


__all__ = [
    "AppendError",
    "BindingError",
    "ElementCreationError",
    "InvalidHandlerError",
    "InvalidStateError",
    "NotRenderedError",
    "PersistenceError",
    "RenderError",
    "SculptorError",
    "StyleDefinitionError",
]
