"""Style registry: named rule sets flushed into one stylesheet."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Tuple

from .errors import StyleDefinitionError
from .io_utils import warn

_UPPER = re.compile(r"[A-Z]")


def to_kebab(prop: str) -> str:
    """Convert ``backgroundColor`` to ``background-color``.

    Already-kebab names and custom properties (``--accent``) pass through.
    """
    if prop.startswith("--"):
        return prop
    return _UPPER.sub(lambda match: "-" + match.group(0).lower(), prop)


def normalize_declarations(declarations: Any) -> List[Tuple[str, str]]:
    if not isinstance(declarations, Mapping):
        raise StyleDefinitionError(
            f"declarations must be a mapping, got {type(declarations).__name__}"
        )
    normalized: List[Tuple[str, str]] = []
    for prop, value in declarations.items():
        if not isinstance(prop, str) or not prop.strip():
            raise StyleDefinitionError(f"invalid property name {prop!r}")
        if value is None or isinstance(value, (Mapping, list, tuple, set)):
            raise StyleDefinitionError(f"invalid value for {prop!r}: {value!r}")
        normalized.append((to_kebab(prop.strip()), str(value)))
    return normalized


def inline_style(declarations: List[Tuple[str, str]]) -> str:
    return " ".join(f"{prop}: {value};" for prop, value in declarations)


@dataclass(frozen=True)
class StyleRule:
    selector: str
    declarations: Tuple[Tuple[str, str], ...]

    def to_css(self) -> str:
        body = inline_style(list(self.declarations))
        return f"{self.selector} {{ {body} }}" if body else f"{self.selector} {{ }}"


class StyleRegistry:
    """Accumulates rules in insertion order; no dedup, later rules win ties."""

    def __init__(self) -> None:
        self.rules: List[StyleRule] = []

    def __len__(self) -> int:
        return len(self.rules)

    def define_rule(self, selector: str, declarations: Mapping[str, Any], raw: bool = False) -> bool:
        """Register a rule; return ``False`` (and log) when it is malformed."""
        try:
            if not isinstance(selector, str) or not selector.strip():
                raise StyleDefinitionError(f"invalid selector {selector!r}")
            normalized = normalize_declarations(declarations)
        except StyleDefinitionError as exc:
            warn(f"Skipped rule {selector!r}: {exc}", component="style")
            return False
        full_selector = selector if raw else f".{selector}"
        self.rules.append(StyleRule(full_selector, tuple(normalized)))
        return True

    def render(self) -> str:
        return "\n".join(rule.to_css() for rule in self.rules)

    def clear(self) -> None:
        self.rules.clear()

    def flush(self) -> str:
        css = self.render()
        self.clear()
        return css


__all__ = ["StyleRegistry", "StyleRule", "inline_style", "normalize_declarations", "to_kebab"]
