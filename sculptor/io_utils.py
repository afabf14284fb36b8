"""Utility helpers for JSON embedding, YAML loading and logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("sculptor")

_SCRIPT_UNSAFE = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def stable_json_dumps(obj: object) -> str:
    """Serialize JSON in a stable, human-readable way with a trailing newline."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def script_json_dumps(obj: object) -> str:
    """Serialize JSON compactly for embedding inside a ``<script>`` element.

    Markup-significant characters are escaped so string values can never close
    the surrounding element.
    """
    text = json.dumps(obj, ensure_ascii=False, separators=(", ", ": "))
    for char, escaped in _SCRIPT_UNSAFE.items():
        text = text.replace(char, escaped)
    return text


def read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def warn(msg: str, *, component: str | None = None, exc_info: bool = False) -> None:
    """Log a contained problem with a component prefix."""
    tag = "Sculptor" if component is None else f"Sculptor:{component}"
    if exc_info:
        logger.error("[%s] %s", tag, msg, exc_info=True)
    else:
        logger.warning("[%s] %s", tag, msg)


def info(msg: str, *, component: str | None = None) -> None:
    tag = "Sculptor" if component is None else f"Sculptor:{component}"
    logger.info("[%s] %s", tag, msg)
