"""Client runtime bootstrap rendered from a Jinja template."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .io_utils import script_json_dumps

TEMPLATES_DIR = Path(__file__).parent / "templates"
RUNTIME_TEMPLATE = "runtime.js.jinja"

_CLOSING_SCRIPT = re.compile(r"</(script)", re.IGNORECASE)


@lru_cache(maxsize=1)
def runtime_env() -> Environment:
    """Jinja environment for JavaScript templates (no HTML autoescaping)."""

    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def guard_script_text(js: str) -> str:
    """Keep literal ``</script`` inside handler text from closing the element."""

    return _CLOSING_SCRIPT.sub(r"<\\/\1", js)


def compose_bootstrap(
    refs: Mapping[str, str], state: Mapping[str, Any], behavior: str
) -> str:
    """Return the load-deferred IIFE: refs, reactive store, then behavior."""

    template = runtime_env().get_template(RUNTIME_TEMPLATE)
    js = template.render(
        refs_json=script_json_dumps(dict(refs)),
        state_json=script_json_dumps(dict(state)),
        behavior=behavior,
    )
    return guard_script_text(js)


__all__ = ["compose_bootstrap", "guard_script_text", "runtime_env"]
