"""BeautifulSoup-backed document shell for a single page."""

from __future__ import annotations

import re
from typing import Dict, Optional

from bs4 import BeautifulSoup, Tag

from .errors import ElementCreationError

SHELL = '<!DOCTYPE html><html lang="en"><head></head><body></body></html>'

_TAG_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")


class Document:
    """Owns one soup; elements are created here and mounted into ``body``."""

    def __init__(self) -> None:
        self.soup = BeautifulSoup(SHELL, "html.parser")

    @property
    def html(self) -> Tag:
        return self.soup.html

    @property
    def head(self) -> Tag:
        return self.soup.head

    @property
    def body(self) -> Tag:
        return self.soup.body

    def create_element(self, tag: str, attrs: Optional[Dict[str, str]] = None) -> Tag:
        if not isinstance(tag, str) or not _TAG_NAME.match(tag):
            raise ElementCreationError(tag, "not a valid HTML tag name")
        return self.soup.new_tag(tag.lower(), attrs=dict(attrs or {}))

    def reset(self, *, lang: str = "en") -> None:
        """Empty head and body; mounted nodes are detached, not destroyed."""
        self.head.clear()
        self.body.clear()
        self.html["lang"] = lang

    def serialize(self) -> str:
        return str(self.soup)


__all__ = ["Document", "SHELL"]
