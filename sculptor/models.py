"""Pydantic models for render and engine configuration."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .io_utils import read_yaml

DEFAULT_TITLE = "Sculpted Page"


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return value


class RenderConfig(BaseModel):
    """Head configuration accepted by ``Sculptor.render``.

    Head children are emitted in a fixed order: title, meta tags, external
    scripts, external stylesheets, favicon, then the consolidated ``<style>``.
    """

    title: str = Field(DEFAULT_TITLE, description="Text of the <title> element.")
    meta: List[Dict[str, str]] = Field(
        default_factory=list,
        description="Attribute maps, one <meta> per entry (a single map is accepted).",
    )
    scripts: List[str] = Field(
        default_factory=list,
        description="External script URLs, emitted as deferred <script src> tags.",
    )
    css: List[str] = Field(
        default_factory=list,
        description="External stylesheet URLs, emitted as <link rel=stylesheet>.",
    )
    icon: Optional[str] = Field(None, description="Favicon URL, emitted as <link rel=icon>.")
    lang: str = Field("en", description="Value of the <html lang> attribute.")

    model_config = ConfigDict(extra="forbid")

    @field_validator("scripts", "css", mode="before")
    @classmethod
    def _single_or_many(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("meta", mode="before")
    @classmethod
    def _meta_values_as_text(cls, value: Any) -> Any:
        entries = _as_list(value)
        if not isinstance(entries, list):
            return entries
        return [
            {key: str(val) for key, val in attrs.items()} if isinstance(attrs, dict) else attrs
            for attrs in entries
        ]

    @field_validator("meta")
    @classmethod
    def _meta_not_empty(cls, value: List[Dict[str, str]]) -> List[Dict[str, str]]:
        for attrs in value:
            if not attrs:
                raise ValueError("meta entries must have at least one attribute")
        return value


class EngineSettings(BaseModel):
    """Per-engine behaviour switches."""

    deterministic: bool = Field(
        False, description="Derive id suffixes from counters instead of randomness."
    )
    id_prefix: str = Field("sc-id", description="Prefix for generated element ids.")
    class_prefix: str = Field("sc-cls", description="Prefix for generated class names.")
    lenient: bool = Field(
        False, description="Warn and skip unsupported append() items instead of raising."
    )

    model_config = ConfigDict(extra="forbid")


def load_render_config(path: Path) -> RenderConfig:
    data = read_yaml(path) or {}
    try:
        return RenderConfig.model_validate(data)
    except ValidationError as exc:
        raise SystemExit(f"Invalid render config in {path}: {exc}") from exc


__all__ = ["DEFAULT_TITLE", "EngineSettings", "RenderConfig", "load_render_config"]
