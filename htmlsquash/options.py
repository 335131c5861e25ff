"""Pydantic models for minifier configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Mapping, Optional, Pattern

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LOUD_COMMENTS = re.compile(r"\A\s*!")


class JavaScriptEngineOptions(BaseModel):
    """Options passed through to ``rjsmin.jsmin``."""

    keep_bang_comments: bool = Field(
        True, description="Keep /*! ... */ comments in minified JavaScript."
    )

    model_config = ConfigDict(extra="forbid")


class CssEngineOptions(BaseModel):
    """Options passed through to ``rcssmin.cssmin``."""

    keep_bang_comments: bool = Field(
        True, description="Keep /*! ... */ comments in minified CSS."
    )

    model_config = ConfigDict(extra="forbid")


class MinifyOptions(BaseModel):
    """Switches for each stage of the minification pipeline."""

    remove_comments: bool = Field(
        True, description="Remove every comment that is not loud or conditional."
    )
    omit_tags: bool = Field(
        True, description="Omit start and end tags the HTML syntax makes optional."
    )
    compress_spaces: bool = Field(
        True, description="Collapse and drop whitespace that cannot affect rendering."
    )
    loud_comments: Pattern[str] = Field(
        DEFAULT_LOUD_COMMENTS,
        description="Comments whose content matches this pattern are kept.",
    )
    minify_javascript: bool = Field(
        True, description="Minify script elements and event handler attributes."
    )
    minify_css: bool = Field(
        True, description="Minify style elements and style attributes."
    )
    js_options: JavaScriptEngineOptions = Field(
        default_factory=JavaScriptEngineOptions,
        description="Options for the JavaScript minifier.",
    )
    css_options: CssEngineOptions = Field(
        default_factory=CssEngineOptions,
        description="Options for the CSS minifier.",
    )

    model_config = ConfigDict(extra="forbid")


def build_options(
    options: Optional[MinifyOptions | Mapping[str, Any]] = None, **overrides: Any
) -> MinifyOptions:
    """Merge ``options`` and keyword ``overrides`` into validated options."""
    if isinstance(options, MinifyOptions):
        if not overrides:
            return options
        data: dict[str, Any] = options.model_dump()
    else:
        data = dict(options or {})
    data.update(overrides)
    return MinifyOptions.model_validate(data)


def load_options(path: Path) -> MinifyOptions:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of options.")
    return MinifyOptions.model_validate(data)


__all__ = [
    "CssEngineOptions",
    "JavaScriptEngineOptions",
    "MinifyOptions",
    "build_options",
    "load_options",
]
