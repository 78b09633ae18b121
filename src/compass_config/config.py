"""Configuration loading and validation for Compass project settings."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, validator

from .dsl import parse_config_rb, render_config_rb
from .errors import ConfigError, ParseError
from .models import ParsedDocument


class OutputStyle(str, Enum):
    """Formatting mode for generated CSS."""

    COMPRESSED = "compressed"
    EXPANDED = "expanded"
    NESTED = "nested"
    COMPACT = "compact"


OPTION_NAMES = (
    "http_path",
    "css_dir",
    "sass_dir",
    "images_dir",
    "javascripts_dir",
    "line_comments",
    "output_style",
)

DIRECTORY_OPTIONS = ("css_dir", "sass_dir", "images_dir", "javascripts_dir")

DEFAULT_REQUIRES = ["compass/import-once/activate"]
DEFAULT_COMMENTS = ["after changing SCSS: compass compile"]

SUFFIX_FORMATS = {
    ".rb": "rb",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


class CompassConfig(BaseModel):
    """Top-level Compass project settings."""

    http_path: str = "/"
    css_dir: str = "stylesheets"
    sass_dir: str = "_compass_sass"
    images_dir: str = "images"
    javascripts_dir: str = "javascripts"
    line_comments: bool = False
    output_style: OutputStyle = OutputStyle.COMPRESSED
    requires: List[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRES))
    comments: List[str] = Field(default_factory=lambda: list(DEFAULT_COMMENTS))

    class Config:
        extra = "forbid"
        frozen = True

    @validator("http_path", "css_dir", "sass_dir", "images_dir", "javascripts_dir", pre=True)
    def require_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("must be a string")
        return value

    @validator("line_comments", pre=True)
    def require_boolean(cls, value: Any) -> Any:
        if not isinstance(value, bool):
            raise ValueError("must be true or false")
        return value

    @validator("output_style", pre=True)
    def normalize_style(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lstrip(":").lower()
        return value

    @validator("requires", "comments", pre=True)
    def coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @validator("comments")
    def split_comment_lines(cls, value: List[str]) -> List[str]:
        # config.rb comments are single lines
        lines: List[str] = []
        for comment in value:
            lines.extend(part.strip() for part in comment.splitlines() or [""])
        return lines

    def options(self) -> Dict[str, Any]:
        """Return the seven recognised options in canonical order."""

        return {name: getattr(self, name) for name in OPTION_NAMES}

    def to_mapping(self) -> Dict[str, Any]:
        """Plain data suitable for YAML or JSON serialisation."""

        data: Dict[str, Any] = dict(self.options())
        data["output_style"] = self.output_style.value
        data["requires"] = list(self.requires)
        data["comments"] = list(self.comments)
        return data


def detect_format(path: Path) -> str:
    """Return the document format implied by the file suffix."""

    try:
        return SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError as exc:
        supported = ", ".join(sorted(SUFFIX_FORMATS))
        raise ConfigError(f"Unsupported configuration format '{path.suffix}' (expected one of {supported})") from exc


def config_from_mapping(data: Any) -> CompassConfig:
    """Validate plain data into a :class:`CompassConfig`."""

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Invalid configuration: top-level must be a mapping")
    try:
        return CompassConfig.parse_obj(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def loads_config(text: str, fmt: str) -> CompassConfig:
    """Parse configuration text in the given format."""

    if fmt == "rb":
        document = parse_config_rb(text)
        return config_from_mapping(document.as_mapping())
    if fmt == "yaml":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML: {exc}") from exc
        return config_from_mapping(data)
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse JSON: {exc}") from exc
        return config_from_mapping(data)
    raise ConfigError(f"Unknown configuration format '{fmt}'")


def dumps_config(config: CompassConfig, fmt: str) -> str:
    """Render configuration text in the given format."""

    if fmt == "rb":
        return render_config_rb(config)
    if fmt == "yaml":
        return yaml.safe_dump(config.to_mapping(), sort_keys=False)
    if fmt == "json":
        return json.dumps(config.to_mapping(), indent=2) + "\n"
    raise ConfigError(f"Unknown configuration format '{fmt}'")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Configuration file is not valid UTF-8: {path} ({exc})") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file {path}: {exc}") from exc


def read_document(path: Path) -> ParsedDocument:
    """Parse a ``config.rb`` file without validating it into a model."""

    try:
        return parse_config_rb(_read_text(path))
    except ParseError as exc:
        raise ParseError(exc.message, line=exc.line, text=exc.text, source=path) from exc


def load_config(path: Path) -> CompassConfig:
    """Load configuration from a ``config.rb``, YAML or JSON file."""

    fmt = detect_format(path)
    if fmt == "rb":
        config = config_from_mapping(read_document(path).as_mapping())
    else:
        config = loads_config(_read_text(path), fmt)
    logger.info("Loaded {} configuration from {}", fmt, path)
    return config


def save_config(config: CompassConfig, path: Path) -> None:
    """Persist configuration to disk in the format implied by the suffix."""

    fmt = detect_format(path)
    rendered = dumps_config(config, fmt)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rendered, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to write configuration file {path}: {exc}") from exc
    logger.info("Wrote {} configuration to {}", fmt, path)


__all__ = [
    "CompassConfig",
    "ConfigError",
    "OutputStyle",
    "ParseError",
    "config_from_mapping",
    "detect_format",
    "dumps_config",
    "load_config",
    "loads_config",
    "read_document",
    "save_config",
]
