"""Exceptions raised while loading configuration documents."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""


class ParseError(ConfigError):
    """Raised when a ``config.rb`` line cannot be understood."""

    def __init__(
        self,
        message: str,
        *,
        line: int,
        text: Optional[str] = None,
        source: Optional[Path] = None,
    ) -> None:
        location = f"{source}, line {line}" if source else f"line {line}"
        super().__init__(f"{location}: {message}")
        self.message = message
        self.line = line
        self.text = text
        self.source = source


__all__ = ["ConfigError", "ParseError"]
