"""Shared models for parsed documents and lint results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List


class MessageLevel(str, Enum):
    """Severity for validation messages."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(slots=True)
class ValidationMessage:
    """Represents a validation message."""

    level: MessageLevel
    text: str


@dataclass(slots=True)
class ParsedDocument:
    """Raw content of a ``config.rb`` document before model validation."""

    values: Dict[str, Any] = field(default_factory=dict)
    requires: List[str] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)

    def as_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.values)
        data["requires"] = list(self.requires)
        data["comments"] = list(self.comments)
        return data


@dataclass(slots=True)
class ValidationResult:
    """Outcome of a lint run."""

    errors: List[ValidationMessage] = field(default_factory=list)
    warnings: List[ValidationMessage] = field(default_factory=list)
    infos: List[ValidationMessage] = field(default_factory=list)

    def extend(self, messages: Iterable[ValidationMessage]) -> None:
        for msg in messages:
            if msg.level == MessageLevel.ERROR:
                self.errors.append(msg)
            elif msg.level == MessageLevel.WARNING:
                self.warnings.append(msg)
            else:
                self.infos.append(msg)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


__all__ = [
    "MessageLevel",
    "ValidationMessage",
    "ParsedDocument",
    "ValidationResult",
]
