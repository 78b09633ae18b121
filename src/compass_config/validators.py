"""Validation helpers for Compass project settings."""

from __future__ import annotations

import posixpath
from typing import Iterable, List

from .config import DIRECTORY_OPTIONS, CompassConfig, OutputStyle
from .models import MessageLevel, ParsedDocument, ValidationMessage, ValidationResult


def normalize_directory(value: str) -> str:
    """Normalize a relative directory for comparisons."""

    normalized = posixpath.normpath(value.replace("\\", "/"))
    return normalized.rstrip("/") or "."


def validate_directories(config: CompassConfig) -> List[ValidationMessage]:
    """Directory options must be relative paths inside the project."""

    messages: List[ValidationMessage] = []
    for name in DIRECTORY_OPTIONS:
        value = getattr(config, name)
        if not value.strip():
            messages.append(ValidationMessage(MessageLevel.ERROR, f"{name} must not be empty"))
            continue
        posix = value.replace("\\", "/")
        if posix.startswith("/") or (len(posix) > 1 and posix[1] == ":"):
            messages.append(ValidationMessage(MessageLevel.ERROR, f"{name} '{value}' must be a relative path"))
            continue
        normalized = normalize_directory(value)
        if normalized == ".." or normalized.startswith("../"):
            messages.append(
                ValidationMessage(MessageLevel.ERROR, f"{name} '{value}' points outside the project directory")
            )
    return messages


def validate_distinct_directories(config: CompassConfig) -> List[ValidationMessage]:
    """Source and asset directories must not share a location."""

    messages: List[ValidationMessage] = []
    seen: dict[str, str] = {}
    for name in DIRECTORY_OPTIONS:
        value = getattr(config, name)
        if not value.strip():
            continue
        normalized = normalize_directory(value)
        other = seen.get(normalized)
        if other is not None:
            messages.append(
                ValidationMessage(MessageLevel.ERROR, f"{name} and {other} both point to '{normalized}'")
            )
        else:
            seen[normalized] = name
    return messages


def validate_http_path(config: CompassConfig) -> List[ValidationMessage]:
    if config.http_path.startswith("/"):
        return []
    return [
        ValidationMessage(
            MessageLevel.WARNING,
            f"http_path '{config.http_path}' does not start with '/'; asset URLs will be relative",
        )
    ]


def validate_output(config: CompassConfig) -> List[ValidationMessage]:
    if config.line_comments and config.output_style == OutputStyle.COMPRESSED:
        return [
            ValidationMessage(
                MessageLevel.WARNING,
                "line_comments is enabled but output_style is compressed; annotations will bloat the output",
            )
        ]
    return []


def validate_requires(requires: Iterable[str]) -> List[ValidationMessage]:
    messages: List[ValidationMessage] = []
    seen: set[str] = set()
    for item in requires:
        if item in seen:
            messages.append(ValidationMessage(MessageLevel.WARNING, f"Extension '{item}' is required more than once"))
        seen.add(item)
    return messages


def validate_document(document: ParsedDocument) -> List[ValidationMessage]:
    """Report problems only visible in the raw ``config.rb`` text."""

    return [
        ValidationMessage(
            MessageLevel.WARNING,
            f"Option '{name}' is assigned more than once; the last assignment wins",
        )
        for name in document.duplicates
    ]


def check_config(config: CompassConfig, document: ParsedDocument | None = None) -> ValidationResult:
    """Run every check against a loaded configuration."""

    result = ValidationResult()
    result.extend(validate_directories(config))
    result.extend(validate_distinct_directories(config))
    result.extend(validate_http_path(config))
    result.extend(validate_output(config))
    result.extend(validate_requires(config.requires))
    if document is not None:
        result.extend(validate_document(document))
    return result


__all__ = [
    "check_config",
    "normalize_directory",
    "validate_directories",
    "validate_distinct_directories",
    "validate_document",
    "validate_http_path",
    "validate_output",
    "validate_requires",
]
