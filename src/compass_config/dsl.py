"""Reader and writer for the Ruby ``config.rb`` form of the settings."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Tuple

from jinja2 import Environment, FileSystemLoader
from loguru import logger

from .errors import ParseError
from .models import ParsedDocument

if TYPE_CHECKING:  # pragma: no cover
    from .config import CompassConfig


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_NAME = "config.rb.j2"

_REQUIRE_RE = re.compile(r"^require\s+(?P<rest>.+)$")
_ASSIGN_RE = re.compile(r"^(?P<name>[a-z_][a-zA-Z0-9_]*)\s*=\s*(?P<rest>.+)$")
_KEYWORD_RE = re.compile(r"^(true|false|nil)(?![A-Za-z0-9_])")
_SYMBOL_RE = re.compile(r"^:(?P<name>[A-Za-z_][A-Za-z0-9_]*)")
_INTEGER_RE = re.compile(r"^-?\d+(?![A-Za-z0-9_.])")

_DOUBLE_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}
_SINGLE_ESCAPES = {"'": "'", "\\": "\\"}

# Record members filled from require statements and comment lines.
RESERVED_NAMES = ("requires", "comments")

# Sentinel for ``nil``; the option falls back to its default.
NIL = object()


def _read_string(text: str, line_no: int, line: str) -> Tuple[str, str]:
    quote = text[0]
    escapes = _DOUBLE_ESCAPES if quote == '"' else _SINGLE_ESCAPES
    chars = []
    index = 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            following = text[index + 1]
            if following in escapes:
                chars.append(escapes[following])
            else:
                chars.append(char + following)
            index += 2
            continue
        if char == quote:
            return "".join(chars), text[index + 1 :]
        chars.append(char)
        index += 1
    raise ParseError("Unterminated string literal", line=line_no, text=line)


def _read_literal(text: str, line_no: int, line: str) -> Tuple[Any, str]:
    """Return the literal at the start of ``text`` and whatever follows it."""

    if text[:1] in ("'", '"'):
        return _read_string(text, line_no, line)

    match = _KEYWORD_RE.match(text)
    if match:
        keyword = match.group(1)
        value = {"true": True, "false": False, "nil": NIL}[keyword]
        return value, text[match.end() :]

    match = _SYMBOL_RE.match(text)
    if match:
        return match.group("name"), text[match.end() :]

    match = _INTEGER_RE.match(text)
    if match:
        return int(match.group(0)), text[match.end() :]

    raise ParseError(f"Unsupported value '{text.strip()}'", line=line_no, text=line)


def _read_trailer(rest: str, line_no: int, line: str) -> Optional[str]:
    """Return the text of an inline comment following a value, if any."""

    rest = rest.strip()
    if not rest:
        return None
    if not rest.startswith("#"):
        raise ParseError(f"Unexpected text after value: '{rest}'", line=line_no, text=line)
    return rest[1:].strip()


def parse_config_rb(text: str) -> ParsedDocument:
    """Parse the text of a ``config.rb`` document.

    Only the declarative subset used by Compass project files is understood:
    comments, ``require`` statements and ``name = literal`` assignments.
    """

    document = ParsedDocument()
    seen: set[str] = set()
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#"):
            document.comments.append(line[1:].strip())
            continue

        match = _REQUIRE_RE.match(line)
        if match:
            rest = match.group("rest")
            if rest[:1] not in ("'", '"'):
                raise ParseError("require expects a quoted path", line=line_no, text=raw)
            value, trailer = _read_string(rest, line_no, raw)
            comment = _read_trailer(trailer, line_no, raw)
            document.requires.append(value)
            if comment is not None:
                document.comments.append(comment)
            continue

        match = _ASSIGN_RE.match(line)
        if not match:
            raise ParseError("Expected a comment, require or assignment", line=line_no, text=raw)
        name = match.group("name")
        if name in RESERVED_NAMES:
            raise ParseError(
                f"'{name}' cannot be assigned; use require statements and comment lines instead",
                line=line_no,
                text=raw,
            )
        value, trailer = _read_literal(match.group("rest"), line_no, raw)
        comment = _read_trailer(trailer, line_no, raw)
        if comment is not None:
            document.comments.append(comment)

        if name in seen:
            logger.warning("Option '{}' assigned more than once (line {}); last value wins", name, line_no)
            if name not in document.duplicates:
                document.duplicates.append(name)
        seen.add(name)

        if value is NIL:
            document.values.pop(name, None)
        else:
            document.values[name] = value

    logger.debug(
        "Parsed config.rb: {} options, {} requires, {} comments",
        len(document.values),
        len(document.requires),
        len(document.comments),
    )
    return document


def rb_literal(value: Any) -> str:
    """Format a Python value as a Ruby literal."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return f":{value.value}"
    if isinstance(value, int):
        return str(value)
    if value is None:
        return "nil"
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def rb_comment(text: str) -> str:
    return f"# {text}" if text else "#"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["rb_literal"] = rb_literal
    env.filters["rb_comment"] = rb_comment
    return env


def render_config_rb(config: "CompassConfig") -> str:
    """Render a configuration as ``config.rb`` text."""

    template = _environment().get_template(TEMPLATE_NAME)
    rendered = template.render(
        requires=config.requires,
        options=list(config.options().items()),
        comments=config.comments,
    )
    if not rendered.endswith("\n"):
        rendered += "\n"
    return rendered


__all__ = ["parse_config_rb", "render_config_rb", "rb_literal", "rb_comment"]
