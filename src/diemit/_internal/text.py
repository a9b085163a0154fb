from __future__ import annotations

import hashlib
import keyword
import re
from textwrap import indent

from diemit.cast_mode import CastMode

INDENT = " " * 4

_NON_IDENTIFIER = re.compile(r"\W+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert a type name such as ``LoggedInComponent`` into ``logged_in_component``."""
    cleaned = _NON_IDENTIFIER.sub("_", name).strip("_")
    snake = _CAMEL_BOUNDARY.sub("_", cleaned).lower() or "component"
    if snake[0].isdigit():
        snake = f"_{snake}"
    if keyword.iskeyword(snake):
        snake = f"{snake}_"
    return snake


def component_parameter_name(component_type: str) -> str:
    return snake_case(component_type)


def component_attribute_name(component_type: str) -> str:
    return f"_{component_parameter_name(component_type)}"


def short_digest(text: str, *, length: int) -> str:
    """Return the first ``length`` hex characters of the SHA-256 of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]


def string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def narrowed(expression: str, *, type_name: str, cast_mode: CastMode) -> str:
    """Wrap ``expression`` for static type checkers according to ``cast_mode``."""
    if cast_mode is CastMode.CAST:
        return f"cast({string_literal(type_name)}, {expression})"
    return expression


def indent_block(block: str, depth: int = 1) -> str:
    return indent(block, INDENT * depth)
