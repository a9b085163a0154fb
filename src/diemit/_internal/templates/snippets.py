from __future__ import annotations

import re
from dataclasses import dataclass

from diemit.exceptions import DIEmitTemplateError

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NEGATION_PATTERN = re.compile(r"^not\s+(?P<identifier>[A-Za-z_][A-Za-z0-9_]*)$")
_EQUALITY_PATTERN = re.compile(
    r'^(?P<identifier>[A-Za-z_][A-Za-z0-9_]*)\s*==\s*"(?P<literal>[^"]*)"$',
)
_VARIABLE_OPEN = "{{"
_BLOCK_OPEN = "{%"
_CLOSERS = {_VARIABLE_OPEN: "}}", _BLOCK_OPEN: "%}"}


@dataclass(frozen=True, slots=True)
class _Text:
    value: str


@dataclass(frozen=True, slots=True)
class _Variable:
    identifier: str


@dataclass(frozen=True, slots=True)
class _Tag:
    expression: str


@dataclass(frozen=True, slots=True)
class _Condition:
    identifier: str
    expected_literal: str | None = None
    negated: bool = False


@dataclass(frozen=True, slots=True)
class _If:
    condition: _Condition
    truthy_nodes: tuple[_Node, ...]
    falsy_nodes: tuple[_Node, ...]


_Token = _Text | _Variable | _Tag
_Node = _Text | _Variable | _If


class SnippetEnvironment:
    """Compile source snippets using ``{{ name }}`` and ``{% if %}`` tags.

    A block tag alone on its line is removed together with that line, so
    optional sections do not leave blank lines in generated code.
    """

    def compile(self, text: str) -> Snippet:
        """Compile snippet text into a renderable snippet.

        Args:
            text: Snippet source text.

        """
        return Snippet(nodes=_Parser(tokens=_tokenize(text)).parse())


class Snippet:
    """Compiled source snippet."""

    def __init__(self, *, nodes: tuple[_Node, ...]) -> None:
        self._nodes = nodes

    def render(self, **context: object) -> str:
        """Render the snippet with keyword-only context variables.

        Args:
            context: Values bound to the snippet's variables and conditions.

        """
        return _render_nodes(nodes=self._nodes, context=context)


class _Parser:
    def __init__(self, *, tokens: tuple[_Token, ...]) -> None:
        self._tokens = tokens
        self._position = 0

    def parse(self) -> tuple[_Node, ...]:
        nodes, stop_tag = self._parse_until(stop_tags=frozenset())
        if stop_tag is not None:
            msg = f"Unexpected block tag '{stop_tag}'."
            raise DIEmitTemplateError(msg)
        return nodes

    def _parse_until(self, *, stop_tags: frozenset[str]) -> tuple[tuple[_Node, ...], str | None]:
        nodes: list[_Node] = []
        while self._position < len(self._tokens):
            token = self._tokens[self._position]
            self._position += 1
            if not isinstance(token, _Tag):
                nodes.append(token)
                continue

            tag = token.expression
            if tag in stop_tags:
                return tuple(nodes), tag
            if not tag.startswith("if "):
                if tag in {"else", "endif"}:
                    msg = f"Unexpected block tag '{tag}'."
                else:
                    msg = f"Unsupported block tag '{tag}'."
                raise DIEmitTemplateError(msg)
            nodes.append(self._parse_if(expression=tag[3:].strip()))
        return tuple(nodes), None

    def _parse_if(self, *, expression: str) -> _If:
        condition = _parse_condition(expression=expression)
        truthy_nodes, stop_tag = self._parse_until(stop_tags=frozenset({"else", "endif"}))
        falsy_nodes: tuple[_Node, ...] = ()
        if stop_tag == "else":
            falsy_nodes, stop_tag = self._parse_until(stop_tags=frozenset({"endif"}))
        if stop_tag != "endif":
            msg = "Unclosed if block: missing endif."
            raise DIEmitTemplateError(msg)
        return _If(condition=condition, truthy_nodes=truthy_nodes, falsy_nodes=falsy_nodes)


def _tokenize(text: str) -> tuple[_Token, ...]:
    tokens: list[_Token] = []
    cursor = 0
    while cursor < len(text):
        start = _find_next_opener(text=text, cursor=cursor)
        if start == -1:
            tokens.append(_Text(value=text[cursor:]))
            break

        opener = text[start : start + 2]
        end = text.find(_CLOSERS[opener], start + 2)
        if end == -1:
            kind = "variable" if opener == _VARIABLE_OPEN else "block"
            msg = f"Unclosed {kind} tag."
            raise DIEmitTemplateError(msg)
        expression = text[start + 2 : end].strip()
        if not expression:
            kind = "Variable" if opener == _VARIABLE_OPEN else "Block"
            msg = f"{kind} tag cannot be empty."
            raise DIEmitTemplateError(msg)

        leading = text[cursor:start]
        tag_end = end + 2
        if opener == _BLOCK_OPEN and _is_standalone(
            text=text,
            cursor=cursor,
            leading=leading,
            tag_end=tag_end,
        ):
            leading = leading[: leading.rfind("\n") + 1]
            tag_end = min(tag_end + 1, len(text))

        if leading:
            tokens.append(_Text(value=leading))
        if opener == _VARIABLE_OPEN:
            tokens.append(_Variable(identifier=_parse_identifier(expression=expression)))
        else:
            tokens.append(_Tag(expression=expression))
        cursor = tag_end
    return tuple(tokens)


def _find_next_opener(*, text: str, cursor: int) -> int:
    starts = [
        position
        for position in (text.find(_VARIABLE_OPEN, cursor), text.find(_BLOCK_OPEN, cursor))
        if position != -1
    ]
    return min(starts, default=-1)


def _is_standalone(*, text: str, cursor: int, leading: str, tag_end: int) -> bool:
    line_start = leading.rfind("\n")
    if line_start == -1 and cursor > 0 and text[cursor - 1] != "\n":
        return False
    if leading[line_start + 1 :].strip():
        return False
    return tag_end == len(text) or text[tag_end] == "\n"


def _parse_identifier(*, expression: str) -> str:
    if _IDENTIFIER_PATTERN.fullmatch(expression):
        return expression
    msg = f"Unsupported variable expression '{expression}'."
    raise DIEmitTemplateError(msg)


def _parse_condition(*, expression: str) -> _Condition:
    equality_match = _EQUALITY_PATTERN.fullmatch(expression)
    if equality_match is not None:
        return _Condition(
            identifier=equality_match.group("identifier"),
            expected_literal=equality_match.group("literal"),
        )
    negation_match = _NEGATION_PATTERN.fullmatch(expression)
    if negation_match is not None:
        return _Condition(identifier=negation_match.group("identifier"), negated=True)
    if _IDENTIFIER_PATTERN.fullmatch(expression):
        return _Condition(identifier=expression)

    msg = f"Unsupported if condition '{expression}'."
    raise DIEmitTemplateError(msg)


def _render_nodes(*, nodes: tuple[_Node, ...], context: dict[str, object]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, _Text):
            parts.append(node.value)
        elif isinstance(node, _Variable):
            parts.append(str(_lookup(context=context, identifier=node.identifier)))
        else:
            matched = _evaluate(condition=node.condition, context=context)
            parts.append(
                _render_nodes(
                    nodes=node.truthy_nodes if matched else node.falsy_nodes,
                    context=context,
                ),
            )
    return "".join(parts)


def _lookup(*, context: dict[str, object], identifier: str) -> object:
    if identifier not in context:
        msg = f"Missing template variable '{identifier}'."
        raise DIEmitTemplateError(msg)
    return context[identifier]


def _evaluate(*, condition: _Condition, context: dict[str, object]) -> bool:
    value = _lookup(context=context, identifier=condition.identifier)
    if condition.expected_literal is not None:
        return value == condition.expected_literal
    return not value if condition.negated else bool(value)
