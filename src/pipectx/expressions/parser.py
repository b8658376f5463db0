"""Placeholder splitting and a small parser for reference and function-call expressions.

Supported expression forms inside ``${...}``:

- ``name``, ``name.attr``, ``name[0]``, ``name['key']``, chained freely
- ``fn(arg, ...)`` and ``#fn(arg, ...)``, optionally followed by trailers
- string, number, ``true``, ``false`` and ``null`` literals as arguments
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TypeAlias

from pipectx.constants.expressions import (
    EXPRESSION_END,
    EXPRESSION_START,
    FUNCTION_PREFIX,
    KEYWORD_LITERALS,
    TOKEN_PATTERN,
)
from pipectx.exceptions import ExpressionParseError


@dataclass(frozen=True)
class Placeholder:
    """One ``${...}`` occurrence inside a template string."""

    text: str
    body: str


@dataclass(frozen=True)
class Literal:
    value: object


@dataclass(frozen=True)
class Reference:
    name: str


@dataclass(frozen=True)
class Attribute:
    target: Node
    name: str


@dataclass(frozen=True)
class Index:
    target: Node
    key: Node


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple[Node, ...]


Node: TypeAlias = Literal | Reference | Attribute | Index | Call


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    position: int


def split_template(text: str) -> list[str | Placeholder]:
    """Split ``text`` into literal chunks and placeholders.

    Braces and quotes inside a placeholder are balanced, so
    ``${fn('}')}`` is one placeholder. An unterminated placeholder raises
    ExpressionParseError.
    """
    parts: list[str | Placeholder] = []
    cursor = 0
    while True:
        start = text.find(EXPRESSION_START, cursor)
        if start < 0:
            break
        if start > cursor:
            parts.append(text[cursor:start])
        end = _placeholder_end(text, start + len(EXPRESSION_START))
        parts.append(Placeholder(text=text[start : end + 1], body=text[start + len(EXPRESSION_START) : end]))
        cursor = end + 1
    if cursor < len(text):
        parts.append(text[cursor:])
    return parts


def _placeholder_end(text: str, index: int) -> int:
    depth = 0
    quote: str | None = None
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 1
            elif char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == EXPRESSION_END:
            if depth == 0:
                return index
            depth -= 1
        index += 1
    raise ExpressionParseError(f"Unterminated expression in {text!r}")


def parse_expression(body: str) -> Node:
    """Parse the body of one placeholder into an expression tree."""
    return _Parser(body).parse()


class _Parser:
    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = _tokenize(source)
        self._pos = 0

    def parse(self) -> Node:
        if not self._tokens:
            raise ExpressionParseError("Empty expression")
        self._accept("punct", FUNCTION_PREFIX)
        node = self._postfix()
        if self._peek() is not None:
            token = self._tokens[self._pos]
            raise ExpressionParseError(f"Unexpected {token.text!r} at position {token.position} in {self._source!r}")
        return node

    def _postfix(self) -> Node:
        node = self._primary()
        if isinstance(node, Literal):
            return node
        while True:
            if self._accept("punct", "."):
                name = self._expect("ident")
                node = Attribute(target=node, name=name.text)
            elif self._accept("punct", "["):
                key = self._argument()
                self._expect("punct", "]")
                node = Index(target=node, key=key)
            else:
                return node

    def _primary(self) -> Node:
        token = self._next()
        if token.kind == "number":
            return Literal(float(token.text) if "." in token.text else int(token.text))
        if token.kind == "string":
            try:
                return Literal(ast.literal_eval(_escape_line_breaks(token.text)))
            except (SyntaxError, ValueError) as exc:
                raise ExpressionParseError(
                    f"Invalid string literal at position {token.position} in {self._source!r}: {exc}"
                ) from exc
        if token.kind != "ident":
            raise ExpressionParseError(f"Unexpected {token.text!r} at position {token.position} in {self._source!r}")
        if token.text in KEYWORD_LITERALS:
            return Literal(KEYWORD_LITERALS[token.text])
        if self._accept("punct", "("):
            return Call(name=token.text, args=self._arguments())
        return Reference(name=token.text)

    def _arguments(self) -> tuple[Node, ...]:
        args: list[Node] = []
        if self._accept("punct", ")"):
            return ()
        while True:
            args.append(self._argument())
            if self._accept("punct", ")"):
                return tuple(args)
            self._expect("punct", ",")

    def _argument(self) -> Node:
        self._accept("punct", FUNCTION_PREFIX)
        return self._postfix()

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise ExpressionParseError(f"Unexpected end of expression {self._source!r}")
        self._pos += 1
        return token

    def _accept(self, kind: str, text: str | None = None) -> bool:
        token = self._peek()
        if token is None or token.kind != kind or (text is not None and token.text != text):
            return False
        self._pos += 1
        return True

    def _expect(self, kind: str, text: str | None = None) -> _Token:
        token = self._next()
        if token.kind != kind or (text is not None and token.text != text):
            expected = text if text is not None else kind
            raise ExpressionParseError(
                f"Expected {expected!r} but found {token.text!r} at position {token.position} in {self._source!r}"
            )
        return token


def _escape_line_breaks(text: str) -> str:
    """Escape raw line breaks so quoted literals may span lines, as YAML block scalars produce."""
    return text.replace("\r", "\\r").replace("\n", "\\n")


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    position = 0
    stripped_end = len(source.rstrip())
    while position < stripped_end:
        match = TOKEN_PATTERN.match(source, position)
        if match is None:
            offset = len(source) - len(source[position:].lstrip())
            raise ExpressionParseError(f"Unexpected character {source[offset]!r} at position {offset} in {source!r}")
        kind = match.lastgroup or ""
        tokens.append(_Token(kind=kind, text=match.group(kind), position=match.start(kind)))
        position = match.end()
    return tokens
