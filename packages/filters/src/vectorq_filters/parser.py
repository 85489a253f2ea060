"""
Text syntax for portable filter expressions.

Examples::

    country == 'UK' && year >= 2020
    genre IN ['drama', 'comedy'] || (isOpen == true AND NOT rating < 3.5)
    author NIN ['anonymous']          # also: author NOT IN [...]

``AND`` binds tighter than ``OR``; keywords are case-insensitive.  Field
names that clash with keywords can be quoted with backticks (`` `in` ``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, NoReturn

from .ast import Comparison, FilterExpression, Logical
from .exceptions import FilterParseError
from .operators import OPERATOR_ALIASES, FilterOperator

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    | (?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    | (?P<quoted>`[^`]+`)
    | (?P<cmp>==|!=|>=|<=|>|<)
    | (?P<and>&&)
    | (?P<or>\|\|)
    | (?P<bang>!)
    | (?P<punct>[()\[\],])
    | (?P<word>[A-Za-z_][A-Za-z0-9_.]*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {"AND", "OR", "NOT", "IN", "NIN", "TRUE", "FALSE"}
_ESCAPE_RE = re.compile(r"\\(.)")

# Parentheses and NOT prefixes deeper than this are rejected
MAX_NESTING_DEPTH = 64


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int
    value: Any = None


def tokenize(text: str) -> list[Token]:
    """Split *text* into tokens, ending with an ``eof`` token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise FilterParseError(f"Unexpected character {text[pos]!r}", text, pos)
        kind = match.lastgroup or ""
        raw = match.group()
        if kind != "ws":
            tokens.append(_make_token(kind, raw, pos))
        pos = match.end()
    tokens.append(Token("eof", "", len(text)))
    return tokens


def _make_token(kind: str, raw: str, pos: int) -> Token:
    if kind == "string":
        return Token("literal", raw, pos, _ESCAPE_RE.sub(r"\1", raw[1:-1]))
    if kind == "number":
        is_float = any(c in raw for c in ".eE")
        return Token("literal", raw, pos, float(raw) if is_float else int(raw))
    if kind == "quoted":
        return Token("ident", raw, pos, raw[1:-1])
    if kind == "and":
        return Token("AND", raw, pos)
    if kind == "or":
        return Token("OR", raw, pos)
    if kind == "bang":
        return Token("NOT", raw, pos)
    if kind == "word":
        upper = raw.upper()
        if upper in ("TRUE", "FALSE"):
            return Token("literal", raw, pos, upper == "TRUE")
        if upper in _KEYWORDS:
            return Token(upper, raw, pos)
        return Token("ident", raw, pos, raw)
    # cmp / punct
    return Token(raw, raw, pos)


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = tokenize(text)
        self._index = 0
        self._depth = 0

    # -- token helpers -------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._index]

    def _peek(self, offset: int = 1) -> Token:
        idx = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[idx]

    def _advance(self) -> Token:
        token = self._current
        if token.kind != "eof":
            self._index += 1
        return token

    def _expect(self, kind: str, what: str) -> Token:
        if self._current.kind != kind:
            self._fail(f"Expected {what}")
        return self._advance()

    def _fail(self, message: str) -> NoReturn:
        token = self._current
        found = "end of input" if token.kind == "eof" else repr(token.text)
        raise FilterParseError(f"{message}, found {found}", self._text, token.position)

    # -- grammar -------------------------------------------------------------

    def parse(self) -> FilterExpression:
        if self._current.kind == "eof":
            self._fail("Expected a filter expression")
        expr = self._or_expr()
        if self._current.kind != "eof":
            self._fail("Unexpected trailing input")
        return expr

    def _or_expr(self) -> FilterExpression:
        operands = [self._and_expr()]
        while self._current.kind == "OR":
            self._advance()
            operands.append(self._and_expr())
        if len(operands) == 1:
            return operands[0]
        return Logical(FilterOperator.OR, tuple(operands))

    def _and_expr(self) -> FilterExpression:
        operands = [self._unary()]
        while self._current.kind == "AND":
            self._advance()
            operands.append(self._unary())
        if len(operands) == 1:
            return operands[0]
        return Logical(FilterOperator.AND, tuple(operands))

    def _unary(self) -> FilterExpression:
        if self._current.kind == "NOT":
            self._enter()
            self._advance()
            operand = self._unary()
            self._depth -= 1
            return Logical(FilterOperator.NOT, (operand,))
        return self._primary()

    def _primary(self) -> FilterExpression:
        if self._current.kind == "(":
            self._enter()
            self._advance()
            expr = self._or_expr()
            self._expect(")", "')'")
            self._depth -= 1
            return expr
        return self._comparison()

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            self._fail(f"Expression nests deeper than {MAX_NESTING_DEPTH} levels")

    def _comparison(self) -> FilterExpression:
        field = self._expect("ident", "a field name").value
        token = self._current

        if token.kind in ("IN", "NIN"):
            self._advance()
            op = FilterOperator.IN if token.kind == "IN" else FilterOperator.NIN
            return Comparison(field, op, self._literal_list())
        if token.kind == "NOT" and self._peek().kind == "IN":
            self._advance()
            self._advance()
            return Comparison(field, FilterOperator.NIN, self._literal_list())
        if token.kind in OPERATOR_ALIASES:
            self._advance()
            return Comparison(field, OPERATOR_ALIASES[token.kind], self._literal())

        self._fail(f"Expected a comparison operator after '{field}'")

    def _literal(self) -> Any:
        return self._expect("literal", "a string, number or boolean").value

    def _literal_list(self) -> tuple[Any, ...]:
        self._expect("[", "'['")
        values: list[Any] = []
        if self._current.kind != "]":
            values.append(self._literal())
            while self._current.kind == ",":
                self._advance()
                values.append(self._literal())
        self._expect("]", "']'")
        return tuple(values)


def parse_expression(text: str) -> FilterExpression:
    """
    Parse a filter text expression into a portable filter tree.

    Raises:
        FilterParseError: On any syntax error, with the character position.
    """
    if not isinstance(text, str):
        raise FilterParseError(
            f"Filter expression must be a string, got {type(text).__name__}",
            str(text),
            0,
        )
    return _Parser(text).parse()
