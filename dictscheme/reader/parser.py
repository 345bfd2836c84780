"""
  Reader: lexer and S-expression parser

- Streaming, lazy parsing
- Emits Python primitives for the raw S-expression layer:

    - #t / #f -> True / False
    - numbers -> int/float
    - strings -> str
    - symbols -> Symbol
    - lists -> Python list
    - dotted lists -> (list_part, tail)
    - 'x -> [Symbol("quote"), x]

dictscheme.reader.syntax turns these S-expressions into Expression trees.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from dictscheme.errors import MalformedSyntax
from dictscheme.types.symbol import Symbol

SExpression = object

TOKEN_RE = re.compile(
    r"\s*("
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<ml_start>#\|)"  # multi-line comment start
    r"|(?P<quote>')"  # '
    r"|(?P<lparen>[(\[])"  # ( or [
    r"|(?P<rparen>[)\]])"  # ) or ]
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<symbol>[^\s()\[\]\'";]+)'  # fallback: atoms
    r")",
    re.DOTALL,
)

NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
INTEGER_RE = re.compile(r"[+-]?\d+")

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
}

QUOTE = Symbol("quote")


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise MalformedSyntax(f"Unexpected char at {pos}: {source[pos]!r}")
        if m.group("comment"):
            pos = m.end()
            continue
        if m.group("ml_start"):
            pos = m.end()
            depth = 1
            while depth > 0:
                if pos >= n:
                    raise MalformedSyntax("Unterminated multi-line comment")
                if source.startswith("#|", pos):
                    depth += 1
                    pos += 2
                elif source.startswith("|#", pos):
                    depth -= 1
                    pos += 2
                else:
                    pos += 1
            continue
        for name in ("quote", "lparen", "rparen", "string", "symbol"):
            if m.group(name):
                yield name, m.group(name)
                break
        pos = m.end()


def read_string(token: str) -> str:
    body = token[1:-1]
    return re.sub(r"\\(.)", lambda m: ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


def read_atom(token: str) -> SExpression:
    if token == "#t":
        return True
    if token == "#f":
        return False
    if NUMBER_RE.fullmatch(token):
        if INTEGER_RE.fullmatch(token):
            return int(token)
        return float(token)
    return Symbol(token)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def parse_expr(self) -> SExpression:
        tok_type, tok_val = self.peek()
        if tok_type is None:
            raise MalformedSyntax("Unexpected end of input")

        if tok_type == "symbol":
            self.advance()
            return read_atom(tok_val)

        if tok_type == "string":
            self.advance()
            return read_string(tok_val)

        if tok_type == "quote":
            self.advance()
            return [QUOTE, self.parse_expr()]

        # List or dotted list
        if tok_type == "lparen":
            self.advance()
            items = []
            while True:
                next_type, next_val = self.peek()
                if next_type == "rparen":
                    self.advance()
                    return items
                if next_type is None:
                    raise MalformedSyntax("Unmatched '('")
                if next_type == "symbol" and next_val == ".":
                    if not items:
                        raise MalformedSyntax("Dotted list needs at least one element before '.'")
                    self.advance()
                    tail = self.parse_expr()
                    if self.peek()[0] != "rparen":
                        raise MalformedSyntax("Expected ')' after dotted tail")
                    self.advance()
                    return items, tail  # tuple for a dotted list
                items.append(self.parse_expr())

        if tok_type == "rparen":
            raise MalformedSyntax("Unexpected ')'")

        raise MalformedSyntax(f"Unknown token: {tok_type} {tok_val}")

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def read(source: str) -> list[SExpression]:
    """Read every S-expression in `source`."""
    return list(TokenStream(lex(source)).parse_all())
