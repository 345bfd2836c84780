"""Closed set of primitive operators.

A PrimOp member is at the same time the parsed token for a primitive (an atomic
expression) and the run-time value that token evaluates to.
"""

from __future__ import annotations

from enum import Enum


class PrimOp(Enum):
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    # Relational
    GT = ">"
    LT = "<"
    NUM_EQ = "="
    EQ = "eq?"
    STRING_EQ = "string=?"

    # Boolean
    AND = "and"
    OR = "or"
    NOT = "not"

    # Predicates
    IS_PAIR = "pair?"
    IS_NUMBER = "number?"
    IS_BOOLEAN = "boolean?"
    IS_SYMBOL = "symbol?"
    IS_STRING = "string?"
    IS_DICT = "dict?"

    # Lists
    CONS = "cons"
    CAR = "car"
    CDR = "cdr"
    LIST = "list"

    # Dictionaries
    DICT = "dict"
    GET = "get"
    BIND = "bind"

    @property
    def op(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> PrimOp | None:
        """Return the primitive spelled `name`, or None for an ordinary identifier."""
        return _BY_NAME.get(name)

    def __repr__(self):
        return f"PrimOp({self.value!r})"

    def __str__(self):
        return self.value


_BY_NAME: dict[str, PrimOp] = {p.value: p for p in PrimOp}
