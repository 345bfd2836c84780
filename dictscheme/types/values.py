"""Run-time values.

Numbers, booleans and strings are plain Python ``int``/``float``, ``bool`` and
``str``. Everything else is one of the classes below (plus Symbol, Empty and
PrimOp). Lists and dictionaries share the Pair/Empty chain representation; a
DictValue only wraps the chain so it is never confused with quoted data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from dictscheme import Value, Expression
from dictscheme.types.empty import Empty, EmptyType
from dictscheme.types.symbol import Symbol


def is_number(x: Value) -> bool:
    # bool is an int subclass in Python; booleans are never numbers here
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def values_equal(a: Value, b: Value) -> bool:
    """Value equality that keeps #t distinct from 1 and #f distinct from 0."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


@dataclass(frozen=True, eq=False)
class Pair:
    head: Value
    tail: Value

    def __eq__(self, other: object) -> bool:
        a: Value = self
        b: Value = other
        # Walk the tails iteratively; only heads recurse
        while isinstance(a, Pair) and isinstance(b, Pair):
            if a is b:
                return True
            if not values_equal(a.head, b.head):
                return False
            a, b = a.tail, b.tail
        if isinstance(a, Pair) or isinstance(b, Pair):
            return False
        return values_equal(a, b)

    def __hash__(self) -> int:
        h = 0
        cur: Value = self
        while isinstance(cur, Pair):
            h = hash((h, type(cur.head), cur.head))
            cur = cur.tail
        return hash((h, type(cur), cur))

    def __iter__(self) -> Iterator[Value]:
        return iter_list(self)


@dataclass(frozen=True)
class Closure:
    """A lambda's parameters and body. No environment is captured."""

    params: tuple[str, ...]
    body: tuple[Expression, ...]

    def __str__(self) -> str:
        return f"<Closure ({' '.join(self.params)})>"


@dataclass(frozen=True)
class DictValue:
    """Persistent dictionary: a chain of ``Pair(Symbol, value)`` entries."""

    entries: Pair | EmptyType = Empty

    def items(self) -> Iterator[tuple[Symbol, Value]]:
        for entry in iter_list(self.entries):
            yield entry.head, entry.tail


# ---------------------------------------------------------------------------
# List helpers
# ---------------------------------------------------------------------------

def make_list(items: Iterable[Value], tail: Value = Empty) -> Value:
    """Build a Pair chain from `items`, terminated by `tail`."""
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result


def iter_list(chain: Value) -> Iterator[Value]:
    """Yield the heads of a Pair chain, stopping at the first non-Pair tail."""
    while isinstance(chain, Pair):
        yield chain.head
        chain = chain.tail


def is_quoted_datum(x: Value) -> bool:
    """True for the quotable shapes: atoms, symbols and Pair/Empty chains."""
    return (
        isinstance(x, (bool, str, Symbol, EmptyType, Pair))
        or is_number(x)
    )
