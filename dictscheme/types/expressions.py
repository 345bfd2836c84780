"""Expression trees for dictscheme programs.

Every node is an immutable dataclass; sequences are stored as tuples so trees
can be shared freely between evaluations. Constructors check their invariants
and raise MalformedSyntax straight away rather than leaving the problem for the
evaluator to trip over.

The primitive token is the PrimOp enum itself (see dictscheme.types.primop).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from dictscheme import Value
from dictscheme.errors import MalformedSyntax
from dictscheme.types.primop import PrimOp
from dictscheme.types.values import DictValue, is_number


def _freeze(owner: object, field_name: str, items) -> tuple:
    try:
        frozen = tuple(items)
    except TypeError:
        raise MalformedSyntax(f"{type(owner).__name__}.{field_name} must be a sequence")
    object.__setattr__(owner, field_name, frozen)
    return frozen


def _check_expression(owner: object, candidate: object, allow_definition: bool = False) -> None:
    if not is_expression(candidate):
        raise MalformedSyntax(f"{type(owner).__name__}: not an expression: {candidate!r}")
    # define is only legal at the top of a sequence
    if isinstance(candidate, Definition) and not allow_definition:
        raise MalformedSyntax(f"define is not allowed inside {type(owner).__name__}")


# ---------------------------------------------------------------------------
# Atomic expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberLiteral:
    value: int | float

    def __post_init__(self):
        if not is_number(self.value):
            raise MalformedSyntax(f"Not a number: {self.value!r}")


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise MalformedSyntax(f"Not a boolean: {self.value!r}")


@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise MalformedSyntax(f"Not a string: {self.value!r}")


@dataclass(frozen=True)
class VariableReference:
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise MalformedSyntax(f"Invalid variable name: {self.name!r}")


# ---------------------------------------------------------------------------
# Compound expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Conditional:
    test: Expression
    consequent: Expression
    alternate: Expression

    def __post_init__(self):
        for part in (self.test, self.consequent, self.alternate):
            _check_expression(self, part)


@dataclass(frozen=True)
class Lambda:
    params: tuple[str, ...]
    body: tuple[Expression, ...]

    def __post_init__(self):
        params = _freeze(self, "params", self.params)
        body = _freeze(self, "body", self.body)
        for p in params:
            if not isinstance(p, str) or not p:
                raise MalformedSyntax(f"Invalid parameter name: {p!r}")
        if len(set(params)) != len(params):
            raise MalformedSyntax(f"Duplicate parameter names in lambda: {' '.join(params)}")
        if not body:
            raise MalformedSyntax("lambda requires a non-empty body")
        for e in body:
            _check_expression(self, e, allow_definition=True)


@dataclass(frozen=True)
class Application:
    operator: Expression
    operands: tuple[Expression, ...]

    def __post_init__(self):
        _check_expression(self, self.operator)
        for e in _freeze(self, "operands", self.operands):
            _check_expression(self, e)


@dataclass(frozen=True)
class Definition:
    name: str
    value: Expression

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise MalformedSyntax(f"Invalid definition name: {self.name!r}")
        _check_expression(self, self.value)


@dataclass(frozen=True)
class LiteralData:
    """A quoted datum; evaluates to its payload unchanged."""

    datum: Value

    def __post_init__(self):
        if isinstance(self.datum, DictValue):
            raise MalformedSyntax("A dictionary value cannot be quoted")


@dataclass(frozen=True)
class DictionaryLiteral:
    """``(dict (k e) ...)``: sugar removed by dictscheme.desugar."""

    entries: tuple[tuple[str, Expression], ...]

    def __post_init__(self):
        seen: set[str] = set()
        frozen = []
        for entry in self.entries:
            try:
                key, value = entry
            except (TypeError, ValueError):
                raise MalformedSyntax(f"Dictionary entry must be a (key, value) pair: {entry!r}")
            if not isinstance(key, str) or not key:
                raise MalformedSyntax(f"Dictionary key must be a name: {key!r}")
            if key in seen:
                raise MalformedSyntax(f"Duplicate dictionary key: {key}")
            _check_expression(self, value)
            seen.add(key)
            frozen.append((key, value))
        object.__setattr__(self, "entries", tuple(frozen))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(k for k, _ in self.entries)


AtomicExpression = Union[NumberLiteral, BooleanLiteral, StringLiteral, VariableReference, PrimOp]
CompoundExpression = Union[Conditional, Lambda, Application, Definition, LiteralData, DictionaryLiteral]
Expression = Union[AtomicExpression, CompoundExpression]

ATOMIC_TYPES = (NumberLiteral, BooleanLiteral, StringLiteral, VariableReference, PrimOp)
COMPOUND_TYPES = (Conditional, Lambda, Application, Definition, LiteralData, DictionaryLiteral)


def is_atomic(x: object) -> bool:
    return isinstance(x, ATOMIC_TYPES)


def is_compound(x: object) -> bool:
    return isinstance(x, COMPOUND_TYPES)


def is_expression(x: object) -> bool:
    return isinstance(x, ATOMIC_TYPES + COMPOUND_TYPES)
