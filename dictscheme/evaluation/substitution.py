"""Capture-avoiding substitution for closure application.

Applying a closure never extends an environment. Instead the body is

1. renamed: every name bound by a nested lambda gets a fresh, program-unique
   name (`rename_exps`), and then
2. substituted: each free reference to a parameter is replaced by the literal
   form of its argument (`substitute` + `value_to_literal`).

All functions here are pure tree rewrites; the input tree is never modified.
The fresh-name counter travels explicitly in a NameSupply value.

This module is compiled with Cython when the extension is built (see setup.py),
so it sticks to plain isinstance dispatch.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from dictscheme import Value
from dictscheme.errors import NonLiteralizableValue
from dictscheme.types.expressions import (
    Application,
    BooleanLiteral,
    Conditional,
    Definition,
    DictionaryLiteral,
    Expression,
    Lambda,
    LiteralData,
    NumberLiteral,
    StringLiteral,
    VariableReference,
)
from dictscheme.types.primop import PrimOp
from dictscheme.types.values import Closure, DictValue, Pair, is_number, is_quoted_datum


_GENERATED_SUFFIX = re.compile(r"__\d+$")


class NameSupply:
    """Immutable source of fresh names.

    `counter` is the last number handed out; `reserved` holds names that must
    never be generated (every identifier of the program being evaluated).
    """

    __slots__ = ("counter", "reserved")

    def __init__(self, counter: int = 0, reserved: Iterable[str] = ()):
        self.counter = counter
        self.reserved = frozenset(reserved)

    def fresh(self, base: str) -> tuple[str, NameSupply]:
        # x__3 renamed again becomes x__7, not x__3__7
        stem = _GENERATED_SUFFIX.sub("", base) or base
        n = self.counter
        while True:
            n += 1
            name = f"{stem}__{n}"
            if name not in self.reserved:
                return name, NameSupply(n, self.reserved)

    def reserve(self, names: Iterable[str]) -> NameSupply:
        return NameSupply(self.counter, self.reserved.union(names))

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, NameSupply)
            and self.counter == other.counter
            and self.reserved == other.reserved
        )

    def __hash__(self) -> int:
        return hash((self.counter, self.reserved))

    def __repr__(self) -> str:
        return f"NameSupply(counter={self.counter}, reserved={len(self.reserved)} names)"


# ---------------------------------------------------------------------------
# Renaming
# ---------------------------------------------------------------------------

def rename_exps(exps: Iterable[Expression], supply: NameSupply) -> tuple[tuple[Expression, ...], NameSupply]:
    """Rename every lambda-bound name in `exps` to a fresh one.

    Returns the renamed sequence and the supply to use next. Free references
    are left alone; inner lambdas are renamed before the lambdas enclosing
    them so shadowing is kept exactly.
    """
    out = []
    for e in exps:
        renamed, supply = rename_exp(e, supply)
        out.append(renamed)
    return tuple(out), supply


def rename_exp(exp: Expression, supply: NameSupply) -> tuple[Expression, NameSupply]:
    if isinstance(exp, Lambda):
        body, supply = rename_exps(exp.body, supply)
        mapping = {}
        new_params = []
        for p in exp.params:
            fresh, supply = supply.fresh(p)
            mapping[p] = VariableReference(fresh)
            new_params.append(fresh)
        return Lambda(tuple(new_params), substitute_map(body, mapping)), supply
    if isinstance(exp, Conditional):
        test, supply = rename_exp(exp.test, supply)
        consequent, supply = rename_exp(exp.consequent, supply)
        alternate, supply = rename_exp(exp.alternate, supply)
        return Conditional(test, consequent, alternate), supply
    if isinstance(exp, Application):
        operator, supply = rename_exp(exp.operator, supply)
        operands, supply = rename_exps(exp.operands, supply)
        return Application(operator, operands), supply
    if isinstance(exp, Definition):
        value, supply = rename_exp(exp.value, supply)
        return Definition(exp.name, value), supply
    if isinstance(exp, DictionaryLiteral):
        entries = []
        for key, value in exp.entries:
            value, supply = rename_exp(value, supply)
            entries.append((key, value))
        return DictionaryLiteral(tuple(entries)), supply
    return exp, supply


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------

def substitute(exps: Iterable[Expression], names: Iterable[str], replacements: Iterable[Expression]) -> tuple[Expression, ...]:
    """Replace free references to `names[i]` with `replacements[i]`."""
    names = tuple(names)
    replacements = tuple(replacements)
    if len(names) != len(replacements):
        raise ValueError("substitute needs one replacement per name")
    return substitute_map(exps, dict(zip(names, replacements)))


def substitute_map(exps: Iterable[Expression], mapping: Mapping[str, Expression]) -> tuple[Expression, ...]:
    out = []
    for e in exps:
        if mapping and isinstance(e, Definition):
            out.append(Definition(e.name, substitute_exp(e.value, mapping)))
            if e.name in mapping:
                # a local define shadows the name for the rest of the sequence
                mapping = {k: v for k, v in mapping.items() if k != e.name}
            continue
        out.append(substitute_exp(e, mapping))
    return tuple(out)


def substitute_exp(exp: Expression, mapping: Mapping[str, Expression]) -> Expression:
    if not mapping:
        return exp
    if isinstance(exp, VariableReference):
        return mapping.get(exp.name, exp)
    if isinstance(exp, Conditional):
        return Conditional(
            substitute_exp(exp.test, mapping),
            substitute_exp(exp.consequent, mapping),
            substitute_exp(exp.alternate, mapping),
        )
    if isinstance(exp, Application):
        return Application(
            substitute_exp(exp.operator, mapping),
            tuple(substitute_exp(e, mapping) for e in exp.operands),
        )
    if isinstance(exp, Lambda):
        inner = {k: v for k, v in mapping.items() if k not in exp.params}
        return Lambda(exp.params, substitute_map(exp.body, inner))
    if isinstance(exp, DictionaryLiteral):
        return DictionaryLiteral(tuple((k, substitute_exp(v, mapping)) for k, v in exp.entries))
    if isinstance(exp, Definition):
        return Definition(exp.name, substitute_exp(exp.value, mapping))
    return exp


# ---------------------------------------------------------------------------
# Literalization
# ---------------------------------------------------------------------------

def value_to_literal(value: Value) -> Expression:
    """Turn a run-time value back into an expression that evaluates to it."""
    if isinstance(value, bool):
        return BooleanLiteral(value)
    if is_number(value):
        return NumberLiteral(value)
    if isinstance(value, str):
        return StringLiteral(value)
    if isinstance(value, PrimOp):
        return value
    if isinstance(value, Closure):
        return Lambda(value.params, value.body)
    if isinstance(value, DictValue):
        raise NonLiteralizableValue("Cannot quote a dictionary value")
    if is_quoted_datum(value):
        return LiteralData(value)
    raise NonLiteralizableValue(f"No literal form for {value!r}")


# ---------------------------------------------------------------------------
# Name collection
# ---------------------------------------------------------------------------

def collect_names(exps: Iterable[Expression]) -> set[str]:
    """Every identifier bound or referenced anywhere in `exps`."""
    names: set[str] = set()
    stack = list(exps)
    while stack:
        exp = stack.pop()
        if isinstance(exp, VariableReference):
            names.add(exp.name)
        elif isinstance(exp, Lambda):
            names.update(exp.params)
            stack.extend(exp.body)
        elif isinstance(exp, Conditional):
            stack.extend((exp.test, exp.consequent, exp.alternate))
        elif isinstance(exp, Application):
            stack.append(exp.operator)
            stack.extend(exp.operands)
        elif isinstance(exp, Definition):
            names.add(exp.name)
            stack.append(exp.value)
        elif isinstance(exp, DictionaryLiteral):
            stack.extend(v for _, v in exp.entries)
        elif isinstance(exp, LiteralData):
            stack.extend(_closure_bodies(exp.datum))
    return names


def _closure_bodies(datum: Value) -> list[Expression]:
    found = []
    pending = [datum]
    while pending:
        d = pending.pop()
        if isinstance(d, Pair):
            pending.append(d.head)
            pending.append(d.tail)
        elif isinstance(d, Closure):
            found.append(Lambda(d.params, d.body))
    return found
