"""Primitive operators.

Every PrimOp member has exactly one implementation in PRIMITIVES. Each
implementation receives the already-evaluated argument list and either returns
a value or raises ArityError / TypeMismatch / KeyNotFound with the operator
name and a snapshot of the arguments.
"""

from __future__ import annotations

from typing import Callable

from dictscheme import Value
from dictscheme.errors import ArityError, KeyNotFound, TypeMismatch
from dictscheme.printer import format_arguments
from dictscheme.types.empty import EmptyType
from dictscheme.types.primop import PrimOp
from dictscheme.types.symbol import Symbol
from dictscheme.types.values import (
    DictValue,
    Pair,
    is_number,
    make_list,
    values_equal,
)

PrimitiveFn = Callable[[list[Value]], Value]


def _mismatch(op: PrimOp, args: list[Value], message: str) -> TypeMismatch:
    return TypeMismatch(op.op, format_arguments(args), message)


def _expect_arity(op: PrimOp, args: list[Value], n: int) -> None:
    if len(args) != n:
        plural = "argument" if n == 1 else "arguments"
        raise ArityError(f"{op.op} expects exactly {n} {plural}, got {len(args)}")


def _expect_numbers(op: PrimOp, args: list[Value]) -> None:
    if not all(is_number(a) for a in args):
        raise _mismatch(op, args, "expects numbers only")


# -------------------------------
# Arithmetic
# -------------------------------
def add(args: list[Value]) -> Value:
    _expect_numbers(PrimOp.ADD, args)
    result = 0
    for x in args:
        result += x
    return result


def mul(args: list[Value]) -> Value:
    _expect_numbers(PrimOp.MUL, args)
    result = 1
    for x in args:
        result *= x
    return result


def sub(args: list[Value]) -> Value:
    _expect_arity(PrimOp.SUB, args, 2)
    _expect_numbers(PrimOp.SUB, args)
    return args[0] - args[1]


def div(args: list[Value]) -> Value:
    _expect_arity(PrimOp.DIV, args, 2)
    _expect_numbers(PrimOp.DIV, args)
    x, y = args
    if y == 0:
        raise _mismatch(PrimOp.DIV, args, "division by zero")
    # Keep exact integer quotients integral
    if isinstance(x, int) and isinstance(y, int) and x % y == 0:
        return x // y
    return x / y


# -------------------------------
# Relational
# -------------------------------
def _ordered(op: PrimOp, args: list[Value]) -> tuple[Value, Value]:
    _expect_arity(op, args, 2)
    x, y = args
    if (is_number(x) and is_number(y)) or (isinstance(x, str) and isinstance(y, str)):
        return x, y
    raise _mismatch(op, args, "expects two numbers or two strings")


def gt(args: list[Value]) -> bool:
    x, y = _ordered(PrimOp.GT, args)
    return x > y


def lt(args: list[Value]) -> bool:
    x, y = _ordered(PrimOp.LT, args)
    return x < y


def num_equals(args: list[Value]) -> bool:
    _expect_arity(PrimOp.NUM_EQ, args, 2)
    x, y = args
    if is_number(x) and is_number(y):
        return x == y
    if is_atom(x) and is_atom(y):
        return values_equal(x, y)
    # compound values are only equal to themselves
    return x is y


def is_atom(x: Value) -> bool:
    return is_number(x) or isinstance(x, (bool, str, Symbol, EmptyType))


def is_eq(x: Value, y: Value) -> bool:
    """eq? is defined over numbers, strings, booleans, symbols and the empty list."""
    if is_number(x) and is_number(y):
        return x == y
    if isinstance(x, bool) and isinstance(y, bool):
        return x == y
    if isinstance(x, str) and isinstance(y, str):
        return x == y
    if isinstance(x, Symbol) and isinstance(y, Symbol):
        return x == y
    if isinstance(x, EmptyType) and isinstance(y, EmptyType):
        return True
    return False


def eq(args: list[Value]) -> bool:
    _expect_arity(PrimOp.EQ, args, 2)
    return is_eq(args[0], args[1])


def string_equals(args: list[Value]) -> bool:
    _expect_arity(PrimOp.STRING_EQ, args, 2)
    if not all(isinstance(a, str) for a in args):
        raise _mismatch(PrimOp.STRING_EQ, args, "expects strings")
    return args[0] == args[1]


# -------------------------------
# Boolean logic
# -------------------------------
def _expect_booleans(op: PrimOp, args: list[Value]) -> None:
    if not all(isinstance(a, bool) for a in args):
        raise _mismatch(op, args, "arguments not booleans")


def logical_and(args: list[Value]) -> bool:
    _expect_booleans(PrimOp.AND, args)
    return all(args)


def logical_or(args: list[Value]) -> bool:
    _expect_booleans(PrimOp.OR, args)
    return any(args)


def logical_not(args: list[Value]) -> bool:
    _expect_arity(PrimOp.NOT, args, 1)
    # only #f is false
    return args[0] is False


# -------------------------------
# Predicates
# -------------------------------
def _predicate(op: PrimOp, test: Callable[[Value], bool]) -> PrimitiveFn:
    def check(args: list[Value]) -> bool:
        _expect_arity(op, args, 1)
        return test(args[0])
    check.__name__ = op.name.lower()
    return check


# -------------------------------
# List operations
# -------------------------------
def cons(args: list[Value]) -> Pair:
    _expect_arity(PrimOp.CONS, args, 2)
    return Pair(args[0], args[1])


def car(args: list[Value]) -> Value:
    _expect_arity(PrimOp.CAR, args, 1)
    if not isinstance(args[0], Pair):
        raise _mismatch(PrimOp.CAR, args, "param is not a pair")
    return args[0].head


def cdr(args: list[Value]) -> Value:
    _expect_arity(PrimOp.CDR, args, 1)
    if not isinstance(args[0], Pair):
        raise _mismatch(PrimOp.CDR, args, "param is not a pair")
    return args[0].tail


def list_builtin(args: list[Value]) -> Value:
    return make_list(args)


# -------------------------------
# Dictionaries
# -------------------------------
def dict_lookup(d: DictValue, key: Symbol) -> Value:
    """Scan entries head to tail; the first entry with `key` wins."""
    chain = d.entries
    while isinstance(chain, Pair):
        entry = chain.head
        if entry.head == key:
            return entry.tail
        chain = chain.tail
    raise KeyNotFound(key.name)


def dict_bind(d: DictValue, key: Symbol, value: Value) -> DictValue:
    """Return a new dictionary with (key . value) in front; `d` is untouched."""
    return DictValue(Pair(Pair(key, value), d.entries))


def make_dict(args: list[Value]) -> DictValue:
    for entry in args:
        if not (isinstance(entry, Pair) and isinstance(entry.head, Symbol)):
            raise _mismatch(PrimOp.DICT, args, "entries must be (symbol . value) pairs")
    return DictValue(make_list(args))


def get(args: list[Value]) -> Value:
    _expect_arity(PrimOp.GET, args, 2)
    d, key = args
    if not (isinstance(d, DictValue) and isinstance(key, Symbol)):
        raise _mismatch(PrimOp.GET, args, "expects a dict and a symbol")
    return dict_lookup(d, key)


def bind(args: list[Value]) -> DictValue:
    _expect_arity(PrimOp.BIND, args, 3)
    d, key, value = args
    if not (isinstance(d, DictValue) and isinstance(key, Symbol)):
        raise _mismatch(PrimOp.BIND, args, "expects a dict, a symbol and a value")
    return dict_bind(d, key, value)


# -------------------------------
# Registration
# -------------------------------
PRIMITIVES: dict[PrimOp, PrimitiveFn] = {
    PrimOp.ADD: add,
    PrimOp.SUB: sub,
    PrimOp.MUL: mul,
    PrimOp.DIV: div,
    PrimOp.GT: gt,
    PrimOp.LT: lt,
    PrimOp.NUM_EQ: num_equals,
    PrimOp.EQ: eq,
    PrimOp.STRING_EQ: string_equals,
    PrimOp.AND: logical_and,
    PrimOp.OR: logical_or,
    PrimOp.NOT: logical_not,
    PrimOp.IS_PAIR: _predicate(PrimOp.IS_PAIR, lambda x: isinstance(x, Pair)),
    PrimOp.IS_NUMBER: _predicate(PrimOp.IS_NUMBER, is_number),
    PrimOp.IS_BOOLEAN: _predicate(PrimOp.IS_BOOLEAN, lambda x: isinstance(x, bool)),
    PrimOp.IS_SYMBOL: _predicate(PrimOp.IS_SYMBOL, lambda x: isinstance(x, Symbol)),
    PrimOp.IS_STRING: _predicate(PrimOp.IS_STRING, lambda x: isinstance(x, str)),
    PrimOp.IS_DICT: _predicate(PrimOp.IS_DICT, lambda x: isinstance(x, DictValue)),
    PrimOp.CONS: cons,
    PrimOp.CAR: car,
    PrimOp.CDR: cdr,
    PrimOp.LIST: list_builtin,
    PrimOp.DICT: make_dict,
    PrimOp.GET: get,
    PrimOp.BIND: bind,
}


def apply_primitive(op: PrimOp, args: list[Value]) -> Value:
    return PRIMITIVES[op](list(args))
