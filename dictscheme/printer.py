"""Render values and expression trees back to surface syntax."""

from __future__ import annotations

from io import StringIO

from dictscheme import Value
from dictscheme.types.empty import EmptyType
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
from dictscheme.types.symbol import Symbol
from dictscheme.types.values import Closure, DictValue, Pair, is_number


def format_number(n: int | float) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def format_string(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _write_chain(buffer: StringIO, chain: Pair, write_item) -> None:
    buffer.write("(")
    first = True
    cur: Value = chain
    while isinstance(cur, Pair):
        if not first:
            buffer.write(" ")
        write_item(buffer, cur.head)
        first = False
        cur = cur.tail
    if not isinstance(cur, EmptyType):
        buffer.write(" . ")
        write_item(buffer, cur)
    buffer.write(")")


def _write_value(buffer: StringIO, value: Value) -> None:
    if isinstance(value, bool):
        buffer.write("#t" if value else "#f")
    elif is_number(value):
        buffer.write(format_number(value))
    elif isinstance(value, str):
        buffer.write(format_string(value))
    elif isinstance(value, Symbol):
        buffer.write(value.name)
    elif isinstance(value, EmptyType):
        buffer.write("'()")
    elif isinstance(value, Pair):
        _write_chain(buffer, value, _write_value)
    elif isinstance(value, PrimOp):
        buffer.write(value.op)
    elif isinstance(value, Closure):
        buffer.write("<Closure (")
        buffer.write(" ".join(value.params))
        buffer.write(")")
        for e in value.body:
            buffer.write(" ")
            _write_expression(buffer, e)
        buffer.write(">")
    elif isinstance(value, DictValue):
        buffer.write("#dict(")
        buffer.write(" ".join(f"({k.name} {format_value(v)})" for k, v in value.items()))
        buffer.write(")")
    else:
        buffer.write(repr(value))


def _write_datum(buffer: StringIO, datum: Value) -> None:
    # inside a quote the empty list is just ()
    if isinstance(datum, EmptyType):
        buffer.write("()")
    elif isinstance(datum, Pair):
        _write_chain(buffer, datum, _write_datum)
    else:
        _write_value(buffer, datum)


def _write_sequence(buffer: StringIO, exps) -> None:
    for e in exps:
        buffer.write(" ")
        _write_expression(buffer, e)


def _write_expression(buffer: StringIO, exp: Expression) -> None:
    if isinstance(exp, NumberLiteral):
        buffer.write(format_number(exp.value))
    elif isinstance(exp, BooleanLiteral):
        buffer.write("#t" if exp.value else "#f")
    elif isinstance(exp, StringLiteral):
        buffer.write(format_string(exp.value))
    elif isinstance(exp, VariableReference):
        buffer.write(exp.name)
    elif isinstance(exp, PrimOp):
        buffer.write(exp.op)
    elif isinstance(exp, Conditional):
        buffer.write("(if")
        _write_sequence(buffer, (exp.test, exp.consequent, exp.alternate))
        buffer.write(")")
    elif isinstance(exp, Lambda):
        buffer.write(f"(lambda ({' '.join(exp.params)})")
        _write_sequence(buffer, exp.body)
        buffer.write(")")
    elif isinstance(exp, Application):
        buffer.write("(")
        _write_expression(buffer, exp.operator)
        _write_sequence(buffer, exp.operands)
        buffer.write(")")
    elif isinstance(exp, Definition):
        buffer.write(f"(define {exp.name} ")
        _write_expression(buffer, exp.value)
        buffer.write(")")
    elif isinstance(exp, LiteralData):
        buffer.write("'")
        _write_datum(buffer, exp.datum)
    elif isinstance(exp, DictionaryLiteral):
        buffer.write("(dict")
        for key, value in exp.entries:
            buffer.write(f" ({key} ")
            _write_expression(buffer, value)
            buffer.write(")")
        buffer.write(")")
    else:
        buffer.write(repr(exp))


def format_value(value: Value) -> str:
    """Printable form of a run-time value."""
    with StringIO() as buffer:
        _write_value(buffer, value)
        return buffer.getvalue()


def format_expression(exp: Expression) -> str:
    """Surface syntax for an expression tree."""
    with StringIO() as buffer:
        _write_expression(buffer, exp)
        return buffer.getvalue()


def format_program(exps) -> str:
    return "\n".join(format_expression(e) for e in exps)


def format_arguments(args) -> str:
    """Argument snapshot used in TypeMismatch messages."""
    return "[" + ", ".join(format_value(a) for a in args) + "]"
