"""Convert raw S-expressions into Expression trees.

Special forms: quote, if, lambda, define, dict, let. `let` has no node of its
own; it is read as an immediately applied lambda. Primitive names become PrimOp
tokens here, so they cannot be rebound by define, lambda or let.
"""

from __future__ import annotations

from dictscheme import Value
from dictscheme.errors import MalformedSyntax
from dictscheme.reader.parser import QUOTE, SExpression, read
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
from dictscheme.types.values import is_number, make_list

PROGRAM_TAG = Symbol("L32")


def parse_datum(sexp: SExpression) -> Value:
    """Quoted data: lists become Pair chains, everything else stays as read."""
    if isinstance(sexp, list):
        return make_list(parse_datum(x) for x in sexp)
    if isinstance(sexp, tuple):
        items, tail = sexp
        return make_list((parse_datum(x) for x in items), parse_datum(tail))
    return sexp


def _binder(sexp: SExpression, form: str) -> str:
    if not isinstance(sexp, Symbol):
        raise MalformedSyntax(f"{form}: expected a variable name, got {sexp!r}")
    if PrimOp.from_name(sexp.name) is not None:
        raise MalformedSyntax(f"{form}: cannot bind primitive {sexp.name}")
    return sexp.name


def _body(forms: list[SExpression], form: str) -> tuple[Expression, ...]:
    if not forms:
        raise MalformedSyntax(f"{form} requires a non-empty body")
    return tuple(parse_sexp(f, top_level=True) for f in forms)


def _parse_quote(tail: list[SExpression]) -> Expression:
    if len(tail) != 1:
        raise MalformedSyntax("quote requires exactly 1 argument")
    return LiteralData(parse_datum(tail[0]))


def _parse_if(tail: list[SExpression]) -> Expression:
    if len(tail) != 3:
        raise MalformedSyntax("if requires a test, a consequent and an alternate")
    return Conditional(*(parse_sexp(x) for x in tail))


def _parse_lambda(tail: list[SExpression]) -> Expression:
    if not tail or not isinstance(tail[0], list):
        raise MalformedSyntax("lambda requires a parameter list")
    params = tuple(_binder(p, "lambda") for p in tail[0])
    return Lambda(params, _body(tail[1:], "lambda"))


def _parse_define(tail: list[SExpression]) -> Expression:
    if len(tail) != 2:
        raise MalformedSyntax("define requires exactly 2 arguments")
    return Definition(_binder(tail[0], "define"), parse_sexp(tail[1]))


def _is_dict_entry(sexp: SExpression) -> bool:
    return isinstance(sexp, list) and len(sexp) == 2 and isinstance(sexp[0], Symbol)


def _parse_dict(tail: list[SExpression]) -> Expression:
    # (dict (k e) ...) is the literal; any other argument shape, such as the
    # desugared (dict (cons 'k e) ...), is a call of the dict primitive
    shaped = [_is_dict_entry(entry) for entry in tail]
    if all(shaped):
        return DictionaryLiteral(tuple((entry[0].name, parse_sexp(entry[1])) for entry in tail))
    if any(shaped):
        raise MalformedSyntax("dict mixes (key value) entries with other arguments")
    return Application(PrimOp.DICT, tuple(parse_sexp(x) for x in tail))


def _parse_let(tail: list[SExpression]) -> Expression:
    if not tail or not isinstance(tail[0], list):
        raise MalformedSyntax("let requires a binding list")
    names, values = [], []
    for binding in tail[0]:
        if not (isinstance(binding, list) and len(binding) == 2):
            raise MalformedSyntax(f"let bindings must look like (name value), got {binding!r}")
        names.append(_binder(binding[0], "let"))
        values.append(parse_sexp(binding[1]))
    return Application(Lambda(tuple(names), _body(tail[1:], "let")), tuple(values))


SPECIAL_FORMS = {
    Symbol("quote"): _parse_quote,
    Symbol("if"): _parse_if,
    Symbol("lambda"): _parse_lambda,
    Symbol("dict"): _parse_dict,
    Symbol("let"): _parse_let,
}

DEFINE = Symbol("define")


def parse_sexp(sexp: SExpression, top_level: bool = False) -> Expression:
    """Convert one S-expression; `define` is only accepted when `top_level`."""
    if isinstance(sexp, bool):
        return BooleanLiteral(sexp)
    if is_number(sexp):
        return NumberLiteral(sexp)
    if isinstance(sexp, str):
        return StringLiteral(sexp)
    if isinstance(sexp, Symbol):
        prim = PrimOp.from_name(sexp.name)
        return prim if prim is not None else VariableReference(sexp.name)
    if isinstance(sexp, tuple):
        raise MalformedSyntax("A dotted list is not an expression")
    if isinstance(sexp, list):
        if not sexp:
            raise MalformedSyntax("Empty combination ()")
        head, *tail = sexp
        if head == DEFINE:
            if not top_level:
                raise MalformedSyntax("define is only allowed at the start of a sequence")
            return _parse_define(tail)
        if isinstance(head, Symbol) and head in SPECIAL_FORMS:
            return SPECIAL_FORMS[head](tail)
        return Application(parse_sexp(head), tuple(parse_sexp(x) for x in tail))
    raise MalformedSyntax(f"Cannot parse {sexp!r}")


def parse_program(source: str) -> tuple[Expression, ...]:
    """Parse program text; an optional ``(L32 ...)`` wrapper is accepted."""
    forms = read(source)
    if len(forms) == 1 and isinstance(forms[0], list) and forms[0] and forms[0][0] == PROGRAM_TAG:
        forms = forms[0][1:]
    return tuple(parse_sexp(f, top_level=True) for f in forms)


def parse_expression(source: str) -> Expression:
    """Parse exactly one expression (no definitions)."""
    forms = read(source)
    if len(forms) != 1:
        raise MalformedSyntax(f"Expected exactly one expression, found {len(forms)}")
    return parse_sexp(forms[0])
