"""Dictionary desugaring.

Rewrites every dictionary literal, and every application of a dictionary
literal to a key, into the core language: lambdas, applications, conditionals
and primitives only. Evaluating the rewritten program gives the same result as
evaluating the original one, failures included.

Two strategies are available:

CONSTRUCT (default)
    ``(dict (a e1) (b e2))``  ->  ``(dict (cons 'a e1) (cons 'b e2))``
    ``((dict ...) k)``        ->  ``((dict (cons ...) ...) k)``

LOOKUP
    ``((dict (a e1) (b e2)) k)`` becomes a self-applied scanning lambda over
    ``(list (cons 'a e1) (cons 'b e2))``. The key travels boxed in a one-element
    list so a dictionary key is never literalized. When no entry matches, the
    scan ends by applying ``(dict)`` to the key, which raises KeyNotFound or
    NotApplicable exactly as direct application does. Literals that are not
    applied to a key use the CONSTRUCT rewrite, since they must still produce
    a dictionary value.

Entry values are desugared recursively and never quoted, so nested
dictionaries, lambdas and applications keep their meaning. Both strategies are
idempotent: a program without sugar comes back structurally unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from dictscheme.types.expressions import (
    Application,
    Conditional,
    Definition,
    DictionaryLiteral,
    Expression,
    Lambda,
    LiteralData,
    VariableReference,
)
from dictscheme.types.primop import PrimOp
from dictscheme.types.symbol import Symbol


class DesugarStrategy(Enum):
    CONSTRUCT = "construct"
    LOOKUP = "lookup"

    @classmethod
    def from_name(cls, name: str) -> DesugarStrategy:
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown desugar strategy {name!r} (expected one of: {choices})")


def _var(name: str) -> VariableReference:
    return VariableReference(name)


def _app(operator: Expression, *operands: Expression) -> Application:
    return Application(operator, operands)


# (lambda (self entries box)
#   (if (pair? entries)
#       (if (eq? (car (car entries)) (car box))
#           (cdr (car entries))
#           (self self (cdr entries) box))
#       ((dict) (car box))))
SCANNER = Lambda(
    ("self", "entries", "box"),
    (
        Conditional(
            _app(PrimOp.IS_PAIR, _var("entries")),
            Conditional(
                _app(
                    PrimOp.EQ,
                    _app(PrimOp.CAR, _app(PrimOp.CAR, _var("entries"))),
                    _app(PrimOp.CAR, _var("box")),
                ),
                _app(PrimOp.CDR, _app(PrimOp.CAR, _var("entries"))),
                _app(_var("self"), _var("self"), _app(PrimOp.CDR, _var("entries")), _var("box")),
            ),
            _app(_app(PrimOp.DICT), _app(PrimOp.CAR, _var("box"))),
        ),
    ),
)


def _entry_pairs(d: DictionaryLiteral, strategy: DesugarStrategy) -> list[Application]:
    return [
        _app(PrimOp.CONS, LiteralData(Symbol(key)), desugar_exp(value, strategy))
        for key, value in d.entries
    ]


def construct_dictionary(d: DictionaryLiteral, strategy: DesugarStrategy) -> Application:
    """``(dict (k e) ...)`` -> ``(dict (cons 'k e') ...)``"""
    return Application(PrimOp.DICT, tuple(_entry_pairs(d, strategy)))


def lookup_dictionary(d: DictionaryLiteral, key: Expression, strategy: DesugarStrategy) -> Application:
    """``((dict (k e) ...) key)`` -> ``(SCANNER SCANNER (list (cons 'k e') ...) (list key'))``"""
    entries = Application(PrimOp.LIST, tuple(_entry_pairs(d, strategy)))
    return _app(SCANNER, SCANNER, entries, _app(PrimOp.LIST, desugar_exp(key, strategy)))


def desugar_exp(exp: Expression, strategy: DesugarStrategy = DesugarStrategy.CONSTRUCT) -> Expression:
    match exp:
        case DictionaryLiteral():
            return construct_dictionary(exp, strategy)
        case Application(operator=DictionaryLiteral() as d, operands=(key,)) if (
            strategy is DesugarStrategy.LOOKUP
        ):
            return lookup_dictionary(d, key, strategy)
        case Application(operator=operator, operands=operands):
            # under CONSTRUCT, ((dict ...) k) stays an application of the built dictionary
            return Application(
                desugar_exp(operator, strategy),
                tuple(desugar_exp(e, strategy) for e in operands),
            )
        case Conditional(test=test, consequent=consequent, alternate=alternate):
            return Conditional(
                desugar_exp(test, strategy),
                desugar_exp(consequent, strategy),
                desugar_exp(alternate, strategy),
            )
        case Lambda(params=params, body=body):
            return Lambda(params, desugar(body, strategy))
        case Definition(name=name, value=value):
            return Definition(name, desugar_exp(value, strategy))
    # atoms and quoted data carry no sugar
    return exp


def desugar(
    program: Iterable[Expression], strategy: DesugarStrategy = DesugarStrategy.CONSTRUCT
) -> tuple[Expression, ...]:
    """Return `program` with all dictionary sugar rewritten into core forms."""
    return tuple(desugar_exp(e, strategy) for e in program)


def has_dictionary_sugar(program: Iterable[Expression]) -> bool:
    """True if any DictionaryLiteral remains outside quoted data."""
    stack = list(program)
    while stack:
        exp = stack.pop()
        if isinstance(exp, DictionaryLiteral):
            return True
        if isinstance(exp, Application):
            stack.append(exp.operator)
            stack.extend(exp.operands)
        elif isinstance(exp, Conditional):
            stack.extend((exp.test, exp.consequent, exp.alternate))
        elif isinstance(exp, Lambda):
            stack.extend(exp.body)
        elif isinstance(exp, Definition):
            stack.append(exp.value)
    return False
