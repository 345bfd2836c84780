"""Core evaluator for dictscheme.

Strict, left-to-right, substitution-based evaluation: closures carry no
environment and the only Environment in play is the one built by definitions
at the top of a sequence. The first condition raised anywhere propagates out
unchanged; `evaluate_program` turns it into a Failure.
"""

from __future__ import annotations

from typing import Iterable

from dictscheme import Value
from dictscheme.errors import EmptySequence, MalformedSyntax
from dictscheme.evaluation.apply import apply_procedure
from dictscheme.evaluation.primitives import make_dict
from dictscheme.evaluation.substitution import NameSupply, collect_names, rename_exps
from dictscheme.result import Result, capture
from dictscheme.types.environment import Environment
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
from dictscheme.types.values import Closure, Pair


class EvaluationContext:
    """Per-run state: the fresh-name supply used when closure bodies are renamed."""

    __slots__ = ("names",)

    def __init__(self, names: NameSupply | None = None):
        self.names: NameSupply = names if names is not None else NameSupply()

    @classmethod
    def for_program(cls, program: Iterable[Expression]) -> EvaluationContext:
        return cls(NameSupply(0, collect_names(program)))

    def reserve(self, program: Iterable[Expression]) -> None:
        self.names = self.names.reserve(collect_names(program))

    def rename(self, body: Iterable[Expression]) -> tuple[Expression, ...]:
        renamed, self.names = rename_exps(body, self.names)
        return renamed


def evaluate(
    expr: Expression, env: Environment, context: EvaluationContext | None = None
) -> Value:
    if context is None:
        context = EvaluationContext.for_program([expr])

    match expr:
        case NumberLiteral(value=v) | BooleanLiteral(value=v) | StringLiteral(value=v):
            return v
        case PrimOp():
            return expr
        case VariableReference(name=name):
            return env.lookup(name)
        case LiteralData(datum=datum):
            return datum
        case Conditional():
            test = evaluate(expr.test, env, context)
            # Only #f is false; 0, "" and '() are all true
            branch = expr.alternate if test is False else expr.consequent
            return evaluate(branch, env, context)
        case Lambda(params=params, body=body):
            return Closure(params, body)
        case Application():
            operator = evaluate(expr.operator, env, context)
            args = [evaluate(operand, env, context) for operand in expr.operands]
            return apply_procedure(operator, args, context, evaluate_sequence)
        case DictionaryLiteral():
            entries = [Pair(Symbol(key), evaluate(value, env, context)) for key, value in expr.entries]
            return make_dict(entries)
        case Definition():
            raise MalformedSyntax(f"define of {expr.name} is only allowed at the start of a sequence")

    raise MalformedSyntax(f"Unknown expression type: {expr!r}")


def evaluate_sequence(
    exps: Iterable[Expression], env: Environment, context: EvaluationContext | None = None
) -> Value:
    """Evaluate `exps` in order and return the value of the last one.

    A definition extends the environment seen by the rest of the sequence;
    other non-final values are discarded. A sequence that is empty, or that
    ends in a definition, raises EmptySequence.
    """
    exps = tuple(exps)
    if context is None:
        context = EvaluationContext.for_program(exps)
    if not exps:
        raise EmptySequence("Empty sequence")

    *init, last = exps
    for exp in init:
        if isinstance(exp, Definition):
            env = env.extend(exp.name, evaluate(exp.value, env, context))
        else:
            evaluate(exp, env, context)
    if isinstance(last, Definition):
        evaluate(last.value, env, context)
        raise EmptySequence(f"Sequence ends with the definition of {last.name}")
    return evaluate(last, env, context)


def run_program(program: Iterable[Expression]) -> Value:
    """Evaluate a whole program from an empty environment, raising on failure."""
    program = tuple(program)
    return evaluate_sequence(program, Environment.empty(), EvaluationContext.for_program(program))


def evaluate_program(program: Iterable[Expression]) -> Result:
    """Evaluate a whole program; returns Ok(value) or Failure(kind, message)."""
    return capture(run_program, program)
