"""Application engine for dictscheme.

Applies an evaluated operator to evaluated arguments:
- PrimOp: dispatched to the primitive table.
- Closure: the body is renamed, each parameter is substituted by the literal
  form of its argument, and the result is evaluated as a sequence in an empty
  environment. No environment is ever captured or extended for parameters.
- DictValue applied to exactly one Symbol: dictionary lookup.
Anything else is NotApplicable.
"""

from __future__ import annotations

from typing import Callable

from dictscheme import Value
from dictscheme.errors import ArityError, NotApplicable
from dictscheme.evaluation.primitives import apply_primitive, dict_lookup
from dictscheme.evaluation.substitution import substitute, value_to_literal
from dictscheme.printer import format_value
from dictscheme.types.environment import Environment
from dictscheme.types.primop import PrimOp
from dictscheme.types.symbol import Symbol
from dictscheme.types.values import Closure, DictValue

SequenceEvaluator = Callable[..., Value]


def apply_closure(
    fn: Closure,
    args: list[Value],
    context,
    evaluate_sequence_fn: SequenceEvaluator,
) -> Value:
    """Apply a Closure by rename-then-substitute.

    Parameters:
    - fn: the closure being applied.
    - args: the already-evaluated argument values.
    - context: the EvaluationContext holding the fresh-name supply.
    - evaluate_sequence_fn: evaluator used for the rewritten body.
    """
    if len(args) != len(fn.params):
        raise ArityError(
            f"Closure ({' '.join(fn.params)}) expects {len(fn.params)} arguments, got {len(args)}"
        )
    body = context.rename(fn.body)
    literals = [value_to_literal(a) for a in args]
    return evaluate_sequence_fn(substitute(body, fn.params, literals), Environment.empty(), context)


def apply_dictionary(d: DictValue, args: list[Value]) -> Value:
    if len(args) == 1 and isinstance(args[0], Symbol):
        return dict_lookup(d, args[0])
    raise NotApplicable(f"Dictionary application requires exactly one symbol key, got {len(args)} argument(s)")


def apply_procedure(
    proc: Value,
    args: list[Value],
    context,
    evaluate_sequence_fn: SequenceEvaluator,
) -> Value:
    if isinstance(proc, PrimOp):
        return apply_primitive(proc, args)
    if isinstance(proc, Closure):
        return apply_closure(proc, args, context, evaluate_sequence_fn)
    if isinstance(proc, DictValue):
        return apply_dictionary(proc, args)
    raise NotApplicable(f"Bad procedure {format_value(proc)}")
