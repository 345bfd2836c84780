# Core type aliases for the dictscheme data model.
# Expressions are frozen dataclasses (see dictscheme.types.expressions); run-time
# values reuse plain Python numbers, booleans and strings alongside Symbol, Pair,
# Empty, Closure, PrimOp and DictValue.
#
# Naming guidance:
# - Expression: a node of a parsed (or desugared) program tree.
# - Value:      the result of evaluating an Expression.

from typing import Any

Value = Any
Expression = Any
