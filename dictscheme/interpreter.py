from __future__ import annotations

from dictscheme import Value
from dictscheme import config
from dictscheme.desugar import DesugarStrategy, desugar as desugar_program
from dictscheme.evaluation.evaluator import EvaluationContext, evaluate, evaluate_program
from dictscheme.reader.syntax import parse_program
from dictscheme.result import Result, capture
from dictscheme.types.environment import Environment
from dictscheme.types.expressions import Definition, Expression


class Interpreter:
    """
    A streaming interpreter for dictscheme programs.
    Allows feeding code incrementally; keeps the global environment and the
    fresh-name supply alive between calls so later input sees earlier
    definitions.
    """
    def __init__(self, desugar: bool | None = None, strategy: DesugarStrategy | None = None):
        self.env = Environment.empty()
        self.context = EvaluationContext()
        self.desugar = config.desugar_enabled() if desugar is None else desugar
        self.strategy = strategy if strategy is not None else config.get_desugar_strategy()

    def prepare(self, code: str) -> tuple[Expression, ...]:
        """Parse `code` and, when enabled, desugar it."""
        program = parse_program(code)
        if self.desugar:
            program = desugar_program(program, self.strategy)
        return program

    def eval(self, code: str) -> Value | None:
        """Evaluate every form in `code`; returns the last expression's value.

        Definitions extend the interpreter's environment. If the input ends
        with a definition the result is None.
        """
        program = self.prepare(code)
        self.context.reserve(program)
        result = None
        for exp in program:
            if isinstance(exp, Definition):
                value = evaluate(exp.value, self.env, self.context)
                self.env = self.env.extend(exp.name, value)
                result = None
            else:
                result = evaluate(exp, self.env, self.context)
        return result

    def run(self, code: str) -> Result:
        """Like eval, but returns Ok(value) or Failure(kind, message)."""
        return capture(self.eval, code)


def run(code: str, desugar: bool = False, strategy: DesugarStrategy = DesugarStrategy.CONSTRUCT) -> Result:
    """Parse, optionally desugar, and evaluate a whole program in a fresh environment."""
    def _program() -> tuple[Expression, ...]:
        program = parse_program(code)
        return desugar_program(program, strategy) if desugar else program

    parsed = capture(_program)
    if not parsed.is_ok():
        return parsed
    return evaluate_program(parsed.value)
