"""Command-line driver: ``python -m dictscheme [FILE] [-e EXPR] [--desugar]``."""

from __future__ import annotations

import argparse
import sys

from dictscheme import config
from dictscheme.desugar import DesugarStrategy, desugar
from dictscheme.errors import DictSchemeError
from dictscheme.interpreter import run
from dictscheme.printer import format_program, format_value
from dictscheme.reader.syntax import parse_program


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dictscheme", description=__doc__)
    parser.add_argument("file", nargs="?", help="program file to run (default: stdin)")
    parser.add_argument("-e", "--expr", help="program text to run instead of a file")
    parser.add_argument("--desugar", action="store_true", default=None,
                        help="rewrite dictionary sugar before evaluating")
    parser.add_argument("--strategy", choices=[s.value for s in DesugarStrategy],
                        help="desugaring strategy (default: construct)")
    parser.add_argument("--show-desugared", action="store_true",
                        help="print the desugared program, readable back as input, instead of evaluating it")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.expr is not None:
        source = args.expr
    elif args.file:
        try:
            with open(args.file, encoding="utf-8") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
            return 1
    else:
        source = sys.stdin.read()

    strategy = DesugarStrategy(args.strategy) if args.strategy else config.get_desugar_strategy()

    if args.show_desugared:
        try:
            print(format_program(desugar(parse_program(source), strategy)))
        except DictSchemeError as e:
            print(f"error: {e.kind}: {e.message}", file=sys.stderr)
            return 1
        return 0

    use_desugar = config.desugar_enabled() if args.desugar is None else args.desugar
    result = run(source, desugar=use_desugar, strategy=strategy)
    if result.is_ok():
        print(format_value(result.value))
        return 0
    print(f"error: {result}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
