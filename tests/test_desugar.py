import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from dictscheme.desugar import (
    SCANNER,
    DesugarStrategy,
    desugar,
    desugar_exp,
    has_dictionary_sugar,
)
from dictscheme.evaluation.evaluator import evaluate_program
from dictscheme.printer import format_expression, format_program
from dictscheme.reader.syntax import parse_expression, parse_program
from dictscheme.types.expressions import Application, DictionaryLiteral, Lambda
from dictscheme.types.primop import PrimOp

STRATEGIES = list(DesugarStrategy)

# Every program here uses dictionary sugar somewhere
PROGRAMS = [
    "((dict (a 1) (b 2)) 'a)",
    "((dict (a 1) (b 2)) 'b)",
    "((dict (a 1)) 'missing)",
    "(get (dict (a 1) (b 2)) 'b)",
    "(dict? (dict))",
    "(((dict (a (dict (c 2)))) 'a) 'c)",
    "(((dict (f (lambda (x) (* x 10)))) 'f) 4)",
    "((dict (a (+ 1 2)) (b (car 5))) 'a)",
    "((dict (a 1)) (car '(a)))",
    "(define d (dict (x 1) (y 2))) (+ (d 'x) (get d 'y))",
    "(define d (dict (x 1))) (get (bind d 'x 5) 'x)",
    "((lambda (k) ((dict (a 1) (b 2)) k)) 'b)",
    "((lambda (v) ((dict (a v)) 'a)) 7)",
    "(if ((dict (t #f)) 't) 1 2)",
    "((dict (a '(1 2))) 'a)",
    "(list ((dict (a 1)) 'a) ((dict (a 2)) 'a))",
    # keys that are not symbols fail the same way before and after desugaring
    "((dict (a 1)) 5)",
    "((dict (a 1)) \"a\")",
    "((dict (a 1)) (dict))",
    "((dict (a 1)) (dict (b 2)))",
    "((dict) (lambda (x) x))",
    "((dict (a 1)) '(a))",
    "((dict (a 1)) 'a 'b)",
]


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("source", PROGRAMS)
def test_desugaring_preserves_results(source, strategy):
    program = parse_program(source)
    assert evaluate_program(desugar(program, strategy)) == evaluate_program(program)


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("source", PROGRAMS)
def test_desugaring_removes_all_sugar(source, strategy):
    assert has_dictionary_sugar(parse_program(source))
    assert not has_dictionary_sugar(desugar(parse_program(source), strategy))


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("source", PROGRAMS)
def test_desugaring_is_idempotent(source, strategy):
    once = desugar(parse_program(source), strategy)
    assert desugar(once, strategy) == once


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("source", PROGRAMS)
def test_printed_desugared_program_reads_back(source, strategy):
    program = parse_program(source)
    desugared = desugar(program, strategy)
    reread = parse_program(format_program(desugared))
    assert evaluate_program(reread) == evaluate_program(program)


@pytest.mark.parametrize(
    "source",
    [
        "(+ 1 2)",
        "(lambda (x) (if x 'a \"b\"))",
        "(get (bind d 'k 1) 'k)",
        "'(dict (a 1))",
    ]
)
def test_programs_without_sugar_are_unchanged(source):
    program = parse_program(source)
    for strategy in STRATEGIES:
        assert desugar(program, strategy) == program


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(dict)", "(dict)"),
        ("(dict (a 1) (b 2))", "(dict (cons 'a 1) (cons 'b 2))"),
        ("((dict (a 1) (b 2)) 'a)", "((dict (cons 'a 1) (cons 'b 2)) 'a)"),
        ("(dict (a (dict (b x))))", "(dict (cons 'a (dict (cons 'b x))))"),
        ("(lambda (x) (dict (a x)))", "(lambda (x) (dict (cons 'a x)))"),
        ("(if c (dict) 0)", "(if c (dict) 0)"),
        ("((dict (a 1)) 'a 'b)", "((dict (cons 'a 1)) 'a 'b)"),
    ]
)
def test_construct_strategy(source, expected):
    out = desugar_exp(parse_expression(source), DesugarStrategy.CONSTRUCT)
    assert format_expression(out) == expected


def test_construct_keeps_entry_order():
    out = desugar_exp(parse_expression("(dict (z 1) (a 2) (m 3))"))
    assert out.operator is PrimOp.DICT
    assert [format_expression(e) for e in out.operands] == ["(cons 'z 1)", "(cons 'a 2)", "(cons 'm 3)"]


def test_lookup_strategy_scans_a_list():
    out = desugar_exp(parse_expression("((dict (a 1) (b 2)) k)"), DesugarStrategy.LOOKUP)
    assert isinstance(out, Application)
    assert out.operator == SCANNER
    assert out.operands[0] == SCANNER
    assert format_expression(out.operands[1]) == "(list (cons 'a 1) (cons 'b 2))"
    assert format_expression(out.operands[2]) == "(list k)"


def test_lookup_strategy_builds_unapplied_dictionaries():
    out = desugar_exp(parse_expression("(dict (a 1))"), DesugarStrategy.LOOKUP)
    assert format_expression(out) == "(dict (cons 'a 1))"


def test_scanner_is_core_language_only():
    assert isinstance(SCANNER, Lambda)
    assert not has_dictionary_sugar([SCANNER])


def test_desugared_program_prints_as_core_syntax():
    program = desugar(parse_program("(define d (dict (a 1))) (d 'a)"))
    assert format_program(program) == "(define d (dict (cons 'a 1)))\n(d 'a)"


def test_nested_dictionary_values_are_not_quoted():
    out = desugar_exp(parse_expression("(dict (a (dict (b 1))))"))
    inner = out.operands[0].operands[1]
    assert isinstance(inner, Application) and inner.operator is PrimOp.DICT


def test_desugar_does_not_touch_the_input():
    program = parse_program("((dict (a 1)) 'a)")
    desugar(program, DesugarStrategy.LOOKUP)
    assert isinstance(program[0].operator, DictionaryLiteral)


@pytest.mark.parametrize("name", ["construct", "LOOKUP", " lookup "])
def test_strategy_from_name(name):
    assert DesugarStrategy.from_name(name) in STRATEGIES


def test_strategy_from_unknown_name():
    with pytest.raises(ValueError):
        DesugarStrategy.from_name("inline")


# -------------------------------
# Property tests
# -------------------------------
keys = st.sampled_from(["a", "b", "c", "d"])
key_exprs = st.one_of(keys.map(lambda k: "'" + k), st.sampled_from(["5", "\"a\"", "#f", "(dict)", "'(a)"]))
leaf_values = st.one_of(
    st.integers(min_value=-1000, max_value=1000).map(str),
    st.booleans().map(lambda b: "#t" if b else "#f"),
    st.sampled_from(['"s"', "'q", "'()", "(+ 1 2)", "(car 5)", "((lambda (x) x) 4)"]),
)


def dict_literals(values):
    return st.dictionaries(keys, values, max_size=4).map(
        lambda d: "(dict " + " ".join(f"({k} {v})" for k, v in d.items()) + ")"
    )


dict_exprs = st.recursive(leaf_values, dict_literals, max_leaves=8)


@settings(max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(dict_literals(dict_exprs), key_exprs, st.sampled_from(STRATEGIES))
def test_lookup_agrees_after_desugaring(literal, key, strategy):
    program = parse_program(f"({literal} {key})")
    assert evaluate_program(desugar(program, strategy)) == evaluate_program(program)


@settings(max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(dict_exprs, st.sampled_from(STRATEGIES))
def test_desugar_is_idempotent_for_generated_programs(source, strategy):
    once = desugar(parse_program(source), strategy)
    assert desugar(once, strategy) == once
    assert not has_dictionary_sugar(once)
