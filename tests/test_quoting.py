import pytest

from dictscheme.interpreter import Interpreter
from dictscheme.types.empty import Empty
from dictscheme.types.symbol import Symbol
from dictscheme.types.values import Pair, make_list


@pytest.fixture
def itp():
    return Interpreter()


@pytest.mark.parametrize(
    "source,expected",
    [
        ("'x", Symbol("x")),
        ("(quote x)", Symbol("x")),
        ("'5", 5),
        ("'\"s\"", "s"),
        ("'#t", True),
        ("'()", Empty),
        ("'(1 2 3)", make_list([1, 2, 3])),
        ("'(a (b c))", make_list([Symbol("a"), make_list([Symbol("b"), Symbol("c")])])),
        ("'(1 . 2)", Pair(1, 2)),
        ("''a", make_list([Symbol("quote"), Symbol("a")])),
        ("'(dict (a 1))", make_list([Symbol("dict"), make_list([Symbol("a"), 1])])),
        ("'(+ 1 2)", make_list([Symbol("+"), 1, 2])),
        ("(car '(a b))", Symbol("a")),
        ("(cdr '(a b))", make_list([Symbol("b")])),
        ("(symbol? 'a)", True),
        ("(pair? '())", False),
        ("(eq? 'a (car '(a)))", True),
        ("(eq? '() (cdr '(a)))", True),
        ("((lambda (l) (car (cdr l))) '(1 2 3))", 2),
        ("((lambda (s) (eq? s 'k)) 'k)", True),
    ]
)
def test_quoting(itp, source, expected):
    assert itp.eval(source) == expected


def test_quoted_lists_survive_substitution(itp):
    # a list argument is substituted back in as quoted data, not evaluated
    assert itp.eval("((lambda (l) l) '(+ 1 2))") == make_list([Symbol("+"), 1, 2])
