import pytest

from dictscheme.errors import UnboundVariable
from dictscheme.types.environment import Environment


def test_lookup_innermost_first():
    env = Environment.empty().extend("x", 1).extend("x", 2)
    assert env.lookup("x") == 2


def test_lookup_walks_outward():
    env = Environment.empty().extend("x", 1).extend("y", 2)
    assert env.lookup("x") == 1


def test_lookup_unbound():
    with pytest.raises(UnboundVariable) as exc:
        Environment.empty().extend("x", 1).lookup("y")
    assert exc.value.name == "y"
    assert exc.value.kind == "UnboundVariable"


def test_extend_never_mutates():
    base = Environment.empty().extend("x", 1)
    child = base.extend("x", 2)
    assert base.lookup("x") == 1
    assert child.lookup("x") == 2
    assert child.outer is base


def test_iteration_and_membership():
    env = Environment.empty().extend("a", 1).extend("b", 2).extend("a", 3)
    assert list(env) == [("a", 3), ("b", 2), ("a", 1)]
    assert "b" in env
    assert "c" not in env
    assert env.depth == 3
    assert Environment.empty().depth == 0


def test_repr_shows_the_chain():
    env = Environment.empty().extend("a", 1)
    assert repr(env) == "<Environment chain: {a: 1}>"
