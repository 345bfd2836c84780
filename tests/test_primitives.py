import pytest

from dictscheme.errors import ArityError, KeyNotFound, TypeMismatch
from dictscheme.evaluation.primitives import (
    PRIMITIVES,
    apply_primitive,
    dict_bind,
    dict_lookup,
    is_eq,
    make_dict,
)
from dictscheme.types.empty import Empty
from dictscheme.types.primop import PrimOp
from dictscheme.types.symbol import Symbol
from dictscheme.types.values import Closure, DictValue, Pair, make_list

A, B = Symbol("a"), Symbol("b")


def test_every_primitive_has_an_implementation():
    assert set(PRIMITIVES) == set(PrimOp)


@pytest.mark.parametrize("op", list(PrimOp))
def test_primops_round_trip_through_their_names(op):
    assert PrimOp.from_name(op.op) is op


def test_ordinary_names_are_not_primitives():
    assert PrimOp.from_name("define") is None
    assert PrimOp.from_name("x") is None


@pytest.mark.parametrize(
    "op,args,expected",
    [
        (PrimOp.ADD, [], 0),
        (PrimOp.ADD, [1, 2, 3], 6),
        (PrimOp.MUL, [], 1),
        (PrimOp.MUL, [2, 2.5], 5.0),
        (PrimOp.SUB, [5, 7], -2),
        (PrimOp.DIV, [9, 3], 3),
        (PrimOp.DIV, [1, 4], 0.25),
        (PrimOp.GT, [2, 1], True),
        (PrimOp.LT, ["a", "b"], True),
        (PrimOp.NUM_EQ, [1, 1.0], True),
        (PrimOp.NUM_EQ, [True, 1], False),
        (PrimOp.STRING_EQ, ["x", "x"], True),
        (PrimOp.AND, [], True),
        (PrimOp.OR, [], False),
        (PrimOp.NOT, [False], True),
        (PrimOp.NOT, [Empty], False),
        (PrimOp.IS_PAIR, [Pair(1, 2)], True),
        (PrimOp.IS_PAIR, [Empty], False),
        (PrimOp.IS_NUMBER, [True], False),
        (PrimOp.IS_NUMBER, [2.5], True),
        (PrimOp.IS_BOOLEAN, [False], True),
        (PrimOp.IS_SYMBOL, [A], True),
        (PrimOp.IS_SYMBOL, ["a"], False),
        (PrimOp.IS_STRING, ["a"], True),
        (PrimOp.IS_DICT, [DictValue()], True),
        (PrimOp.IS_DICT, [make_list([Pair(A, 1)])], False),
        (PrimOp.CONS, [1, Empty], make_list([1])),
        (PrimOp.CAR, [make_list([1, 2])], 1),
        (PrimOp.CDR, [make_list([1, 2])], make_list([2])),
        (PrimOp.LIST, [], Empty),
        (PrimOp.LIST, [1, A, "s"], make_list([1, A, "s"])),
    ]
)
def test_apply_primitive(op, args, expected):
    result = apply_primitive(op, args)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "x,y,expected",
    [
        (1, 1, True),
        (1, 1.0, True),
        ("s", "s", True),
        (A, A, True),
        (A, B, False),
        (Empty, Empty, True),
        (True, True, True),
        (True, 1, False),
        (0, False, False),
        ("a", A, False),
        (Pair(1, 2), Pair(1, 2), False),
        (Closure(("x",), (PrimOp.ADD,)), Closure(("x",), (PrimOp.ADD,)), False),
        (DictValue(), DictValue(), False),
    ]
)
def test_eq_is_only_defined_over_atoms(x, y, expected):
    assert is_eq(x, y) is expected
    assert apply_primitive(PrimOp.EQ, [x, y]) is expected


@pytest.mark.parametrize(
    "op,args",
    [
        (PrimOp.ADD, [1, "2"]),
        (PrimOp.ADD, [True]),
        (PrimOp.DIV, [1, 0]),
        (PrimOp.LT, [1, "a"]),
        (PrimOp.STRING_EQ, [A, "a"]),
        (PrimOp.AND, [True, 1]),
        (PrimOp.CAR, [5]),
        (PrimOp.CDR, [Empty]),
        (PrimOp.DICT, [1]),
        (PrimOp.DICT, [Pair("a", 1)]),
        (PrimOp.GET, [make_list([Pair(A, 1)]), A]),
        (PrimOp.BIND, [DictValue(), 1, 2]),
    ]
)
def test_type_mismatch(op, args):
    with pytest.raises(TypeMismatch) as exc:
        apply_primitive(op, args)
    assert exc.value.operator == op.op


@pytest.mark.parametrize(
    "op,args",
    [
        (PrimOp.SUB, [1]),
        (PrimOp.DIV, [1, 2, 3]),
        (PrimOp.CONS, [1]),
        (PrimOp.CAR, []),
        (PrimOp.GET, [DictValue()]),
        (PrimOp.BIND, [DictValue(), A]),
        (PrimOp.IS_DICT, []),
    ]
)
def test_arity(op, args):
    with pytest.raises(ArityError) as exc:
        apply_primitive(op, args)
    assert op.op in exc.value.message


def test_arity_message():
    with pytest.raises(ArityError) as exc:
        apply_primitive(PrimOp.CAR, [1, 2])
    assert exc.value.message == "car expects exactly 1 argument, got 2"


def test_make_dict_preserves_order():
    d = make_dict([Pair(A, 1), Pair(B, 2)])
    assert [(k, v) for k, v in d.items()] == [(A, 1), (B, 2)]


def test_lookup_first_match_wins():
    d = make_dict([Pair(A, 1), Pair(A, 2)])
    assert dict_lookup(d, A) == 1


def test_dict_bind_does_not_touch_the_original():
    d = make_dict([Pair(A, 1)])
    d2 = dict_bind(d, A, 2)
    assert dict_lookup(d, A) == 1
    assert dict_lookup(d2, A) == 2
    # the old chain is shared, not copied
    assert d2.entries.tail is d.entries


def test_lookup_missing_key():
    with pytest.raises(KeyNotFound) as exc:
        dict_lookup(DictValue(), B)
    assert exc.value.kind == "KeyNotFound"
    assert exc.value.key == "b"


def test_primitives_do_not_mutate_arguments():
    args = [1, 2]
    apply_primitive(PrimOp.ADD, args)
    assert args == [1, 2]
