"""#if expression evaluation: three-valued results and short-circuiting."""

import pytest

from blockprops.directives import DirectiveEnvironment, Truth, evaluate_expression, tokenize


ENV = DirectiveEnvironment(
    flags={"EUPHORIA_PATCHES_IRIS": True, "EUPHORIA_PATCHES_OCULUS": False},
    variables={"MC_VERSION": 12101, "IRIS_TAG_SUPPORT": 2},
)


def ev(expr):
    return evaluate_expression(expr, ENV)


def test_tokenize_kinds():
    kinds = [t.kind for t in tokenize("defined FOO && MC_VERSION >= 12000 || X ? 1")]
    assert kinds == ["defined", "ident", "and", "ident", "op", "int", "or", "ident", "error", "int"]


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("MC_VERSION >= 12100", Truth.TRUE),
        ("MC_VERSION < 12100", Truth.FALSE),
        ("MC_VERSION == 12101", Truth.TRUE),
        ("MC_VERSION != 12101", Truth.FALSE),
        ("IRIS_TAG_SUPPORT > 1", Truth.TRUE),
        ("IRIS_TAG_SUPPORT <= 1", Truth.FALSE),
        ("defined EUPHORIA_PATCHES_IRIS", Truth.TRUE),
        ("defined EUPHORIA_PATCHES_OCULUS", Truth.FALSE),
        ("defined SOMETHING_ELSE", Truth.FALSE),
    ],
)
def test_leaves(expr, expected):
    assert ev(expr) is expected


@pytest.mark.parametrize(
    "expr",
    [
        "UNKNOWN_VAR > 3",
        "MC_VERSION =! 12000",
        "MC_VERSION >",
        "MC_VERSION",
        "",
        "(MC_VERSION > 1)",
    ],
)
def test_unevaluable_is_unknown(expr):
    assert ev(expr) is Truth.UNKNOWN


def test_and_short_circuits_before_unknown():
    assert ev("MC_VERSION < 100 && UNKNOWN_VAR > 3") is Truth.FALSE


def test_or_short_circuits_before_unknown():
    assert ev("MC_VERSION > 100 || UNKNOWN_VAR > 3") is Truth.TRUE


def test_unknown_first_poisons():
    assert ev("UNKNOWN_VAR > 3 && MC_VERSION < 100") is Truth.UNKNOWN
    assert ev("UNKNOWN_VAR > 3 || MC_VERSION > 100") is Truth.UNKNOWN


def test_and_binds_tighter_than_or():
    # false && x || true -> true
    assert ev("MC_VERSION < 100 && IRIS_TAG_SUPPORT == 2 || defined EUPHORIA_PATCHES_IRIS") is Truth.TRUE
    assert ev("MC_VERSION > 100 && IRIS_TAG_SUPPORT == 0 || defined EUPHORIA_PATCHES_OCULUS") is Truth.FALSE
