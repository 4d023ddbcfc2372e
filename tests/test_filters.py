import pytest

from gitbase.expression import (
    Equals,
    GetField,
    GreaterThan,
    In,
    Literal,
    Tuple,
    UnresolvedColumn,
)
from gitbase.filters import (
    Column,
    Selectors,
    can_handle_equals,
    can_handle_in,
    classify_filters,
    get_equality_values,
    get_in_values,
    handled_filters,
    row_iter_with_selectors,
    schema_contains,
    to_text,
)

SCHEMA = [Column("field", "table")]


@pytest.mark.parametrize(
    "expr, ok",
    [
        (Equals(Literal(1), GetField(0, "field", "table")), True),
        (Equals(Literal(1), GetField(0, "field", "other")), False),
        (Equals(Literal(1), Literal(1)), False),
        (Equals(GetField(1, "foo"), GetField(0, "field", "table")), False),
        (Equals(GetField(0, "field", "table"), Literal(1)), True),
        (Equals(GetField(0, "field", "table"), GetField(1, "foo")), False),
        (Equals(GetField(0, "field", "other"), Literal(1)), False),
        (Equals(UnresolvedColumn("foo"), UnresolvedColumn("foo")), False),
    ],
)
def test_can_handle_equals(expr, ok):
    assert can_handle_equals(SCHEMA, "table", expr) is ok


@pytest.mark.parametrize(
    "expr, ok",
    [
        (In(Literal(1), Tuple(Literal(1), Literal(2))), False),
        (In(GetField(0, "field", "table"), Literal(1)), False),
        (In(GetField(0, "field", "table"), Tuple(Literal(1), Tuple())), False),
        (In(GetField(0, "field", "table"), Tuple(Literal(1), Literal(2))), True),
    ],
)
def test_can_handle_in(expr, ok):
    assert can_handle_in(SCHEMA, "table", expr) is ok


def test_get_equality_values():
    assert get_equality_values(Equals(GetField(0, "foo"), Literal("bar"))) == (
        "foo",
        "bar",
    )
    assert get_equality_values(Equals(Literal("bar"), GetField(0, "foo"))) == (
        "foo",
        "bar",
    )


def test_get_in_values():
    col, vals = get_in_values(In(GetField(0, "foo"), Tuple(Literal(1), Literal(2))))
    assert col == "foo"
    assert vals == [1, 2]


def test_get_in_values_rejects_non_tuple():
    with pytest.raises(ValueError):
        get_in_values(In(GetField(0, "foo"), Literal(1)))


def test_handled_filters():
    f1 = Equals(GetField(0, "foo", "a"), GetField(1, "foo", "b"))
    f2 = Equals(GetField(0, "foo", "a"), Literal("something"))
    f3 = Equals(GetField(0, "foo", "b"), Literal("something"))
    f4 = GreaterThan(Literal(1), Literal(0))
    schema = [Column("foo", "a")]
    assert handled_filters("a", schema, [f1, f2, f3, f4]) == [f2, f4]


def test_selectors():
    selectors = Selectors(
        {
            "a": [[1, 2]],
            "b": [[1, 2], [1, 2]],
            "c": [[1, 2], [4, 3]],
        }
    )
    assert selectors.is_valid("d")
    assert selectors.text_values("d") == []
    assert selectors.is_valid("b")
    assert selectors.text_values("b") == ["1", "2"]
    assert selectors.is_valid("a")
    assert selectors.text_values("a") == ["1", "2"]
    assert not selectors.is_valid("c")
    assert selectors.text_values("c") == []


CLASSIFY_CASES = [
    (Equals(GetField(0, "a", "foo"), Literal(1)), True),
    (Equals(GetField(1, "b", "foo"), Literal(1)), False),
    (GreaterThan(GetField(0, "a", "foo"), Literal(0)), False),
    (Equals(GetField(0, "a", "foo"), GetField(2, "c", "foo")), False),
    (In(GetField(0, "a", "foo"), Tuple(Literal(5), Literal(6), Literal(7))), True),
    (In(GetField(0, "b", "foo"), Tuple(Literal(5), Literal(6), Literal(7))), False),
    (
        In(
            GetField(0, "a", "foo"),
            Tuple(GetField(2, "c", "foo"), Literal(6), Literal(7)),
        ),
        False,
    ),
]
CLASSIFY_SCHEMA = [Column("a", "foo"), Column("b", "foo"), Column("c", "foo")]


def test_classify_filters():
    filters = [f for f, _ in CLASSIFY_CASES]
    not_selectors = [f for f, is_sel in CLASSIFY_CASES if not is_sel]
    sels, rest = classify_filters(CLASSIFY_SCHEMA, "foo", filters, "a")
    assert sels == {"a": [[1], [5, 6, 7]]}
    assert rest == not_selectors


def test_row_iter_with_selectors_applies_remaining_filters():
    filters = [
        Equals(GetField(0, "a", "foo"), Literal(1)),
        GreaterThan(GetField(1, "b", "foo"), Literal(10)),
    ]
    received = []

    def build(selectors):
        received.append(selectors)
        return [(1, 5), (1, 20), (1, 30)]

    rows = list(row_iter_with_selectors(CLASSIFY_SCHEMA, "foo", filters, ["a"], build))
    assert received == [{"a": [[1]]}]
    assert rows == [(1, 20), (1, 30)]


def test_row_iter_with_selectors_without_conditions():
    filters = [Equals(GetField(0, "a", "foo"), Literal(1))]
    rows = list(
        row_iter_with_selectors(
            CLASSIFY_SCHEMA, "foo", filters, ["a"], lambda s: [(1,), (2,)]
        )
    )
    assert rows == [(1,), (2,)]


def test_to_text():
    assert to_text(1) == "1"
    assert to_text("x") == "x"
    assert to_text(b"abc") == "abc"
    assert to_text(None) is None
    with pytest.raises(TypeError):
        to_text(object())


def test_schema_contains():
    assert schema_contains(SCHEMA, "field", "table")
    assert not schema_contains(SCHEMA, "field", "other")