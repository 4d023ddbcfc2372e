"""Split pushed-down filters into column selectors and remaining conditions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence

from .expression import (
    Equals,
    Expression,
    GetField,
    In,
    Literal,
    Tuple,
    inspect,
    join_and,
)


@dataclass(frozen=True)
class Column:
    """A column of a table schema."""

    name: str
    source: str = ""


Schema = Sequence[Column]


class Selectors(dict):
    """Column name to a list of selectors (lists of OR'd values).

    Selectors of the same column are AND'd together, so a row can only
    match when all of them are equal.
    """

    def is_valid(self, key: str) -> bool:
        """Whether all selectors of the given column are equal."""
        vals = self.get(key) or []
        return all(sel == vals[0] for sel in vals[1:])

    def text_values(self, key: str) -> list:
        """Values of the column as strings; empty when missing or invalid."""
        vals = self.get(key)
        if not vals or not self.is_valid(key):
            return []
        return [to_text(v) for v in vals[0]]


def to_text(value: Any) -> Optional[str]:
    """Convert a SQL value to text."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    raise TypeError(f"invalid type: {type(value).__name__}")


def schema_contains(schema: Schema, name: str, source: str) -> bool:
    """Whether the schema has a column with that name and source."""
    name, source = name.lower(), source.lower()
    return any(c.name.lower() == name and c.source.lower() == source for c in schema)


def can_handle_equals(schema: Schema, table_name: str, eq: Equals) -> bool:
    """Whether one side is a column of the table and the other a literal."""
    left, right = eq.left, eq.right
    if isinstance(left, GetField):
        return (
            isinstance(right, Literal)
            and left.table == table_name
            and schema_contains(schema, left.name, table_name)
        )
    if isinstance(left, Literal):
        return (
            isinstance(right, GetField)
            and right.table == table_name
            and schema_contains(schema, right.name, table_name)
        )
    return False


def can_handle_in(schema: Schema, table_name: str, in_expr: In) -> bool:
    """Whether the IN compares a table column to a tuple of literals."""
    left = in_expr.left
    if not isinstance(left, GetField):
        return False
    if left.table != table_name or not schema_contains(schema, left.name, table_name):
        return False
    right = in_expr.right
    if not isinstance(right, Tuple):
        return False
    return all(isinstance(e, Literal) for e in right)


def get_equality_values(eq: Equals) -> tuple[str, Any]:
    """The field name and literal value of a field/literal equality."""
    if isinstance(eq.left, GetField):
        return eq.left.name, eq.right.eval(None)
    if isinstance(eq.left, Literal) and isinstance(eq.right, GetField):
        return eq.right.name, eq.left.eval(None)
    raise ValueError(f"not a comparison between a field and a literal: {eq}")


def get_in_values(in_expr: In) -> tuple[str, list]:
    """The field name and literal values of a field IN (literals...)."""
    left, right = in_expr.left, in_expr.right
    if not isinstance(left, GetField) or not isinstance(right, Tuple):
        raise ValueError(f"not a field compared to a tuple: {in_expr}")
    values = []
    for elem in right:
        if not isinstance(elem, Literal):
            raise ValueError(f"tuple element is not a literal: {elem}")
        values.append(elem.eval(None))
    return left.name, values


def handled_filters(
    table_name: str, schema: Schema, filters: Iterable[Expression]
) -> list:
    """Filters that reference no column of another table."""
    handled = []
    for f in filters:
        other = False

        def visit(e: Expression) -> bool:
            nonlocal other
            if isinstance(e, GetField) and e.table != table_name:
                other = True
            return True

        inspect(f, visit)
        if not other:
            handled.append(f)
    return handled


def classify_filters(
    schema: Schema, table: str, filters: Iterable[Expression], *args: str
) -> tuple[Selectors, list]:
    """Split filters into selectors on the given columns and other conditions."""
    handled_cols = set(args)
    selectors = Selectors()
    conditions = []
    for f in filters:
        if isinstance(f, Equals) and can_handle_equals(schema, table, f):
            field, val = get_equality_values(f)
            if field in handled_cols:
                selectors.setdefault(field, []).append([val])
                continue
        elif isinstance(f, In) and can_handle_in(schema, table, f):
            field, vals = get_in_values(f)
            if field in handled_cols:
                selectors.setdefault(field, []).append(list(vals))
                continue
        conditions.append(f)
    return selectors, conditions


def row_iter_with_selectors(
    schema: Schema,
    table_name: str,
    filters: Iterable[Expression],
    handled_cols: Iterable[str],
    iter_build: Callable[[Selectors], Iterable[Sequence[Any]]],
) -> Iterator[Sequence[Any]]:
    """Build rows from the selectors and apply the remaining filters.

    Every selector must be honoured by iter_build, since selectors are
    not applied again afterwards.
    """
    selectors, conditions = classify_filters(
        schema, table_name, filters, *handled_cols
    )
    rows = iter_build(selectors)
    if not conditions:
        return iter(rows)
    condition = join_and(*conditions)
    return (row for row in rows if _truthy(condition.eval(row)))


def _truthy(value: Any) -> bool:
    return value is not None and bool(value)