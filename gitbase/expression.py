"""SQL expression nodes used by table filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Optional, Sequence


class Expression(ABC):
    """A node of an expression tree that can be evaluated against a row."""

    @abstractmethod
    def eval(self, row: Optional[Sequence[Any]]) -> Any:
        """Evaluate the expression for the given row."""

    def children(self) -> tuple["Expression", ...]:
        """Return the direct sub-expressions of this node."""
        return ()


def _is_true(value: Any) -> bool:
    return value is not None and bool(value)


@dataclass(frozen=True)
class Literal(Expression):
    """A constant value."""

    value: Any

    def eval(self, row):
        return self.value

    def __str__(self) -> str:
        if isinstance(self.value, str):
            return f'"{self.value}"'
        return str(self.value)


@dataclass(frozen=True)
class GetField(Expression):
    """A reference to a column of the row, optionally bound to a table."""

    index: int
    name: str
    table: str = ""

    def eval(self, row):
        if row is None:
            raise IndexError(f"no row to read field {self.name!r} from")
        return row[self.index]

    def __str__(self) -> str:
        return f"{self.table}.{self.name}" if self.table else self.name


@dataclass(frozen=True)
class UnresolvedColumn(Expression):
    """A column reference that has not been bound to the schema yet."""

    name: str

    def eval(self, row):
        raise RuntimeError(f"unresolved column {self.name!r} cannot be evaluated")

    def __str__(self) -> str:
        return self.name


class Tuple(Expression):
    """A list of expressions, such as the right side of an IN."""

    __slots__ = ("elements",)

    def __init__(self, *elements: Expression) -> None:
        self.elements: tuple[Expression, ...] = tuple(elements)

    def eval(self, row):
        values = tuple(e.eval(row) for e in self.elements)
        if len(values) == 1:
            return values[0]
        return values

    def children(self):
        return self.elements

    def __iter__(self):
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return self.elements == other.elements

    def __hash__(self) -> int:
        return hash(("Tuple", self.elements))

    def __repr__(self) -> str:
        return f"Tuple{self.elements!r}"

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class _Binary(Expression):
    left: Expression
    right: Expression

    def children(self):
        return (self.left, self.right)


class Equals(_Binary):
    """left = right; NULL when either side is NULL."""

    def eval(self, row):
        left = self.left.eval(row)
        if left is None:
            return None
        right = self.right.eval(row)
        if right is None:
            return None
        return left == right

    def __str__(self) -> str:
        return f"{self.left} = {self.right}"


class GreaterThan(_Binary):
    """left > right; NULL when either side is NULL."""

    def eval(self, row):
        left = self.left.eval(row)
        if left is None:
            return None
        right = self.right.eval(row)
        if right is None:
            return None
        return left > right

    def __str__(self) -> str:
        return f"{self.left} > {self.right}"


class In(_Binary):
    """left IN (right...); NULL when the left side is NULL."""

    def eval(self, row):
        left = self.left.eval(row)
        if left is None:
            return None
        if isinstance(self.right, Tuple):
            values = [e.eval(row) for e in self.right]
        else:
            values = [self.right.eval(row)]
        return left in values

    def __str__(self) -> str:
        return f"{self.left} IN {self.right}"


class And(_Binary):
    """Logical conjunction with SQL three-valued semantics."""

    def eval(self, row):
        left = self.left.eval(row)
        if left is not None and not left:
            return False
        right = self.right.eval(row)
        if right is not None and not right:
            return False
        if left is None or right is None:
            return None
        return True

    def __str__(self) -> str:
        return f"({self.left} AND {self.right})"


def inspect(expr: Optional[Expression], fn: Callable[[Expression], bool]) -> None:
    """Walk the tree depth first; children are skipped when fn returns False."""
    if expr is None:
        return
    if not fn(expr):
        return
    for child in expr.children():
        inspect(child, fn)


def join_and(*args: Expression) -> Optional[Expression]:
    """Join the expressions with AND, folding from the left."""
    if not args:
        return None
    return reduce(And, args[1:], args[0])