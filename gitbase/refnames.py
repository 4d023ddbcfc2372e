"""Functions telling whether a reference name is a remote branch or a tag."""

from __future__ import annotations

from dataclasses import dataclass

from .expression import Expression

_REMOTE_PREFIX = "refs/remotes/"
_TAG_PREFIX = "refs/tags/"


class InvalidTypeError(TypeError):
    """A value is not of the type the function expects."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"invalid type: {type_name}")
        self.type_name = type_name


def is_remote_ref(name: str) -> bool:
    """Whether the reference name is a remote branch."""
    return name.startswith(_REMOTE_PREFIX)


def is_tag_ref(name: str) -> bool:
    """Whether the reference name is a tag."""
    return name.startswith(_TAG_PREFIX)


def _child_name(child: Expression, row) -> object:
    val = child.eval(row)
    if val is None:
        return None
    if not isinstance(val, str):
        raise InvalidTypeError(type(val).__name__)
    return val


def _single_child(owner: object, children: tuple) -> Expression:
    if len(children) != 1:
        raise ValueError(
            f"{owner}: invalid children number, got {len(children)}, expecting 1"
        )
    return children[0]


@dataclass(frozen=True)
class IsRemote(Expression):
    """is_remote(name): true when name is a remote branch reference."""

    child: Expression

    def eval(self, row):
        name = _child_name(self.child, row)
        return name is not None and is_remote_ref(name)

    def children(self):
        return (self.child,)

    def with_children(self, *args: Expression) -> "IsRemote":
        """A copy of this function with the given child."""
        return IsRemote(_single_child(self, args))

    def __str__(self) -> str:
        return f"is_remote({self.child})"


@dataclass(frozen=True)
class IsTag(Expression):
    """is_tag(name): true when name is a tag reference."""

    child: Expression

    def eval(self, row):
        name = _child_name(self.child, row)
        return name is not None and is_tag_ref(name)

    def children(self):
        return (self.child,)

    def with_children(self, *args: Expression) -> "IsTag":
        """A copy of this function with the given child."""
        return IsTag(_single_child(self, args))

    def __str__(self) -> str:
        return f"is_tag({self.child})"