"""
Defines the expression tree produced by the infix parser.

Classes:
    Tree:
        Base class of every node. Nodes are immutable once constructed, own
        their children exclusively and never point back at their parent.

    Leaf:
        An operand. Has no children.

    BinaryOp:
        An operator applied to exactly two sub-trees.

    Parenthesized:
        A parenthesized sub-expression with exactly one child. The rotation
        step treats it as an opaque operand and never looks inside it.

    TreeDict:
        TypedDict representation for serializing trees to plain Python
        dictionaries, suitable for JSON output or debugging.

Each node tracks:
    kind (str): "leaf", "binary" or "paren".
    value (str | None): Operand text for a Leaf, operator symbol for a BinaryOp.
    children (tuple[Tree, ...]): Zero, two or one children respectively.
    line (int): Source line of the node's first token (0 when built by hand).
    col (int): Source column of the node's first token (0 when built by hand).

Equality is structural: two trees are equal when their kinds, values and
children are equal. Source positions are not compared.

Example:
    tree = BinaryOp("+", BinaryOp("*", Leaf("a"), Leaf("b")), Leaf("c"))
"""

from collections.abc import Iterator
from typing import Any, TypedDict


class TreeDict(TypedDict, total=False):
    """
    TypedDict representation of a Tree used for serialization.

    Fields:
        kind (str): "leaf", "binary" or "paren".
        value (str | None): Operand text or operator symbol.
        line (int): Line number where the node originates.
        col (int): Column number where the node originates.
        children (list[TreeDict]): Child nodes in left-to-right order.
    """

    kind: str
    value: str | None
    line: int
    col: int
    children: list["TreeDict"]


class Tree:
    """
    Base class for expression tree nodes.

    Subclasses set their fields once in `__init__`; any later assignment
    raises `AttributeError`, so a tree can be shared read-only by any number
    of consumers.

    Attributes:
        kind (str): Node variant name.
        value (str | None): Operand text or operator symbol.
        children (tuple[Tree, ...]): Child nodes.
        line (int): Source line number.
        col (int): Source column number.
    """

    __slots__ = ("kind", "value", "children", "line", "col")

    kind: str
    value: str | None
    children: tuple["Tree", ...]
    line: int
    col: int

    def _init(
        self,
        kind: str,
        value: str | None,
        children: tuple["Tree", ...],
        line: int,
        col: int,
    ) -> None:
        for name, val in (
            ("kind", kind),
            ("value", value),
            ("children", children),
            ("line", line),
            ("col", col),
        ):
            object.__setattr__(self, name, val)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.children))

    def leaves(self) -> Iterator[str]:
        """Yields operand values in left-to-right (in-order) order.

        Walks with an explicit stack, so arbitrarily deep trees are fine.
        """
        pending: list[Tree] = [self]
        while pending:
            node = pending.pop()
            if node.kind == "leaf":
                assert node.value is not None  # for mypy
                yield node.value
            else:
                pending.extend(reversed(node.children))

    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        deepest = 0
        pending: list[tuple[Tree, int]] = [(self, 1)]
        while pending:
            node, level = pending.pop()
            deepest = max(deepest, level)
            pending.extend((child, level + 1) for child in node.children)
        return deepest

    def to_dict(self) -> TreeDict:
        return {
            "kind": self.kind,
            "value": self.value,
            "line": self.line,
            "col": self.col,
            "children": [c.to_dict() for c in self.children],
        }


class Leaf(Tree):
    """An operand.

    Args:
        value (str): The operand's text.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
    """

    __slots__ = ()

    def __init__(self, value: str, line: int = 0, col: int = 0) -> None:
        self._init("leaf", value, (), line, col)

    def __repr__(self) -> str:
        return f"Leaf({self.value!r})"


class BinaryOp(Tree):
    """An operator node with exactly two children.

    Args:
        op (str): The operator symbol.
        left (Tree): Left operand.
        right (Tree): Right operand.
        line (int): Source line number; defaults to the left operand's.
        col (int): Source column number; defaults to the left operand's.
    """

    __slots__ = ()

    def __init__(
        self,
        op: str,
        left: Tree,
        right: Tree,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        self._init(
            "binary",
            op,
            (left, right),
            left.line if line is None else line,
            left.col if col is None else col,
        )

    @property
    def op(self) -> str:
        assert self.value is not None  # for mypy
        return self.value

    @property
    def left(self) -> Tree:
        return self.children[0]

    @property
    def right(self) -> Tree:
        return self.children[1]

    def __repr__(self) -> str:
        return f"BinaryOp({self.value!r}, {self.left!r}, {self.right!r})"


class Parenthesized(Tree):
    """A parenthesized sub-expression, opaque to rotation.

    Args:
        child (Tree): The enclosed expression.
        line (int): Line of the opening parenthesis (default is 0).
        col (int): Column of the opening parenthesis (default is 0).
    """

    __slots__ = ()

    def __init__(self, child: Tree, line: int = 0, col: int = 0) -> None:
        self._init("paren", None, (child,), line, col)

    @property
    def child(self) -> Tree:
        return self.children[0]

    def __repr__(self) -> str:
        return f"Parenthesized({self.child!r})"
