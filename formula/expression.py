"""
Immutable propositional formula trees.

Every node is a frozen dataclass, so equality and hashing are purely
structural and sub-trees can be shared between formulas without copying.
No normalization is ever applied: ``A & B`` and ``B & A`` are different
expressions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

OP_AND = "&"
OP_OR = "v"
OP_IMPLIES = "->"
OP_NOT = "~"


class Expression:
    """Base class for formula nodes."""

    __slots__ = ()

    def children(self) -> Tuple["Expression", ...]:
        return ()

    def walk(self) -> Iterator["Expression"]:
        """Yield this node and every descendant in pre-order (left before right)."""
        yield self
        for child in self.children():
            yield from child.walk()

    def list_expressions(self) -> List["Expression"]:
        """
        Return every distinct sub-expression rooted at this node.

        Order is pre-order traversal; repeated sub-trees keep their first
        position.
        """
        return list(dict.fromkeys(self.walk()))

    def variables(self) -> List[str]:
        """Variable names in first-seen order."""
        return [expr.name for expr in self.list_expressions() if isinstance(expr, Var)]

    @property
    def depth(self) -> int:
        children = self.children()
        if not children:
            return 0
        return 1 + max(child.depth for child in children)


@dataclass(frozen=True, slots=True)
class Var(Expression):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Not(Expression):
    operand: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.operand,)

    def __str__(self) -> str:
        return f"{OP_NOT}{self.operand}"


@dataclass(frozen=True, slots=True)
class And(Expression):
    left: Expression
    right: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"({self.left} {OP_AND} {self.right})"


@dataclass(frozen=True, slots=True)
class Or(Expression):
    left: Expression
    right: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"({self.left} {OP_OR} {self.right})"


@dataclass(frozen=True, slots=True)
class Implies(Expression):
    left: Expression
    right: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"({self.left} {OP_IMPLIES} {self.right})"


def join_expressions(expressions) -> str:
    return ", ".join(str(expr) for expr in expressions)


__all__ = [
    "And",
    "Expression",
    "Implies",
    "Not",
    "Or",
    "Var",
    "join_expressions",
]
