"""
Typed statement tree for the supported Chef recipe grammar.

A statement block handed over by the recipe walker parses into a list of
top-level statements. Resource declarations own their body statements;
attribute arguments and guard bodies are expression nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Literal:
    """A string, symbol, number, boolean, nil or regex literal."""

    value: str
    kind: str = "string"


@dataclass(frozen=True)
class InterpolatedString:
    """A double-quoted string or heredoc with ``#{...}`` parts."""

    parts: tuple[Expression | str, ...]


@dataclass(frozen=True)
class NodeRef:
    """A node attribute lookup such as ``node[:a][:b]`` or ``node.a.b``."""

    path: tuple[str, ...]


@dataclass(frozen=True)
class FileTest:
    """A file or directory existence check such as ``File.exist?(path)``."""

    flag: str
    path: Expression


@dataclass(frozen=True)
class Not:
    """Logical negation."""

    operand: Expression


@dataclass(frozen=True)
class BinaryOp:
    """Comparison, logical or arithmetic infix operation."""

    op: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class ArrayLiteral:
    """An array literal, including ``%w(...)`` word lists."""

    items: tuple[Expression, ...]


@dataclass(frozen=True)
class HashLiteral:
    """A hash literal or trailing ``key => value`` call arguments."""

    pairs: tuple[tuple[Expression, Expression], ...]


@dataclass(frozen=True)
class NotificationRef:
    """A ``resources(:type => 'name')`` lookup naming other resources."""

    targets: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class Call:
    """Any other method call, kept for best-effort text reconstruction."""

    name: str
    args: tuple[Expression, ...] = ()
    receiver: Expression | None = None


Expression = Union[
    Literal,
    InterpolatedString,
    NodeRef,
    FileTest,
    Not,
    BinaryOp,
    ArrayLiteral,
    HashLiteral,
    NotificationRef,
    Call,
]


@dataclass(frozen=True)
class NestedBlock:
    """Statements of a ``do ... end`` or ``{ ... }`` block."""

    statements: tuple[Statement, ...] = ()

    @property
    def last_expression(self) -> Expression | None:
        """Value of the block: its last expression or call, if any."""
        for statement in reversed(self.statements):
            if isinstance(statement, ExpressionStatement):
                return statement.expression
            if isinstance(statement, AttributeCall):
                return Call(name=statement.name, args=statement.args)
        return None


@dataclass(frozen=True)
class AttributeCall:
    """An attribute invocation inside a resource block."""

    name: str
    args: tuple[Expression, ...] = ()
    block: NestedBlock | None = None
    line: int = 0


@dataclass(frozen=True)
class ExpressionStatement:
    """A bare expression used as a statement (guard bodies)."""

    expression: Expression
    line: int = 0


@dataclass(frozen=True)
class UnsupportedStatement:
    """Ruby code outside the resource grammar, kept as source text."""

    source: str
    line: int = 0


@dataclass(frozen=True)
class ResourceCall:
    """A top-level resource declaration."""

    resource_type: str
    name: Expression | None = None
    body: tuple[Statement, ...] = ()
    has_block: bool = False
    line: int = 0

    @property
    def attributes(self) -> tuple[AttributeCall, ...]:
        """Attribute calls of the declaration's block, in source order."""
        return tuple(s for s in self.body if isinstance(s, AttributeCall))

    def find_attribute(self, name: str) -> AttributeCall | None:
        """Return the first attribute call with the given name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


Statement = Union[
    ResourceCall,
    AttributeCall,
    ExpressionStatement,
    UnsupportedStatement,
]


@dataclass
class StatementBlock:
    """Statements parsed from one accumulated walker block."""

    statements: list[Statement] = field(default_factory=list)
    unterminated_line: int | None = None
