"""Abstract Syntax Tree (AST) definitions for the NPL language.

Every construct of the grammar has its own frozen dataclass carrying only
the fields it needs. Nodes are built once by the parser and are read-only
afterwards; loop and function bodies are re-walked by the interpreter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Program(Node):
    body: List[Node]


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: str  # literal text as written, e.g. '3.50'


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Node):
    pass


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class VarDecl(Node):
    name: str
    value: Optional[Node]  # None declares the variable as null
    is_const: bool = False


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str  # '!', '-', '++' or '--'
    operand: Node


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Block(Node):
    statements: List[Node]


@dataclass(frozen=True)
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block]


@dataclass(frozen=True)
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass(frozen=True)
class ForStmt(Node):
    init: Node
    condition: Node
    update: Node
    body: Block


@dataclass(frozen=True)
class FuncDecl(Node):
    name: str
    params: List[str]
    body: Block


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: List[Node]


@dataclass(frozen=True)
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass(frozen=True)
class DeleteStmt(Node):
    name: str


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: List[Node]


@dataclass(frozen=True)
class Index(Node):
    target: Node
    index: Node


@dataclass(frozen=True)
class EmptyStmt(Node):
    pass
