"""
RSL AST Node Definitions

A program is a table of functions; a function body is a flat list of
nodes, with blocks nesting further lists.
Uses dataclasses for clean node definitions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MathOp(Enum):
    """Arithmetic on the top two stack values."""
    ADD = '+'
    SUB = '-'
    MUL = '*'


class CmpOp(Enum):
    """Comparisons pushing 1 or 0."""
    LT = '<'
    GT = '>'
    EQ = '='


class StackOp(Enum):
    """Operations acting directly on the stack."""
    DUP = 'dup'
    SWAP = 'swap'
    OVER = 'over'
    ROT = 'rot'
    DROP = 'drop'


class MemoryOp(Enum):
    """Memory operations taking addresses from the stack."""
    LOAD_BYTE = '<-'
    STORE_BYTE = '->'
    ALLOC = 'alloc'
    FREE = 'free'


class OutputOp(Enum):
    """Console output and debugging words."""
    PUTC = 'putc'
    PUTU = 'putu'
    DEBUG = '???'


# Source location for error messages
@dataclass
class Span:
    """Source location information."""
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    filename: str = "<unknown>"


@dataclass
class Push:
    """Integer literal: push value."""
    value: int
    span: Optional[Span] = None


@dataclass
class PushBytes:
    """String literal: store data in memory and push its address.

    data already carries the zero terminator.
    """
    data: bytes
    span: Optional[Span] = None


@dataclass
class ArithWord:
    op: MathOp
    span: Optional[Span] = None


@dataclass
class CompareWord:
    op: CmpOp
    span: Optional[Span] = None


@dataclass
class StackWord:
    op: StackOp
    span: Optional[Span] = None


@dataclass
class MemoryWord:
    op: MemoryOp
    span: Optional[Span] = None


@dataclass
class OutputWord:
    op: OutputOp
    span: Optional[Span] = None


@dataclass
class FunctionCall:
    name: str
    span: Optional[Span] = None


@dataclass
class LetRef:
    """Read of a let binding."""
    name: str
    span: Optional[Span] = None


@dataclass
class Break:
    span: Optional[Span] = None


@dataclass
class Continue:
    span: Optional[Span] = None


@dataclass
class IfBlock:
    """if { ... } else { ... }, consuming a condition from the stack."""
    then_body: list['Node'] = field(default_factory=list)
    else_body: list['Node'] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class LoopBlock:
    """Infinite loop; leave it with break."""
    body: list['Node'] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class WhileBlock:
    """while { condition } { body }"""
    condition: list['Node'] = field(default_factory=list)
    body: list['Node'] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class LetBlock:
    """let a b { ... }: the first name is bound to the top of the stack."""
    names: list[str] = field(default_factory=list)
    body: list['Node'] = field(default_factory=list)
    span: Optional[Span] = None


Node = (Push | PushBytes | ArithWord | CompareWord | StackWord | MemoryWord | OutputWord |
        FunctionCall | LetRef | Break | Continue | IfBlock | LoopBlock | WhileBlock |
        LetBlock)


@dataclass
class FunctionDef:
    name: str
    body: list[Node] = field(default_factory=list)
    span: Optional[Span] = None


# Program
@dataclass
class Program:
    """Top-level program."""
    functions: dict[str, FunctionDef] = field(default_factory=dict)
    span: Optional[Span] = None

    def __repr__(self) -> str:
        return f"Program({len(self.functions)} functions)"
