"""
RSL Interpreter - executes parsed programs on a value stack.

Each run gets a fresh stack and Memory. Stack values are unsigned words;
arithmetic follows the overflow policy of the RunConfig. With a scan limit
set, string literals must fit within it, terminator included.
"""

from enum import Enum, auto
from typing import Optional

from .ast_nodes import *
from .config import RunConfig, DEFAULT_RUN_CONFIG
from .errors import (InterpreterError, MemoryAccessError, StackUnderflowError,
                     UnknownFunctionError, UnterminatedStringError)
from .io import Output
from .memory import Memory


class Status(Enum):
    """How a block finished."""
    NONE = auto()
    BREAK = auto()
    CONTINUE = auto()


# Highest code point putc accepts
MAX_CODE_POINT = 0x10FFFF


class Interpreter:
    """Runs an RSL program."""

    def __init__(self, program: Program, out: Optional[Output] = None,
                 config: Optional[RunConfig] = None):
        self.program = program
        self.out = out or Output()
        self.config = config or DEFAULT_RUN_CONFIG
        self.stack: list[int] = []
        self.memory = Memory()

    def run(self) -> None:
        """Run the entry function with an empty stack and memory."""
        self.stack = []
        self.memory = Memory()
        self.call(self.config.entry)

    def call(self, name: str) -> None:
        func = self.program.functions.get(name)
        if func is None:
            raise UnknownFunctionError(name)
        # break/continue outside a loop ends the function
        self.exec_block(func.body, {})

    def pop(self, word: str, count: int = 1) -> list[int]:
        """Pop count values, returned top of stack first."""
        if len(self.stack) < count:
            raise StackUnderflowError(word, count, len(self.stack))
        values = self.stack[-count:][::-1]
        del self.stack[-count:]
        return values

    def push(self, value: int) -> None:
        self.stack.append(value)

    def exec_block(self, body: list[Node], variables: dict[str, int]) -> Status:
        """Execute a list of nodes, stopping early on break or continue."""
        for node in body:
            status = self.exec_node(node, variables)
            if status is not Status.NONE:
                return status
        return Status.NONE

    def exec_node(self, node: Node, variables: dict[str, int]) -> Status:
        match node:
            case Push(value=value):
                if value > self.config.word_mask:
                    raise InterpreterError(
                        f"literal {value} does not fit in a {self.config.word_bits}-bit word")
                self.push(value)

            case PushBytes(data=data):
                address = self.memory.extend(data)
                limit = self.config.scan_limit
                if limit is not None and len(data) > limit:
                    raise UnterminatedStringError(address, limit)
                self.push(address)

            case ArithWord(op=op):
                b, a = self.pop(op.value, 2)
                self.push(self.config.arith(op.value, a, b))

            case CompareWord(op=op):
                b, a = self.pop(op.value, 2)
                match op:
                    case CmpOp.LT:
                        result = a < b
                    case CmpOp.GT:
                        result = a > b
                    case CmpOp.EQ:
                        result = a == b
                self.push(int(result))

            case StackWord(op=op):
                self.exec_stack_op(op)

            case MemoryWord(op=op):
                self.exec_memory_op(op)

            case OutputWord(op=op):
                self.exec_output_op(op)

            case FunctionCall(name=name):
                self.call(name)

            case LetRef(name=name):
                self.push(variables[name])

            case Break():
                return Status.BREAK

            case Continue():
                return Status.CONTINUE

            case IfBlock(then_body=then_body, else_body=else_body):
                [cond] = self.pop("if")
                return self.exec_block(then_body if cond != 0 else else_body, variables)

            case LoopBlock(body=body):
                while True:
                    if self.exec_block(body, variables) is Status.BREAK:
                        break

            case WhileBlock(condition=condition, body=body):
                while True:
                    self.exec_block(condition, variables)
                    [cond] = self.pop("while")
                    if cond == 0:
                        break
                    if self.exec_block(body, variables) is Status.BREAK:
                        break

            case LetBlock(names=names, body=body):
                scope = dict(variables)
                for name in names:
                    [scope[name]] = self.pop("let")
                return self.exec_block(body, scope)

            case _:
                raise InterpreterError(f"cannot execute {node!r}")

        return Status.NONE

    def exec_stack_op(self, op: StackOp) -> None:
        match op:
            case StackOp.DUP:
                [a] = self.pop(op.value)
                self.stack.extend((a, a))
            case StackOp.SWAP:
                a, b = self.pop(op.value, 2)
                self.stack.extend((a, b))
            case StackOp.OVER:
                a, b = self.pop(op.value, 2)
                self.stack.extend((b, a, b))
            case StackOp.ROT:
                # ( c b a -- b a c )
                a, b, c = self.pop(op.value, 3)
                self.stack.extend((b, a, c))
            case StackOp.DROP:
                self.pop(op.value)

    def exec_memory_op(self, op: MemoryOp) -> None:
        match op:
            case MemoryOp.LOAD_BYTE:
                [address] = self.pop(op.value)
                value = self.memory.get(address)
                if value is None:
                    raise MemoryAccessError("load outside memory", address)
                self.push(value)
            case MemoryOp.STORE_BYTE:
                value, address = self.pop(op.value, 2)
                self.memory.set(address, value & 0xFF)
            case MemoryOp.ALLOC:
                [length] = self.pop(op.value)
                self.push(self.memory.alloc(length))
            case MemoryOp.FREE:
                length, address = self.pop(op.value, 2)
                self.memory.remove(address, length)

    def exec_output_op(self, op: OutputOp) -> None:
        match op:
            case OutputOp.PUTC:
                [code] = self.pop(op.value)
                if code > MAX_CODE_POINT or 0xD800 <= code <= 0xDFFF:
                    raise InterpreterError(f"putc: {code} is not a character")
                self.out.putc(code)
            case OutputOp.PUTU:
                [value] = self.pop(op.value)
                self.out.putu(value)
            case OutputOp.DEBUG:
                self.out.write(f"{self.stack} {self.memory!r}\n".encode("utf-8"))


def interpret(program: Program, out: Optional[Output] = None,
              config: Optional[RunConfig] = None) -> Interpreter:
    """Convenience function to run a program; returns the finished interpreter."""
    interpreter = Interpreter(program, out, config)
    interpreter.run()
    return interpreter
