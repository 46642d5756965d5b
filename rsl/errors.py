"""
RSL runtime errors.

Lexing and parsing errors live next to the lexer and parser; everything
raised while a program runs derives from RslError.
"""


class RslError(Exception):
    """Base class for errors raised while running RSL code."""
    pass


class InterpreterError(RslError):
    """Error during interpretation."""
    pass


class StackUnderflowError(InterpreterError):
    """A word needed more values than the stack holds."""
    def __init__(self, word: str, needed: int, available: int):
        self.word = word
        self.needed = needed
        self.available = available
        super().__init__(f"{word}: needs {needed} value(s), stack has {available}")


class UnknownFunctionError(InterpreterError):
    """Call to a function the program does not define."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no function named {name!r}")


class ArithmeticOverflowError(RslError):
    """Word arithmetic left the unsigned range under the checked policy."""
    def __init__(self, op: str, a: int, b: int, bits: int):
        self.op = op
        self.a = a
        self.b = b
        self.bits = bits
        super().__init__(f"{a} {op} {b} overflows a {bits}-bit word")


class MemoryAccessError(RslError):
    """Read or write outside the allocated memory."""
    def __init__(self, message: str, address: int):
        self.address = address
        super().__init__(f"{message} at address {address}")


class OutOfMemoryError(RslError):
    """No free run can hold an allocation, or the storage cannot grow to it."""
    def __init__(self, length: int):
        self.length = length
        super().__init__(f"out of memory allocating {length} byte(s)")


class UnterminatedStringError(MemoryAccessError):
    """String scan ran past its limit without finding the zero sentinel."""
    def __init__(self, address: int, scanned: int):
        self.scanned = scanned
        super().__init__(f"no terminator within {scanned} byte(s) of string", address)
