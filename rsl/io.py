"""
RSL output stream.

All program output goes through Output, which wraps a binary stream and
flushes after every write so output from the native routines and the
interpreter interleaves in call order.
"""

import sys
from typing import BinaryIO, Optional


class Output:
    """Byte-oriented console output."""

    def __init__(self, writer: Optional[BinaryIO] = None):
        self.writer = writer if writer is not None else sys.stdout.buffer

    def write(self, data: bytes) -> int:
        written = self.writer.write(data)
        self.writer.flush()
        return written

    def flush(self) -> None:
        self.writer.flush()

    def putc(self, code: int) -> None:
        """Write the character with code point code (UTF-8 encoded)."""
        self.write(chr(code).encode("utf-8"))

    def putu(self, value: int) -> None:
        """Write an unsigned integer in decimal."""
        if value < 0:
            raise ValueError(f"putu expects an unsigned value, got {value}")
        self.write(str(value).encode("ascii"))

    def newline(self) -> None:
        self.write(b"\n")
