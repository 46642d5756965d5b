"""
RSL run configuration.

Word arithmetic and scanning options shared by the interpreter and the
native routines. All options are plain dataclass fields; the CLI fills them
from flags.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ArithmeticOverflowError


class OverflowPolicy(Enum):
    """What unsigned word arithmetic does when it leaves the word range."""
    WRAP = "wrap"
    CHECKED = "checked"


@dataclass
class RunConfig:
    """Configuration for word arithmetic, string scans and entry point."""
    word_bits: int = 64
    overflow: OverflowPolicy = OverflowPolicy.WRAP
    scan_limit: Optional[int] = None  # Max bytes a string scan may cover
    entry: str = "main"

    def __post_init__(self):
        if self.word_bits <= 0:
            raise ValueError(f"word_bits must be positive, got {self.word_bits}")
        if self.scan_limit is not None and self.scan_limit <= 0:
            raise ValueError(f"scan_limit must be positive, got {self.scan_limit}")

    @property
    def word_mask(self) -> int:
        return (1 << self.word_bits) - 1

    def arith(self, op: str, a: int, b: int) -> int:
        """Apply +, - or * to two words under the overflow policy."""
        match op:
            case '+':
                result = a + b
            case '-':
                result = a - b
            case '*':
                result = a * b
            case _:
                raise ValueError(f"unknown arithmetic operator: {op!r}")

        if 0 <= result <= self.word_mask:
            return result
        if self.overflow is OverflowPolicy.CHECKED:
            raise ArithmeticOverflowError(op, a, b, self.word_bits)
        return result & self.word_mask


@dataclass
class SequenceConfig:
    """Seeds, bound and delimiter for the bounded sequence demo."""
    seed_a: int = 1
    seed_b: int = 1
    bound: int = 100
    delimiter: str = ", "


DEFAULT_RUN_CONFIG = RunConfig()
DEFAULT_SEQUENCE_CONFIG = SequenceConfig()
