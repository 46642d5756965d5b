"""
Native RSL routines: the string printer and the bounded sequence emitter.

Both operate on a Memory and an Output. Strings are passed by address,
terminated by a zero byte, and released by the caller using the byte count
print_str reports.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from .config import RunConfig, DEFAULT_RUN_CONFIG, DEFAULT_SEQUENCE_CONFIG
from .io import Output
from .memory import Memory, encode_literal


def print_str(memory: Memory, address: int, out: Output,
              limit: Optional[int] = None) -> int:
    """
    Print the zero-terminated string at address.

    Bytes are written one at a time as they are scanned. Returns the number
    of bytes consumed including the terminator, which is the size of the
    string's allocation.
    """
    offset = 0
    for value in memory.iter_string(address, limit):
        out.write(bytes((value,)))
        offset += 1
    return offset + 1


@contextmanager
def literal(memory: Memory, text: str) -> Iterator[int]:
    """Allocate text as a terminated string for the duration of a block."""
    data = encode_literal(text)
    address = memory.extend(data)
    try:
        yield address
    finally:
        memory.remove(address, len(data))


def emit_literal(memory: Memory, text: str, out: Output,
                 limit: Optional[int] = None) -> int:
    """Allocate, print and release one copy of text."""
    with literal(memory, text) as address:
        return print_str(memory, address, out, limit)


def emit_sequence(seed_a: int, seed_b: int, out: Output,
                  bound: int = DEFAULT_SEQUENCE_CONFIG.bound,
                  delimiter: str = DEFAULT_SEQUENCE_CONFIG.delimiter,
                  memory: Optional[Memory] = None,
                  config: Optional[RunConfig] = None) -> None:
    """
    Print an additive sequence seeded with (seed_a, seed_b).

    seed_b is printed first, then each sum a + b until a printed value is
    at least bound. Every value is followed by the delimiter, including
    the last one. A sum that wraps past the word size is printed and ends
    the sequence, since wrapped values are no longer guaranteed to reach
    bound.
    """
    config = config or DEFAULT_RUN_CONFIG
    memory = memory if memory is not None else Memory()
    if seed_a < 0 or seed_b < 0:
        raise ValueError(f"seeds must be unsigned, got ({seed_a}, {seed_b})")
    if seed_a > config.word_mask or seed_b > config.word_mask:
        raise ValueError(f"seeds do not fit in a {config.word_bits}-bit word")
    if bound > config.word_mask:
        raise ValueError(f"bound {bound} does not fit in a {config.word_bits}-bit word")
    if seed_a == seed_b == 0 and bound > 0:
        raise ValueError("seeds (0, 0) never reach a positive bound")

    out.putu(seed_b)
    emit_literal(memory, delimiter, out, config.scan_limit)

    a, b = seed_a, seed_b
    while b < bound:
        value = config.arith('+', a, b)
        out.putu(value)
        emit_literal(memory, delimiter, out, config.scan_limit)
        if value < b:
            break  # wrapped
        a, b = b, value


def main_routine(out: Optional[Output] = None) -> int:
    """Print the sequence for seeds (1, 1) followed by a newline."""
    out = out or Output()
    emit_sequence(DEFAULT_SEQUENCE_CONFIG.seed_a, DEFAULT_SEQUENCE_CONFIG.seed_b, out)
    out.newline()
    return 0
