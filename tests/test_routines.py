#!/usr/bin/env python3
"""
Native Routine Tests

Tests for print_str and the bounded sequence emitter.
"""

import io
import sys
import os

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from rsl.config import OverflowPolicy, RunConfig
from rsl.errors import ArithmeticOverflowError, UnterminatedStringError
from rsl.io import Output
from rsl.memory import Memory, ADDRESS_LIMIT
from rsl.routines import emit_literal, emit_sequence, literal, main_routine, print_str

SEQUENCE_OUTPUT = b"1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, "


def sequence(*args, **kwargs) -> bytes:
    buf = io.BytesIO()
    emit_sequence(*args, Output(buf), **kwargs)
    return buf.getvalue()


def test_main_routine():
    """Seeds (1, 1) print up to 144 and a newline."""
    buf = io.BytesIO()
    assert main_routine(Output(buf)) == 0
    assert buf.getvalue() == SEQUENCE_OUTPUT + b"\n"
    print("PASS: test_main_routine")


def test_print_str_count():
    """print_str emits the n leading bytes and returns n + 1."""
    memory = Memory()
    address = memory.extend(b"hello\0")
    buf = io.BytesIO()
    assert print_str(memory, address, Output(buf)) == 6
    assert buf.getvalue() == b"hello"

    buf = io.BytesIO()
    empty = memory.extend(b"\0")
    assert print_str(memory, empty, Output(buf)) == 1
    assert buf.getvalue() == b""
    print("PASS: test_print_str_count")


def test_print_str_unterminated():
    """A missing terminator raises after printing what was scanned."""
    memory = Memory()
    address = memory.extend(b"abc")
    buf = io.BytesIO()
    try:
        print_str(memory, address, Output(buf))
        assert False, "expected UnterminatedStringError"
    except UnterminatedStringError:
        pass
    assert buf.getvalue() == b"abc"

    address = memory.extend(b"long string\0")
    try:
        print_str(memory, address, Output(io.BytesIO()), limit=4)
        assert False, "expected UnterminatedStringError"
    except UnterminatedStringError as e:
        assert e.scanned == 4
    print("PASS: test_print_str_unterminated")


def test_emit_literal_releases():
    """Delimiter storage is released right after printing."""
    memory = Memory()
    buf = io.BytesIO()
    assert emit_literal(memory, ", ", Output(buf)) == 3
    assert buf.getvalue() == b", "
    assert memory.free == [(0, ADDRESS_LIMIT)]
    print("PASS: test_emit_literal_releases")


def test_literal_released_on_error():
    """Scoped literals are released even if the block raises."""
    memory = Memory()
    try:
        with literal(memory, "abc") as address:
            assert memory.get(address) == ord("a")
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert memory.free == [(0, ADDRESS_LIMIT)]
    print("PASS: test_literal_released_on_error")


def test_invalid_literals():
    """Embedded NULs and multi-byte characters are rejected."""
    for text in ("a\0b", "\u2014"):
        try:
            emit_literal(Memory(), text, Output(io.BytesIO()))
            assert False, f"expected ValueError for {text!r}"
        except ValueError:
            pass
    print("PASS: test_invalid_literals")


def test_seed_already_at_bound():
    """Only the second seed is printed when it already meets the bound."""
    assert sequence(0, 150) == b"150, "
    assert sequence(3, 100) == b"100, "
    print("PASS: test_seed_already_at_bound")


def test_bound_is_inclusive():
    """The value that reaches the bound is printed, then emission stops."""
    assert sequence(1, 99) == b"99, 100, "
    assert sequence(1, 1, bound=10, delimiter="-") == b"1-1-2-3-5-8-13-"
    print("PASS: test_bound_is_inclusive")


def test_idempotent():
    """Repeated calls print identical output and leave memory clean."""
    memory = Memory()
    first = sequence(1, 1, memory=memory)
    second = sequence(1, 1, memory=memory)
    assert first == second == SEQUENCE_OUTPUT
    assert memory.free == [(0, ADDRESS_LIMIT)]
    print("PASS: test_idempotent")


def test_monotonic_and_terminates():
    """Printed values never decrease and the run is short."""
    out = sequence(2, 3, bound=10**6)
    values = [int(v) for v in out.decode().split(", ") if v]
    assert values == sorted(values)
    assert values[-1] >= 10**6
    assert values[-2] < 10**6
    assert len(values) < 40
    print("PASS: test_monotonic_and_terminates")


def test_overflow_policy():
    """Sums wrap by default and raise under the checked policy."""
    assert RunConfig(word_bits=8).arith('+', 200, 100) == 44

    buf = io.BytesIO()
    checked = RunConfig(word_bits=8, overflow=OverflowPolicy.CHECKED)
    try:
        emit_sequence(200, 100, Output(buf), bound=255, config=checked)
        assert False, "expected ArithmeticOverflowError"
    except ArithmeticOverflowError as e:
        assert (e.a, e.b, e.bits) == (200, 100, 8)
    assert buf.getvalue() == b"100, "
    print("PASS: test_overflow_policy")


def test_invalid_seeds():
    """Seeds must be unsigned words."""
    for seeds in ((-1, 1), (1, -1), (2**64, 1)):
        try:
            sequence(*seeds)
            assert False, f"expected ValueError for {seeds}"
        except ValueError:
            pass
    print("PASS: test_invalid_seeds")


def test_unreachable_bounds_rejected():
    """Bounds wider than a word and all-zero seeds are rejected up front."""
    cases = [
        ((1, 1), dict(config=RunConfig(word_bits=4))),
        ((1, 1), dict(bound=2**64)),
        ((0, 0), {}),
    ]
    for seeds, kwargs in cases:
        buf = io.BytesIO()
        try:
            emit_sequence(*seeds, Output(buf), **kwargs)
            assert False, f"expected ValueError for {seeds} {kwargs}"
        except ValueError:
            pass
        assert buf.getvalue() == b""

    assert sequence(0, 0, bound=0) == b"0, "
    assert sequence(1, 1, bound=13, config=RunConfig(word_bits=4)) == \
        b"1, 1, 2, 3, 5, 8, 13, "
    print("PASS: test_unreachable_bounds_rejected")


def test_wrapped_sum_ends_sequence():
    """A sum that wraps is printed and stops the sequence."""
    config = RunConfig(word_bits=4)
    assert sequence(8, 13, bound=15, config=config) == b"13, 5, "
    assert sequence(2**64 - 1, 1, bound=2**64 - 1) == b"1, 0, "
    print("PASS: test_wrapped_sum_ends_sequence")


def test_scan_limit():
    """Delimiters longer than the scan limit raise after the first value."""
    buf = io.BytesIO()
    try:
        emit_sequence(1, 1, Output(buf), config=RunConfig(scan_limit=2))
        assert False, "expected UnterminatedStringError"
    except UnterminatedStringError as e:
        assert e.scanned == 2
    assert buf.getvalue() == b"1, "
    assert sequence(1, 1, config=RunConfig(scan_limit=3)) == SEQUENCE_OUTPUT
    print("PASS: test_scan_limit")


def run_all_tests():
    """Run all native routine tests."""
    from tests.framework import run_tests
    return run_tests("Routine", [
        test_main_routine,
        test_print_str_count,
        test_print_str_unterminated,
        test_emit_literal_releases,
        test_literal_released_on_error,
        test_invalid_literals,
        test_seed_already_at_bound,
        test_bound_is_inclusive,
        test_idempotent,
        test_monotonic_and_terminates,
        test_overflow_policy,
        test_invalid_seeds,
        test_unreachable_bounds_rejected,
        test_wrapped_sum_ends_sequence,
        test_scan_limit,
    ])


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
