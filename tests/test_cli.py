#!/usr/bin/env python3
"""
CLI Tests

Drives rsl.cli.main with in-memory output streams.
"""

import io
import sys
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from rsl.cli import main

FIB_SOURCE = Path(project_root) / "examples" / "fib.rsl"

SEQUENCE_LINE = b"1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, \n"


def run_cli(*argv: str) -> tuple[int, bytes]:
    buf = io.BytesIO()
    status = main(list(argv), stdout=buf)
    return status, buf.getvalue()


@contextmanager
def source_file(code: str) -> Iterator[Path]:
    """Write code to a temporary .rsl file, removed when the block exits."""
    with tempfile.NamedTemporaryFile("w", suffix=".rsl", delete=False) as f:
        f.write(code)
    path = Path(f.name)
    try:
        yield path
    finally:
        path.unlink()


def test_default_entry():
    """No arguments runs the sequence demo."""
    assert run_cli() == (0, SEQUENCE_LINE)
    print("PASS: test_default_entry")


def test_fib_command():
    """fib accepts seeds, bound and delimiter."""
    assert run_cli("fib") == (0, SEQUENCE_LINE)
    assert run_cli("fib", "--bound", "10") == (0, b"1, 1, 2, 3, 5, 8, 13, \n")
    assert run_cli("fib", "--seed-a", "2", "--seed-b", "200") == (0, b"200, \n")
    assert run_cli("fib", "--delimiter", ";", "--bound", "3") == (0, b"1;1;2;3;\n")
    print("PASS: test_fib_command")


def test_fib_errors():
    """Invalid seeds and checked overflow exit with status 1."""
    status, _ = run_cli("fib", "--seed-a", "-1")
    assert status == 1
    status, out = run_cli("fib", "--word-bits", "8", "--overflow", "checked",
                          "--seed-a", "200", "--seed-b", "100", "--bound", "255")
    assert status == 1
    assert out == b"100, "

    # Bounds the word cannot hold and all-zero seeds would never finish
    assert run_cli("fib", "--word-bits", "4") == (1, b"")
    assert run_cli("fib", "--bound", str(2**64)) == (1, b"")
    assert run_cli("fib", "--seed-a", "0", "--seed-b", "0") == (1, b"")
    assert run_cli("fib", "--word-bits", "4", "--bound", "15",
                   "--seed-a", "8", "--seed-b", "13") == (0, b"13, 5, \n")
    print("PASS: test_fib_errors")


def test_scan_limit():
    """--scan-limit bounds delimiters and string literals."""
    assert run_cli("fib", "--scan-limit", "2") == (1, b"1, ")
    assert run_cli("fib", "--scan-limit", "3") == (0, SEQUENCE_LINE)
    assert run_cli("run", str(FIB_SOURCE), "--scan-limit", "2") == (1, b"1")
    assert run_cli("run", str(FIB_SOURCE), "--scan-limit", "3") == (0, SEQUENCE_LINE)

    code = 'fn main { "a long string" dup <- putc 14 free }'
    with source_file(code) as source:
        assert run_cli("run", str(source)) == (0, b"a\n")
        assert run_cli("run", str(source), "--scan-limit", "2") == (1, b"")
    print("PASS: test_scan_limit")


def test_run_command():
    """run interprets a file and ends with a newline."""
    assert run_cli("run", str(FIB_SOURCE)) == (0, SEQUENCE_LINE)
    assert run_cli("run", "-v", str(FIB_SOURCE)) == (0, SEQUENCE_LINE)
    print("PASS: test_run_command")


def test_run_errors():
    """Missing files, parse errors and runtime errors exit with status 1."""
    assert run_cli("run", "does-not-exist.rsl") == (1, b"")

    with source_file("fn main { nope }") as source:
        assert run_cli("run", str(source)) == (1, b"")

    with source_file("fn main { 1 putu + }") as source:
        assert run_cli("run", str(source)) == (1, b"1")

    with source_file("fn main { 0x4000000000000000 alloc drop }") as source:
        assert run_cli("run", str(source)) == (1, b"")
    print("PASS: test_run_errors")


def test_run_entry_and_overflow():
    """--entry and --overflow reach the interpreter."""
    with source_file("fn main { 1 putu } fn other { 0 1 - putu }") as source:
        assert run_cli("run", str(source), "--entry", "other") == \
            (0, b"18446744073709551615\n")
        status, _ = run_cli("run", str(source), "--entry", "other", "--overflow", "checked")
        assert status == 1
    print("PASS: test_run_entry_and_overflow")


def test_tokens_command():
    """tokens dumps one token per line."""
    status, out = run_cli("tokens", str(FIB_SOURCE))
    assert status == 0
    lines = out.decode().splitlines()
    assert lines[0].startswith("Token(FN, 'fn'")
    assert lines[-1].startswith("Token(EOF")
    print("PASS: test_tokens_command")


def run_all_tests():
    """Run all CLI tests."""
    from tests.framework import run_tests
    return run_tests("CLI", [
        test_default_entry,
        test_fib_command,
        test_fib_errors,
        test_scan_limit,
        test_run_command,
        test_run_errors,
        test_run_entry_and_overflow,
        test_tokens_command,
    ])


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
