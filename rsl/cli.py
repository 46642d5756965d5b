#!/usr/bin/env python3
"""
RSL CLI - Run stack-language programs and the native sequence demo

Usage:
    rsl                      # Print the bounded sequence for seeds (1, 1)
    rsl fib --bound 1000     # Same, with options
    rsl run program.rsl      # Interpret a program
    rsl tokens program.rsl   # Dump the token stream
"""

import argparse
import sys
from pathlib import Path
from typing import BinaryIO, Optional

from .config import OverflowPolicy, RunConfig, SequenceConfig
from .errors import RslError
from .interpreter import interpret
from .io import Output
from .lexer import LexerError, tokenize
from .parser import ParseError, parse
from .routines import emit_sequence, main_routine

DEFAULT_SOURCE = "1.rsl"


def log(args: argparse.Namespace, message: str) -> None:
    """Print a progress message to stderr when --verbose is set."""
    if getattr(args, "verbose", False):
        print(message, file=sys.stderr)


def run_config(args: argparse.Namespace) -> RunConfig:
    """Build a RunConfig from command line flags."""
    return RunConfig(
        word_bits=args.word_bits,
        overflow=OverflowPolicy(args.overflow),
        scan_limit=getattr(args, "scan_limit", None),
        entry=getattr(args, "entry", "main"),
    )


def read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: {path} not found", file=sys.stderr)
        return None
    return path.read_text()


def cmd_fib(args: argparse.Namespace, out: Output) -> int:
    """Bounded sequence command."""
    seq = SequenceConfig(seed_a=args.seed_a, seed_b=args.seed_b,
                         bound=args.bound, delimiter=args.delimiter)
    config = run_config(args)
    log(args, f"Sequence from ({seq.seed_a}, {seq.seed_b}) up to {seq.bound}")

    emit_sequence(seq.seed_a, seq.seed_b, out, bound=seq.bound,
                  delimiter=seq.delimiter, config=config)
    out.newline()
    return 0


def cmd_run(args: argparse.Namespace, out: Output) -> int:
    """Interpret command."""
    source_file = Path(args.source)
    source = read_source(source_file)
    if source is None:
        return 1

    program = parse(source, str(source_file))
    log(args, f"Parsed {len(program.functions)} functions from {source_file}")

    interpreter = interpret(program, out, run_config(args))
    out.newline()
    log(args, f"Finished with {len(interpreter.stack)} value(s) on the stack, "
              f"{len(interpreter.memory)} byte(s) of memory")
    return 0


def cmd_tokens(args: argparse.Namespace, out: Output) -> int:
    """Token dump command."""
    source_file = Path(args.source)
    source = read_source(source_file)
    if source is None:
        return 1

    for tok in tokenize(source, str(source_file)):
        out.write(f"{tok!r}\n".encode("utf-8"))
    return 0


def cmd_default(args: argparse.Namespace, out: Output) -> int:
    return main_routine(out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rsl",
        description="RSL - stack language interpreter and sequence demo"
    )
    parser.set_defaults(func=cmd_default)
    subparsers = parser.add_subparsers(dest="command")

    # Options shared by commands that run word arithmetic and string scans
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--overflow", choices=[p.value for p in OverflowPolicy],
                        default=OverflowPolicy.WRAP.value,
                        help="Unsigned overflow policy (default: wrap)")
    common.add_argument("--word-bits", type=int, default=64,
                        help="Width of a stack word in bits")
    common.add_argument("--scan-limit", type=int, default=None,
                        help="Longest string, terminator included, a scan may cover")
    common.add_argument("-v", "--verbose", action="store_true",
                        help="Report progress on stderr")

    # Fib command
    fib_parser = subparsers.add_parser("fib", parents=[common],
                                       help="Print a bounded additive sequence")
    fib_parser.add_argument("--seed-a", type=int, default=1)
    fib_parser.add_argument("--seed-b", type=int, default=1)
    fib_parser.add_argument("--bound", type=int, default=100,
                            help="Stop after printing a value at least this large")
    fib_parser.add_argument("--delimiter", default=", ")
    fib_parser.set_defaults(func=cmd_fib)

    # Run command
    run_parser = subparsers.add_parser("run", parents=[common],
                                       help="Interpret an RSL program")
    run_parser.add_argument("source", nargs="?", default=DEFAULT_SOURCE,
                            help=f"Source file (default: {DEFAULT_SOURCE})")
    run_parser.add_argument("--entry", default="main",
                            help="Function to start from")
    run_parser.set_defaults(func=cmd_run)

    # Tokens command
    tokens_parser = subparsers.add_parser("tokens", help="Dump the token stream")
    tokens_parser.add_argument("source", help="Source file (.rsl)")
    tokens_parser.set_defaults(func=cmd_tokens)

    return parser


def main(argv: Optional[list[str]] = None, stdout: Optional[BinaryIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = Output(stdout)
    try:
        return args.func(args, out)
    except (LexerError, ParseError, RslError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
