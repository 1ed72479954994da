"""Command-line interface for the word-width CPU emulator."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .cpu import CPU, CPUConfig, WIDTH_PRESETS
from .errors import WordVMError
from .runner import RunOptions, run_program
from .word import negate, add, sub, to_binary, to_signed, to_unsigned_masked

logger = logging.getLogger(__name__)

CONSOLE_COMMANDS = ("STATE", "MEM", "EXIT")


def _decimal(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # Past the interpreter's int-to-str digit limit
        return hex(value)


def format_dump(dump: dict) -> str:
    """Render a CPU dump as text lines."""
    lines = [f"--- CPU Registers ({dump['width']}-bit) ---", f"PC = {dump['pc']}"]
    for reg in dump["registers"]:
        lines.append(
            f"{reg['name']} = {_decimal(reg['value'])} (signed {_decimal(reg['signed'])}, "
            f"{reg['hex']}, 0b{reg['binary']})"
        )
    lines.append("--- Flags ---")
    for name, value in dump["flags"].items():
        lines.append(f"{name} = {value}")
    return "\n".join(lines)


def format_memory(cpu: CPU, start: int, end: int) -> str:
    """Render memory words in [start, end)."""
    start = max(start, 0)
    end = min(end, cpu.memory.size)
    snapshot = cpu.memory_snapshot()
    return "\n".join(f"[{addr}] = {_decimal(snapshot[addr])}" for addr in range(start, end))


def _handle_console_command(cpu: CPU, parts: list[str], out: TextIO) -> bool:
    """Handle STATE/MEM/EXIT. Returns False when the loop should stop."""
    command = parts[0].upper()
    if command == "EXIT":
        return False
    if command == "STATE":
        print(format_dump(cpu.dump()), file=out)
    elif command == "MEM":
        try:
            start = int(parts[1]) if len(parts) > 1 else 0
            end = int(parts[2]) if len(parts) > 2 else start + 16
        except ValueError:
            print("Error: MEM expects decimal addresses", file=out)
            return True
        if start < 0 or end < 0:
            print("Error: MEM addresses must not be negative", file=out)
            return True
        print(format_memory(cpu, start, end), file=out)
    return True


def repl(cpu: CPU, stdin: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    """Read instructions line by line until EXIT or end of input."""
    print(
        f"Word CPU emulator ({cpu.width}-bit, {cpu.register_count} registers, "
        f"{cpu.memory.size} words)",
        file=out,
    )
    print(
        "Instructions: MOV ADD SUB MUL DIV AND OR XOR NOT SHL SHR LOAD STORE; "
        "console: STATE MEM EXIT",
        file=out,
    )
    while True:
        print("> ", end="", file=out, flush=True)
        line = stdin.readline()
        if not line:
            break
        parts = line.split()
        if not parts:
            continue
        if parts[0].upper() in CONSOLE_COMMANDS:
            if not _handle_console_command(cpu, parts, out):
                break
            continue
        try:
            cpu.execute(line)
        except WordVMError as e:
            print(f"Error: {e.__class__.__name__}: {e.message}", file=out)
    return 0


def calc(a: int, b: int, width: int, out: TextIO = sys.stdout) -> None:
    """Print two's-complement forms of a and b plus sum, difference and -a."""
    a_tc = to_unsigned_masked(a, width)
    b_tc = to_unsigned_masked(b, width)
    sum_tc, _ = add(a_tc, b_tc, width)
    diff_tc, _ = sub(a_tc, b_tc, width)
    neg_tc = negate(a_tc, width)

    print("Two's complement representations:", file=out)
    print(f"A = {a:>6} -> {to_binary(a_tc, width)}", file=out)
    print(f"B = {b:>6} -> {to_binary(b_tc, width)}", file=out)
    print("Results:", file=out)
    print(f"Add:   {to_signed(sum_tc, width):>6} -> {to_binary(sum_tc, width)}", file=out)
    print(f"Sub:   {to_signed(diff_tc, width):>6} -> {to_binary(diff_tc, width)}", file=out)
    print(f"Neg A: {to_signed(neg_tc, width):>6} -> {to_binary(neg_tc, width)}", file=out)


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    defaults = CPUConfig()
    parser.add_argument(
        "--width", type=int, default=defaults.width,
        help=f"Word width in bits (common: {', '.join(map(str, WIDTH_PRESETS))})",
    )
    parser.add_argument(
        "--registers", type=int, default=defaults.register_count,
        help="Number of registers R1..Rn",
    )
    parser.add_argument(
        "--memory", type=int, default=defaults.memory_size,
        help="Memory size in words",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the emulator CLI."""
    parser = argparse.ArgumentParser(description="Word-width CPU emulator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub_parsers = parser.add_subparsers(dest="command")

    repl_parser = sub_parsers.add_parser("repl", help="Interactive instruction console")
    _add_config_args(repl_parser)

    run_parser = sub_parsers.add_parser("run", help="Run an instruction script")
    run_parser.add_argument("script", help="Path to script file")
    run_parser.add_argument(
        "--keep-going", action="store_true",
        help="Continue after a failing instruction",
    )
    _add_config_args(run_parser)

    calc_parser = sub_parsers.add_parser("calc", help="Two's-complement calculator")
    calc_parser.add_argument("a", type=int)
    calc_parser.add_argument("b", type=int)
    calc_parser.add_argument("--width", type=int, default=8)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "repl":
        try:
            cpu = CPU(args.width, args.registers, args.memory)
        except WordVMError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 2
        import readline  # noqa: F401
        return repl(cpu)

    if args.command == "run":
        options = RunOptions(
            width=args.width,
            register_count=args.registers,
            memory_size=args.memory,
            stop_on_error=not args.keep_going,
            trace=False,
        )
        logger.debug("Running script %s", args.script)
        result = run_program(Path(args.script).read_text(), options)
        for err in result.errors:
            print(
                f"Error: line {err.source_line_no}: {err.type}: {err.message}",
                file=sys.stderr,
            )
        if result.final_state:
            print(format_dump(result.final_state))
        return 0 if result.status == "ok" else 1

    if args.command == "calc":
        if args.width < 1:
            print("Error: width must be at least 1", file=sys.stderr)
            return 2
        calc(args.a, args.b, args.width)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
