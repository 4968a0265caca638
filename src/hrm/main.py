# -*- coding: utf-8 -*-
"""
Command-line front end: read a program, seed the inbox and floor tiles from
arguments, run the machine and print the outbox.

    hrm -f programs/echo.hrm 1 2 3
    hrm -f programs/zero_terminated_sum.hrm 1 2 0 - 5:0
    cat programs/echo.hrm | hrm hello

Arguments:
- an integer goes to the inbox as a Number
- any other text adds each of its letters (uppercased) to the inbox
- a lone "-" switches following non-integer arguments to TILE:VALUE form,
  which seeds a floor tile with a Number or the value's first letter

Options go first. The first argument that is not an option starts the value
list, and everything after it is a value ("-xyz" adds X, Y, Z). Use "--" to
start the list with text that looks like an option.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from hrm import config
from hrm.cpu import CPU
from hrm.errors import MachineError
from hrm.utils.asm_listing import print_listing
from hrm.values import Value, letters_from_text, parse_number, parse_value, format_values

MEMORY_SWITCH = "-"
END_OF_OPTIONS = "--"

_VALUE_OPTIONS = ("-f", "--file")
_FLAG_OPTIONS = ("-h", "--help", "--listing", "--stats", "--debug")


def split_argv(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split argv into (options, values) at the first non-option argument."""
    argv = list(argv)
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == END_OF_OPTIONS:
            return argv[:i], argv[i + 1:]
        if arg in _VALUE_OPTIONS:
            i += 2
        elif arg in _FLAG_OPTIONS or arg.startswith("--file="):
            i += 1
        else:
            break
    return argv[:i], argv[i:]


def build_initial_state(args: Sequence[str]) -> Tuple[List[Value], Dict[int, Value]]:
    """Split free-form arguments into (inbox, memory)."""
    inbox: List[Value] = []
    mem: Dict[int, Value] = {}
    is_mem = False
    for arg in args:
        n = parse_number(arg)
        if n is not None:
            inbox.append(n)
            continue
        if not is_mem and arg == MEMORY_SWITCH:
            is_mem = True
            continue
        if not is_mem:
            inbox.extend(letters_from_text(arg))
            continue
        fields = arg.split(":")
        tile = parse_number(fields[0])
        if len(fields) < 2 or tile is None or tile.value < 0:
            continue
        v = parse_value(fields[1])
        if v is not None:
            mem[tile.value] = v
    return inbox, mem


def _read_source(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hrm",
        usage="%(prog)s [options] [VALUE ...] [- TILE:VALUE ...]",
        description="Assemble and run a mailbox-machine program.",
        epilog="Values follow the options: integers go to the inbox, other "
               "text adds its letters, '-' then TILE:VALUE seeds memory.",
    )
    parser.add_argument("-f", "--file", help="program file (default: stdin)")
    parser.add_argument("--listing", action="store_true",
                        help="print the assembled program before running")
    parser.add_argument("--stats", action="store_true",
                        help="print program size and executed steps")
    parser.add_argument("--debug", action="store_true", default=config.DEBUG,
                        help="trace assembly and every executed step")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    # argparse only sees the options; values may look like flags ("-xyz")
    opts, values = split_argv(sys.argv[1:] if argv is None else argv)
    args = _build_parser().parse_args(opts)

    try:
        source = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as ex:
        print(f"Failed to read program: {ex}", file=sys.stderr)
        return 1

    inbox, mem = build_initial_state(values)
    cpu = CPU.from_source(source, memory=mem, inbox=inbox, debug=args.debug)

    if args.listing:
        print_listing(cpu.prog.instructions, cpu.prog.labels)

    try:
        outbox = cpu.run()
    except MachineError as ex:
        print(f"Program failed with: {ex}", file=sys.stderr)
        return 1

    print(f"Outbox: {format_values(outbox)}")
    if args.stats:
        print(f"Size: {cpu.prog.size()}")
        print(f"Steps: {cpu.steps}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
