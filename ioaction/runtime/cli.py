"""Command-line interface for the ioaction runtime."""
from __future__ import annotations

import argparse
import json
import sys

from ..constants import (
    DEFAULT_PROGRAM,
    EXIT_END_OF_INPUT,
    EXIT_OK,
    EXIT_USAGE,
    LOGBOOK_FILE,
    PUB_FILE,
)
from .analysis import (
    action_to_dict,
    export_graphviz,
    hash_action,
    print_action,
    static_grade,
    visualize_graph,
)
from .cancel import CancellationToken, cancel_on_interrupt
from .console import StreamConsole
from .engine import ActionEngine
from .logbook import record_run, show_logbook, verify_signature
from .programs import PROGRAMS, build_program


def parse_args(args):
    argp = argparse.ArgumentParser(description="ioaction: run IO-action example programs")

    argp.add_argument(
        "program",
        nargs="?",
        default=DEFAULT_PROGRAM,
        help=f"Example program to run (default: {DEFAULT_PROGRAM})",
    )
    argp.add_argument("--list", action="store_true", help="List the example programs")
    argp.add_argument(
        "--input",
        metavar="FILE",
        help="Read console input from FILE instead of standard input",
    )
    argp.add_argument("--tree", action="store_true", help="Print the action tree")
    argp.add_argument(
        "--json", action="store_true", help="Print the action tree as JSON"
    )
    argp.add_argument("--hash", action="store_true", help="Print the action tree hash")
    argp.add_argument(
        "--no-run", action="store_true", help="Inspect the program without running it"
    )
    argp.add_argument(
        "--trace", action="store_true", help="Print the effect log after the run"
    )
    argp.add_argument(
        "--viz",
        metavar="OUTPUT",
        help="Export a Graphviz visualization of the action tree (.dot or .svg)",
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Draw the action tree with matplotlib"
    )
    argp.add_argument(
        "--record", action="store_true", help="Record the run in the signed logbook"
    )
    argp.add_argument(
        "--logbook", action="store_true", help="Show the run logbook"
    )
    argp.add_argument(
        "--logbook-file",
        default=LOGBOOK_FILE,
        metavar="PATH",
        help=f"Logbook location (default: {LOGBOOK_FILE})",
    )
    argp.add_argument("--verify", metavar="HASH", help="Verify a logbook entry hash")
    argp.add_argument("--signature", metavar="HEX", help="Signature to verify against")

    return argp.parse_args(args)


def _list_programs():
    for name, factory in sorted(PROGRAMS.items()):
        doc = (factory.__doc__ or "").strip().splitlines()
        print(f"  {name:<12} {doc[0] if doc else ''}")


def main(args):
    params = parse_args(args)

    if params.list:
        _list_programs()
        return EXIT_OK
    if params.logbook:
        show_logbook(params.logbook_file)
        return EXIT_OK
    if params.verify:
        if not params.signature:
            print("✗ --verify requires --signature", file=sys.stderr)
            return EXIT_USAGE
        try:
            ok = verify_signature(params.verify, params.signature)
        except FileNotFoundError:
            print(f"✗ no public key at {PUB_FILE}", file=sys.stderr)
            return 1
        print("✓ Signature valid" if ok else "✗ Invalid signature")
        return EXIT_OK if ok else 1

    try:
        action = build_program(params.program)
    except ValueError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return EXIT_USAGE

    if params.tree:
        print_action(action)
        print(f"  static grade: {static_grade(action)}")
    if params.json:
        print(json.dumps(action_to_dict(action), indent=2))
    if params.hash:
        print(f"SHA256({params.program}) = {hash_action(action)}")
    if params.viz:
        export_graphviz(action, params.viz)
    if params.visualize:
        visualize_graph(action)
    if params.no_run:
        return EXIT_OK

    stdin = None
    if params.input:
        try:
            stdin = open(params.input, "r", encoding="utf-8")
        except OSError as exc:
            print(f"✗ cannot read input {params.input}: {exc.strerror}", file=sys.stderr)
            return EXIT_USAGE

    token = CancellationToken()
    engine = ActionEngine()
    try:
        with cancel_on_interrupt(token):
            outcome = engine.run(action, StreamConsole(stdin=stdin), token)
    finally:
        if stdin is not None:
            stdin.close()

    if params.trace:
        print(f"  → grade: {outcome.grade}")
        if outcome.effect_count > len(outcome.log):
            print(f"  → effect log (last {len(outcome.log)} of {outcome.effect_count}):")
        else:
            print("  → effect log:")
        for entry in outcome.log:
            print("   ", entry)
    if params.record:
        record_run(params.program, action, outcome, logbook_path=params.logbook_file)

    if outcome.error is not None:
        print(f"✗ {outcome.error}", file=sys.stderr)
        return EXIT_END_OF_INPUT
    return EXIT_OK


__all__ = [
    "main",
    "parse_args",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
