#!/usr/bin/env python3
"""
Turing Machine Diagnostic - Command Line Interface

Reads a blueprint, runs it for the prescribed number of steps and prints
the diagnostic checksum.

Usage:
    python run_diagnostic.py blueprint.txt --states 6
    python run_diagnostic.py --demo --trace
"""

import sys
import os
import json
import argparse

from dotenv import load_dotenv

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

# Load environment variables
load_dotenv(os.path.join(PROJECT_ROOT, "config.env"))

from turing.blueprint import BLUEPRINTS, ParseError, parse_blueprint
from turing.diagnostic import Diagnostic, DiagnosticConfig
from turing.machine import TuringMachine


DEFAULT_RADIUS = int(os.environ.get("TURING_TRACE_RADIUS", "3"))
DEFAULT_MAX_STEPS = int(os.environ.get("TURING_MAX_STEPS", "100000000"))
DEFAULT_PLOT_LIMIT = int(os.environ.get("TURING_PLOT_LIMIT", "10000"))


def read_source(path: str) -> str:
    """Read blueprint text from a file, or stdin for '-'."""
    if path == "-":
        return sys.stdin.read()
    with open(path) as f:
        return f.read()


def print_trace(blueprint, steps, radius: int):
    """Print the tape around the cursor before the run and after each step."""
    machine = TuringMachine(blueprint)
    total = blueprint.checksum_after_steps if steps is None else steps

    print(f"{machine.render(radius)} (before any steps; about to run state {machine.state})")
    for _ in range(total):
        machine.step()
        label = "step" if machine.steps_taken == 1 else "steps"
        print(
            f"{machine.render(radius)} (after {machine.steps_taken} {label}; "
            f"about to run state {machine.state})"
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Turing Machine Diagnostic - run a blueprint and take its checksum",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_diagnostic.py input.txt --states 6
  cat input.txt | python run_diagnostic.py - --states 6
  python run_diagnostic.py --demo --trace
  python run_diagnostic.py input.txt --plot tape.png --steps 200
        """
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Blueprint file, or - for stdin (default: -)",
    )

    parser.add_argument(
        "--states",
        type=int,
        help="Number of state blocks in the blueprint (default: count them)",
    )

    parser.add_argument(
        "--steps",
        type=int,
        help="Override the blueprint's checksum step count",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run the built-in example blueprint",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the tape around the cursor after every step",
    )

    parser.add_argument(
        "--trace-limit",
        type=int,
        default=100,
        help="Only trace runs of at most this many steps (default: 100)",
    )

    parser.add_argument(
        "--radius",
        type=int,
        default=DEFAULT_RADIUS,
        help=f"Cells shown on each side of the cursor when tracing (default: {DEFAULT_RADIUS})",
    )

    parser.add_argument(
        "--plot",
        type=str,
        help="Save a space-time diagram of the run to this path",
    )

    parser.add_argument(
        "--plot-limit",
        type=int,
        default=DEFAULT_PLOT_LIMIT,
        help=f"Only plot runs of at most this many steps (default: {DEFAULT_PLOT_LIMIT})",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    args = parser.parse_args(argv)

    if args.steps is not None and args.steps < 0:
        parser.error("--steps must be non-negative")

    try:
        if args.demo:
            name, text = "example", BLUEPRINTS["example"]
        else:
            name, text = args.input, read_source(args.input)
    except OSError as e:
        print(f"Error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        blueprint = parse_blueprint(text, args.states)
        planned = blueprint.checksum_after_steps if args.steps is None else args.steps

        plot = bool(args.plot)
        if plot and planned > args.plot_limit:
            print(
                f"Skipping plot: {planned} steps exceeds --plot-limit {args.plot_limit}",
                file=sys.stderr,
            )
            plot = False

        config = DiagnosticConfig(
            num_states=args.states,
            steps_override=args.steps,
            max_steps=DEFAULT_MAX_STEPS,
            radius=args.radius,
            record_history=plot,
        )
        result = Diagnostic(config).run(blueprint, name)

        if args.trace and not args.json:
            if result.steps <= args.trace_limit:
                print_trace(blueprint, args.steps, args.radius)
            else:
                print(f"Skipping trace: {result.steps} steps exceeds --trace-limit {args.trace_limit}")
    except ParseError as e:
        print(f"Error: invalid blueprint: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if plot:
        from visualize import plot_spacetime
        plot_spacetime(result.history, title=f"Tape Evolution - {name}", save_path=args.plot)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"Diagnostic checksum: {result.checksum}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
