"""
Turing Machine Blueprint Simulator

Parses Turing machine blueprints and runs them for a fixed number of
steps to take a diagnostic checksum.
"""

from .blueprint import (
    Blueprint,
    State,
    Transition,
    Direction,
    ParseError,
    MalformedLineError,
    BranchOrderError,
    TruncatedInputError,
    DuplicateStateError,
    UnknownStateError,
    BLUEPRINTS,
    parse_blueprint,
    blueprint_to_string,
    count_state_blocks,
)
from .machine import Tape, TuringMachine, Snapshot, replay_cells, simulate
from .diagnostic import Diagnostic, DiagnosticConfig, DiagnosticResult, diagnostic_checksum

__all__ = [
    "Blueprint",
    "State",
    "Transition",
    "Direction",
    "ParseError",
    "MalformedLineError",
    "BranchOrderError",
    "TruncatedInputError",
    "DuplicateStateError",
    "UnknownStateError",
    "BLUEPRINTS",
    "parse_blueprint",
    "blueprint_to_string",
    "count_state_blocks",
    "Tape",
    "TuringMachine",
    "Snapshot",
    "simulate",
    "replay_cells",
    "Diagnostic",
    "DiagnosticConfig",
    "DiagnosticResult",
    "diagnostic_checksum",
]
