"""
Tape Simulator

Executes a parsed Blueprint on a sparse, zero-initialized tape that is
unbounded in both directions.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .blueprint import Blueprint, State, StateId, UnknownStateError


class Tape:
    """
    Sparse bidirectional tape of bits.

    Unvisited positions read as 0. Only written cells are stored.
    """

    def __init__(self):
        self.cells: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.cells)

    def read(self, position: int) -> int:
        return self.cells.get(position, 0)

    def write(self, position: int, bit: int):
        self.cells[position] = 1 if bit else 0

    def checksum(self) -> int:
        """Count of cells holding 1."""
        return sum(self.cells.values())

    def bounds(self) -> Optional[Tuple[int, int]]:
        """Leftmost and rightmost written positions, or None for a blank tape."""
        if not self.cells:
            return None
        return min(self.cells), max(self.cells)

    def window(self, lo: int, hi: int) -> List[int]:
        """Bits from ``lo`` to ``hi`` inclusive."""
        return [self.read(pos) for pos in range(lo, hi + 1)]

    def render(self, cursor: int, lo: int, hi: int) -> str:
        """
        Render a slice of the tape with the cursor in brackets.

        Example: ``... 0  1 [1] 0  1  0 ...``
        """
        parts = []
        for pos in range(lo, hi + 1):
            bit = self.read(pos)
            parts.append(f"[{bit}]" if pos == cursor else f" {bit} ")
        return "..." + "".join(parts) + "..."


@dataclass
class Snapshot:
    """
    Machine configuration after ``step`` steps.

    Only the cell written by the step that led here is kept, as a
    (position, bit) pair; the first snapshot has none. Use replay_cells()
    to rebuild the tape.
    """
    step: int
    state: StateId
    cursor: int
    written: Optional[Tuple[int, int]] = None


class TuringMachine:
    """
    Runs a Blueprint for a bounded number of steps.

    The machine has no halt state: it executes exactly the requested
    number of steps and stops, whatever state it is in.
    """

    def __init__(
        self,
        blueprint: Blueprint,
        record_history: bool = False,
        verbose: bool = False,
    ):
        """
        Initialize the machine.

        Args:
            blueprint: The machine definition to run
            record_history: Keep a Snapshot of every configuration
            verbose: Print each step
        """
        self.blueprint = blueprint
        self.record_history = record_history
        self.verbose = verbose
        self.reset()

    def reset(self):
        """Reset to a blank tape at position 0 in the starting state."""
        self.tape = Tape()
        self.cursor: int = 0
        self.state: StateId = self.blueprint.starting_state
        self.steps_taken: int = 0
        self.history: List[Snapshot] = []
        self.state_visits: Dict[StateId, int] = {}
        self.leftmost: int = 0
        self.rightmost: int = 0

        if self.record_history:
            self._record()

    def _lookup(self, name: StateId) -> State:
        try:
            return self.blueprint.states[name]
        except KeyError:
            raise UnknownStateError(
                f"machine entered undefined state {name!r} at step {self.steps_taken}"
            ) from None

    def _record(self, written: Optional[Tuple[int, int]] = None):
        self.history.append(
            Snapshot(
                step=self.steps_taken,
                state=self.state,
                cursor=self.cursor,
                written=written,
            )
        )

    def step(self):
        """Execute one step: read, write, move, switch state."""
        state = self._lookup(self.state)

        bit = self.tape.read(self.cursor)
        transition = state.transition_for(bit)
        if transition.next_state not in self.blueprint.states:
            raise UnknownStateError(
                f"state {self.state!r} (value {bit}) continues with undefined state "
                f"{transition.next_state!r} at step {self.steps_taken + 1}"
            )

        if self.verbose:
            print(
                f"Step {self.steps_taken + 1}: State={self.state}, Pos={self.cursor}, "
                f"Read={bit} -> Write={transition.write_value}, "
                f"Move={transition.direction.value}, Next={transition.next_state}"
            )

        self.state_visits[self.state] = self.state_visits.get(self.state, 0) + 1
        position = self.cursor
        self.tape.write(position, transition.write_value)
        self.cursor += transition.direction.offset
        self.state = transition.next_state
        self.steps_taken += 1

        self.leftmost = min(self.leftmost, self.cursor)
        self.rightmost = max(self.rightmost, self.cursor)

        if self.record_history:
            self._record((position, transition.write_value))

    def run(self, steps: Optional[int] = None) -> int:
        """
        Run the machine.

        Args:
            steps: Number of steps to execute (default: the blueprint's
                checksum step count)

        Returns:
            The diagnostic checksum: the number of 1s on the tape
        """
        if steps is None:
            steps = self.blueprint.checksum_after_steps
        if steps < 0:
            raise ValueError(f"step count must be non-negative, got {steps}")

        self._lookup(self.state)

        for _ in range(steps):
            self.step()

        return self.tape.checksum()

    def render(self, radius: int = 3) -> str:
        """Render the tape around the cursor."""
        return self.tape.render(self.cursor, self.cursor - radius, self.cursor + radius)

    def get_metrics(self) -> Dict[str, object]:
        """Summary of the run so far."""
        return {
            "checksum": self.tape.checksum(),
            "steps": self.steps_taken,
            "cells_visited": len(self.tape),
            "leftmost": self.leftmost,
            "rightmost": self.rightmost,
            "state_visits": dict(self.state_visits),
        }


def simulate(blueprint: Blueprint, steps: Optional[int] = None) -> int:
    """Run a blueprint on a fresh machine and return its checksum."""
    return TuringMachine(blueprint).run(steps)


def replay_cells(history: List[Snapshot]) -> Iterator[Dict[int, int]]:
    """
    Rebuild the tape for each snapshot of a recorded history.

    Yields the same dict for every snapshot, updated in place; copy it to
    keep a particular configuration.
    """
    cells: Dict[int, int] = {}
    for snap in history:
        if snap.written is not None:
            position, bit = snap.written
            cells[position] = bit
        yield cells
