from __future__ import annotations

import pytest

from turing.blueprint import (
    BLUEPRINTS,
    Blueprint,
    Direction,
    State,
    Transition,
    UnknownStateError,
    parse_blueprint,
)
from turing.machine import Tape, TuringMachine, replay_cells, simulate


@pytest.fixture
def example() -> Blueprint:
    return parse_blueprint(BLUEPRINTS["example"], 2)


def test_example_checksum_after_six_steps(example: Blueprint) -> None:
    assert simulate(example) == 3


def test_zero_steps_leaves_tape_blank(example: Blueprint) -> None:
    machine = TuringMachine(example.with_steps(0))
    assert machine.run() == 0
    assert len(machine.tape) == 0
    assert machine.cursor == 0
    assert machine.state == "A"


def test_busy_beaver_checksum() -> None:
    bp = parse_blueprint(BLUEPRINTS["busy-beaver"])
    assert simulate(bp) == 4
    assert simulate(bp, 50) == 4


def test_run_matches_puzzle_trace(example: Blueprint) -> None:
    # Tape window from position -3 to 2, as in the puzzle description.
    expected = [
        ("... 0  0  0 [0] 0  0 ...", "A"),
        ("... 0  0  0  1 [0] 0 ...", "B"),
        ("... 0  0  0 [1] 1  0 ...", "A"),
        ("... 0  0 [0] 0  1  0 ...", "B"),
        ("... 0 [0] 1  0  1  0 ...", "A"),
        ("... 0  1 [1] 0  1  0 ...", "B"),
        ("... 0  1  1 [0] 1  0 ...", "A"),
    ]
    machine = TuringMachine(example)
    for step, (rendered, state) in enumerate(expected):
        if step:
            machine.step()
        assert machine.tape.render(machine.cursor, -3, 2) == rendered
        assert machine.state == state


def test_final_configuration_and_metrics(example: Blueprint) -> None:
    machine = TuringMachine(example)
    machine.run()

    assert machine.steps_taken == 6
    assert machine.cursor == 0
    assert machine.state == "A"
    assert machine.render(3) == "... 0  1  1 [0] 1  0  0 ..."

    metrics = machine.get_metrics()
    assert metrics == {
        "checksum": 3,
        "steps": 6,
        "cells_visited": 4,
        "leftmost": -2,
        "rightmost": 1,
        "state_visits": {"A": 3, "B": 3},
    }


@pytest.mark.parametrize("name", sorted(BLUEPRINTS))
def test_cursor_is_bounded_by_step_count(name: str) -> None:
    bp = parse_blueprint(BLUEPRINTS[name])
    machine = TuringMachine(bp)
    for k in range(1, 40):
        machine.step()
        assert machine.steps_taken == k
        assert abs(machine.cursor) <= k
        assert len(machine.tape) <= k


def test_runs_are_independent(example: Blueprint) -> None:
    first = TuringMachine(example)
    second = TuringMachine(example)
    assert first.run() == 3
    assert second.run(0) == 0
    assert second.run() == 3


def test_reset_restores_initial_configuration(example: Blueprint) -> None:
    machine = TuringMachine(example)
    machine.run()
    machine.reset()
    assert machine.steps_taken == 0
    assert machine.cursor == 0
    assert machine.state == "A"
    assert len(machine.tape) == 0
    assert machine.run() == 3


def test_history_records_every_configuration(example: Blueprint) -> None:
    machine = TuringMachine(example, record_history=True)
    machine.run()

    assert len(machine.history) == 7
    assert [snap.step for snap in machine.history] == list(range(7))
    assert machine.history[0].written is None
    assert [snap.written for snap in machine.history[1:]] == [
        (0, 1), (1, 1), (0, 0), (-1, 1), (-2, 1), (-1, 1),
    ]
    assert machine.history[-1].cursor == 0
    assert machine.history[-1].state == "A"


def test_replay_cells_rebuilds_each_configuration(example: Blueprint) -> None:
    machine = TuringMachine(example, record_history=True)
    machine.run()

    tapes = [dict(cells) for cells in replay_cells(machine.history)]
    assert tapes[0] == {}
    assert tapes[1] == {0: 1}
    assert tapes[-1] == {0: 0, 1: 1, -1: 1, -2: 1}
    assert tapes[-1] == machine.tape.cells


def test_history_grows_by_one_cell_per_step(example: Blueprint) -> None:
    machine = TuringMachine(example, record_history=True)
    machine.run(5000)

    assert len(machine.history) == 5001
    # Each entry carries at most one written cell, not a copy of the tape
    assert sum(snap.written is not None for snap in machine.history) == 5000
    assert not hasattr(machine.history[-1], "cells")


def test_history_starts_before_first_step(example: Blueprint) -> None:
    machine = TuringMachine(example, record_history=True)
    machine.step()
    assert [snap.step for snap in machine.history] == [0, 1]
    machine.reset()
    assert len(machine.history) == 1


def test_verbose_prints_each_step(example: Blueprint, capsys: pytest.CaptureFixture[str]) -> None:
    TuringMachine(example, verbose=True).run(2)
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    assert out[0].startswith("Step 1: State=A, Pos=0, Read=0 -> Write=1")
    assert "Next=A" in out[1]


def test_negative_step_count_is_rejected(example: Blueprint) -> None:
    with pytest.raises(ValueError):
        TuringMachine(example).run(-1)


def test_dangling_next_state_fails_during_simulation() -> None:
    dangling = Blueprint(
        starting_state="A",
        checksum_after_steps=3,
        states={"A": State(Transition(1, Direction.RIGHT, "B"), Transition(0, Direction.LEFT, "A"))},
    )
    machine = TuringMachine(dangling)
    with pytest.raises(UnknownStateError):
        machine.run()
    # Nothing was committed for the failing step
    assert machine.steps_taken == 0
    assert len(machine.tape) == 0


def test_undefined_starting_state_fails_even_for_zero_steps() -> None:
    bp = Blueprint(starting_state="Z", checksum_after_steps=0, states={})
    with pytest.raises(UnknownStateError):
        TuringMachine(bp).run()


def test_tape_reads_do_not_materialize_cells() -> None:
    tape = Tape()
    assert tape.read(-1000) == 0
    assert tape.read(1000) == 0
    assert len(tape) == 0
    assert tape.bounds() is None


def test_tape_write_checksum_and_bounds() -> None:
    tape = Tape()
    tape.write(-3, 1)
    tape.write(2, 1)
    tape.write(0, 0)
    assert tape.checksum() == 2
    assert len(tape) == 3
    assert tape.bounds() == (-3, 2)
    assert tape.window(-3, 2) == [1, 0, 0, 0, 0, 1]
    tape.write(2, 0)
    assert tape.checksum() == 1
