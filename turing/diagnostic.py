"""
Diagnostic Module - Parses blueprints and takes their diagnostic checksum.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .blueprint import Blueprint, StateId, parse_blueprint
from .machine import Snapshot, TuringMachine


@dataclass
class DiagnosticConfig:
    """Configuration for a diagnostic run."""
    num_states: Optional[int] = None        # None = count "In state" blocks
    steps_override: Optional[int] = None    # None = use the blueprint's step count
    max_steps: int = 100_000_000            # Refuse runs longer than this
    radius: int = 3                         # Cells rendered each side of the cursor
    record_history: bool = False
    verbose: bool = False


@dataclass
class DiagnosticResult:
    """Result of a diagnostic run."""
    name: str
    checksum: int
    steps: int
    final_state: StateId
    cursor: int
    tape: str = ""
    metrics: Dict[str, object] = field(default_factory=dict)

    # Only filled when the config asks for history
    history: List[Snapshot] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "checksum": self.checksum,
            "steps": self.steps,
            "final_state": self.final_state,
            "cursor": self.cursor,
            "tape": self.tape,
            "metrics": dict(self.metrics),
        }


class Diagnostic:
    """
    Runs diagnostic checksums for one or more blueprints.
    """

    def __init__(self, config: Optional[DiagnosticConfig] = None):
        self.config = config or DiagnosticConfig()

    def _steps_for(self, blueprint: Blueprint) -> int:
        steps = self.config.steps_override
        if steps is None:
            steps = blueprint.checksum_after_steps
        if steps < 0:
            raise ValueError(f"step count must be non-negative, got {steps}")
        if steps > self.config.max_steps:
            raise ValueError(
                f"blueprint asks for {steps} steps, limit is {self.config.max_steps}"
            )
        return steps

    def run(self, blueprint: Blueprint, name: str = "blueprint") -> DiagnosticResult:
        """
        Run a parsed blueprint.

        Args:
            blueprint: The blueprint to run
            name: Label for the result

        Returns:
            DiagnosticResult with the checksum and run metrics
        """
        steps = self._steps_for(blueprint)

        machine = TuringMachine(
            blueprint,
            record_history=self.config.record_history,
            verbose=self.config.verbose,
        )
        checksum = machine.run(steps)

        return DiagnosticResult(
            name=name,
            checksum=checksum,
            steps=machine.steps_taken,
            final_state=machine.state,
            cursor=machine.cursor,
            tape=machine.render(self.config.radius),
            metrics=machine.get_metrics(),
            history=machine.history,
        )

    def run_text(self, text: str, name: str = "blueprint") -> DiagnosticResult:
        """Parse blueprint text and run it."""
        blueprint = parse_blueprint(text, self.config.num_states)
        return self.run(blueprint, name)

    def run_batch(self, sources: Dict[str, str]) -> List[DiagnosticResult]:
        """
        Run several blueprint texts.

        Each text is parsed with the configured state count, or with its
        own block count when none is configured.

        Args:
            sources: Mapping of name to blueprint text

        Returns:
            Results in name order
        """
        return [self.run_text(sources[name], name) for name in sorted(sources)]


def diagnostic_checksum(text: str, num_states: Optional[int] = None) -> int:
    """Parse a blueprint and return its diagnostic checksum."""
    return TuringMachine(parse_blueprint(text, num_states)).run()
