"""
Blueprint Parser and Data Model

Parses the fixed-format Turing machine blueprint text into a structured
Blueprint, and renders a Blueprint back into the same text.
"""

from enum import Enum
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
import re


StateId = str


class ParseError(ValueError):
    """Raised when blueprint text does not conform to the grammar."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.message = message
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class MalformedLineError(ParseError):
    """A line does not match the expected pattern at its position."""


class BranchOrderError(ParseError):
    """The 'value is 0' / 'value is 1' branches are out of order."""


class TruncatedInputError(ParseError):
    """Input ended before all expected state blocks were read."""


class DuplicateStateError(ParseError):
    """A state identifier was declared more than once."""


class UnknownStateError(ParseError):
    """A transition (or the starting state) names a state that does not exist."""


class Direction(Enum):
    """Cursor move direction."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def offset(self) -> int:
        return -1 if self is Direction.LEFT else 1


@dataclass(frozen=True)
class Transition:
    """The write/move/next-state action for one (state, current bit) pair."""
    write_value: int
    direction: Direction
    next_state: StateId


@dataclass(frozen=True)
class State:
    """The two transitions of a state, keyed by the bit under the cursor."""
    on_zero: Transition
    on_one: Transition

    def transition_for(self, bit: int) -> Transition:
        return self.on_one if bit else self.on_zero


@dataclass(frozen=True)
class Blueprint:
    """A parsed Turing machine: run parameters plus its state table.

    The state table is stored as a read-only mapping.
    """
    starting_state: StateId
    checksum_after_steps: int
    states: Mapping[StateId, State] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "states", MappingProxyType(dict(self.states)))

    def __hash__(self) -> int:
        return hash((self.starting_state, self.checksum_after_steps, frozenset(self.states.items())))

    def __len__(self) -> int:
        return len(self.states)

    def validate(self) -> "Blueprint":
        """
        Check that every referenced state exists.

        Returns:
            The blueprint itself, so calls can be chained

        Raises:
            UnknownStateError: if the starting state or any next_state is
                missing from the state table
        """
        if self.starting_state not in self.states:
            raise UnknownStateError(f"starting state {self.starting_state!r} is not defined")

        for name, state in self.states.items():
            for bit, transition in ((0, state.on_zero), (1, state.on_one)):
                if transition.next_state not in self.states:
                    raise UnknownStateError(
                        f"state {name!r} (value {bit}) continues with undefined state "
                        f"{transition.next_state!r}"
                    )
        return self

    def with_steps(self, steps: int) -> "Blueprint":
        """Return a copy that runs for a different number of steps."""
        if steps < 0:
            raise ValueError(f"step count must be non-negative, got {steps}")
        return replace(self, checksum_after_steps=steps)


class LineMatcher:
    """
    Matches lines against grammar templates.

    A template is a literal line with ``{}`` placeholders. Literal fragments
    must match exactly; each placeholder captures a single non-whitespace
    token.
    """

    _cache: Dict[str, "re.Pattern[str]"] = {}

    def __init__(self, text: str):
        self.lines = text.splitlines()
        self.position = 0

    @classmethod
    def _compile(cls, template: str) -> "re.Pattern[str]":
        pattern = cls._cache.get(template)
        if pattern is None:
            fragments = template.split("{}")
            pattern = re.compile("^" + r"(\S+)".join(re.escape(f) for f in fragments) + "$")
            cls._cache[template] = pattern
        return pattern

    @property
    def line_number(self) -> int:
        """1-based number of the next line to be consumed."""
        return self.position + 1

    def at_end(self) -> bool:
        return self.position >= len(self.lines)

    def peek(self) -> Optional[str]:
        if self.at_end():
            return None
        return self.lines[self.position].rstrip()

    def skip_blank(self) -> int:
        """Consume blank lines; return how many were skipped."""
        skipped = 0
        while not self.at_end() and not self.peek():
            self.position += 1
            skipped += 1
        return skipped

    def expect(self, template: str, context: str) -> Tuple[str, ...]:
        """
        Consume the next line and match it against ``template``.

        Args:
            template: Literal line with ``{}`` placeholders
            context: What was expected, for error messages

        Returns:
            The captured tokens, one per placeholder

        Raises:
            TruncatedInputError: if there are no lines left
            MalformedLineError: if the line does not match
        """
        if self.at_end():
            raise TruncatedInputError(
                f"unexpected end of input, expected {context}", self.line_number
            )

        line = self.peek()
        match = self._compile(template).match(line)
        if not match:
            raise MalformedLineError(
                f"expected {context} ({template.replace('{}', '<...>')!r}), got {line!r}",
                self.line_number,
                line,
            )
        self.position += 1
        return match.groups()


HEADER_START = "Begin in state {}."
HEADER_STEPS = "Perform a diagnostic checksum after {} steps."
STATE_HEADER = "In state {}:"
BRANCH_HEADER = "  If the current value is {}:"
WRITE_LINE = "    - Write the value {}."
MOVE_LINE = "    - Move one slot to the {}."
CONTINUE_LINE = "    - Continue with state {}."


def _parse_bit(token: str, what: str, matcher: LineMatcher) -> int:
    if token not in ("0", "1"):
        raise MalformedLineError(
            f"{what} must be 0 or 1, got {token!r}", matcher.line_number - 1, token
        )
    return int(token)


def _parse_direction(token: str, matcher: LineMatcher) -> Direction:
    try:
        return Direction(token)
    except ValueError:
        raise MalformedLineError(
            f"direction must be 'left' or 'right', got {token!r}", matcher.line_number - 1, token
        ) from None


def _parse_transition(matcher: LineMatcher, expected_value: int) -> Transition:
    """Parse one 'If the current value is ...' branch."""
    (value_token,) = matcher.expect(BRANCH_HEADER, f"branch for current value {expected_value}")
    value = _parse_bit(value_token, "current value", matcher)
    if value != expected_value:
        raise BranchOrderError(
            f"expected the branch for current value {expected_value}, got {value}",
            matcher.line_number - 1,
            matcher.lines[matcher.position - 1],
        )

    (write_token,) = matcher.expect(WRITE_LINE, "a write instruction")
    write_value = _parse_bit(write_token, "written value", matcher)

    (direction_token,) = matcher.expect(MOVE_LINE, "a move instruction")
    direction = _parse_direction(direction_token, matcher)

    (next_state,) = matcher.expect(CONTINUE_LINE, "a continue instruction")

    return Transition(write_value=write_value, direction=direction, next_state=next_state)


def count_state_blocks(text: str) -> int:
    """Count the 'In state' blocks in a blueprint text."""
    return sum(1 for line in text.splitlines() if line.startswith("In state "))


def parse_blueprint(text: str, num_states: Optional[int] = None) -> Blueprint:
    """
    Parse a complete blueprint.

    Args:
        text: Blueprint text in the fixed grammar
        num_states: Number of state blocks to read. When omitted, the
            blocks are counted with count_state_blocks().

    Returns:
        A validated Blueprint

    Raises:
        ParseError: (or a subclass) if the text does not conform
    """
    if num_states is None:
        num_states = count_state_blocks(text)
    elif num_states < 1:
        raise ValueError(f"a blueprint needs at least one state, got {num_states}")

    matcher = LineMatcher(text)
    matcher.skip_blank()

    (starting_state,) = matcher.expect(HEADER_START, "the starting state")
    (steps_token,) = matcher.expect(HEADER_STEPS, "the checksum step count")
    if not re.fullmatch(r"[0-9]+", steps_token):
        raise MalformedLineError(
            f"step count must be a non-negative integer, got {steps_token!r}",
            matcher.line_number - 1,
            steps_token,
        )
    checksum_after_steps = int(steps_token)

    if num_states == 0:
        raise TruncatedInputError("no state blocks found", matcher.line_number)

    states: Dict[StateId, State] = {}

    for index in range(num_states):
        if matcher.skip_blank() == 0:
            if matcher.at_end():
                raise TruncatedInputError(
                    f"expected {num_states} state blocks, found {index}", matcher.line_number
                )
            raise MalformedLineError(
                "expected a blank line before the state block",
                matcher.line_number,
                matcher.peek(),
            )
        if matcher.at_end():
            raise TruncatedInputError(
                f"expected {num_states} state blocks, found {index}", matcher.line_number
            )

        header_line = matcher.line_number
        (name,) = matcher.expect(STATE_HEADER, "a state header")
        if name in states:
            raise DuplicateStateError(f"state {name!r} is declared twice", header_line, name)

        on_zero = _parse_transition(matcher, 0)
        on_one = _parse_transition(matcher, 1)
        states[name] = State(on_zero=on_zero, on_one=on_one)

    matcher.skip_blank()
    if not matcher.at_end():
        raise MalformedLineError(
            f"unexpected content after {num_states} state blocks",
            matcher.line_number,
            matcher.peek(),
        )

    blueprint = Blueprint(
        starting_state=starting_state,
        checksum_after_steps=checksum_after_steps,
        states=states,
    )
    return blueprint.validate()


def _transition_lines(value: int, transition: Transition) -> List[str]:
    return [
        BRANCH_HEADER.format(value),
        WRITE_LINE.format(transition.write_value),
        MOVE_LINE.format(transition.direction.value),
        CONTINUE_LINE.format(transition.next_state),
    ]


def blueprint_to_string(blueprint: Blueprint) -> str:
    """Convert a Blueprint back to blueprint text."""
    lines = [
        HEADER_START.format(blueprint.starting_state),
        HEADER_STEPS.format(blueprint.checksum_after_steps),
    ]

    for name, state in blueprint.states.items():
        lines.append("")
        lines.append(STATE_HEADER.format(name))
        lines.extend(_transition_lines(0, state.on_zero))
        lines.extend(_transition_lines(1, state.on_one))

    return "\n".join(lines) + "\n"


# Sample blueprints
BLUEPRINTS = {
    "example": """Begin in state A.
Perform a diagnostic checksum after 6 steps.

In state A:
  If the current value is 0:
    - Write the value 1.
    - Move one slot to the right.
    - Continue with state B.
  If the current value is 1:
    - Write the value 0.
    - Move one slot to the left.
    - Continue with state B.

In state B:
  If the current value is 0:
    - Write the value 1.
    - Move one slot to the left.
    - Continue with state A.
  If the current value is 1:
    - Write the value 1.
    - Move one slot to the right.
    - Continue with state A.
""",

    # 2-state busy beaver. H stands in for the halt state: it rewrites
    # whatever it reads, so the checksum stays 4 from step 6 onwards.
    "busy-beaver": """Begin in state A.
Perform a diagnostic checksum after 6 steps.

In state A:
  If the current value is 0:
    - Write the value 1.
    - Move one slot to the right.
    - Continue with state B.
  If the current value is 1:
    - Write the value 1.
    - Move one slot to the left.
    - Continue with state B.

In state B:
  If the current value is 0:
    - Write the value 1.
    - Move one slot to the left.
    - Continue with state A.
  If the current value is 1:
    - Write the value 1.
    - Move one slot to the right.
    - Continue with state H.

In state H:
  If the current value is 0:
    - Write the value 0.
    - Move one slot to the right.
    - Continue with state H.
  If the current value is 1:
    - Write the value 1.
    - Move one slot to the right.
    - Continue with state H.
""",
}
