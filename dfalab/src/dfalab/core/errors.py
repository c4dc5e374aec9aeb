"""
Error taxonomy for dfalab.

Each family is one closed set of kinds:
- ParseError: raised by the parser (MALFORMED_LINE, INVALID_AUTOMATON)
- ValidationIssue: errors and warnings produced by the validator
- SimulationError: per-line failures attached to a Verdict

Every value carries the fields needed to render a precise message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ParseErrorKind(str, Enum):
    MALFORMED_LINE = "malformed_line"
    INVALID_AUTOMATON = "invalid_automaton"


class ValidationKind(str, Enum):
    MALFORMED_LINE = "malformed_line"
    EMPTY_STATES = "empty_states"
    EMPTY_ALPHABET = "empty_alphabet"
    INVALID_START = "invalid_start"
    INVALID_ACCEPTING = "invalid_accepting"
    INVALID_TRANSITION_ENDPOINT = "invalid_transition_endpoint"
    NON_DETERMINISTIC_TRANSITION = "non_deterministic_transition"
    INCOMPLETE_AUTOMATON = "incomplete_automaton"
    UNREACHABLE_STATE = "unreachable_state"


class SimulationErrorKind(str, Enum):
    UNKNOWN_SYMBOL = "unknown_symbol"
    NO_TRANSITION = "no_transition"


@dataclass(frozen=True)
class ValidationIssue:
    """One validator finding. Only the fields relevant to `kind` are set."""

    kind: ValidationKind
    message: str
    state: Optional[str] = None
    symbol: Optional[str] = None
    line_number: Optional[int] = None

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


@dataclass(frozen=True)
class SimulationError:
    """Why a single input line was rejected before it was fully consumed."""

    kind: SimulationErrorKind
    symbol: str
    position: int
    state: Optional[str] = None

    @property
    def message(self) -> str:
        if self.kind is SimulationErrorKind.UNKNOWN_SYMBOL:
            return f"symbol {self.symbol!r} at position {self.position} is not in the alphabet"
        return f"no transition from state {self.state!r} on symbol {self.symbol!r} (position {self.position})"

    def __str__(self) -> str:
        return self.message


class ParseError(ValueError):
    """
    Raised when definition text cannot be turned into a DFA.

    kind is MALFORMED_LINE (line_number and raw_text set) or
    INVALID_AUTOMATON (errors holds the validator issues that caused it).
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        detail: str,
        line_number: Optional[int] = None,
        raw_text: Optional[str] = None,
        errors: tuple[ValidationIssue, ...] = (),
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.line_number = line_number
        self.raw_text = raw_text
        self.errors = tuple(errors)
        super().__init__(self._render())

    def _render(self) -> str:
        if self.kind is ParseErrorKind.MALFORMED_LINE:
            return f"line {self.line_number}: {self.detail}: {self.raw_text!r}"
        return f"invalid automaton: {self.detail}"

    @classmethod
    def malformed(cls, line_number: int, raw_text: str, detail: str) -> "ParseError":
        return cls(ParseErrorKind.MALFORMED_LINE, detail, line_number=line_number, raw_text=raw_text)

    @classmethod
    def invalid(cls, errors: tuple[ValidationIssue, ...]) -> "ParseError":
        detail = "; ".join(str(issue) for issue in errors) or "validation failed"
        return cls(ParseErrorKind.INVALID_AUTOMATON, detail, errors=errors)
