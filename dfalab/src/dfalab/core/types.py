"""
Core types for dfalab: LoadedDefinition, InputBatch, DraftAutomaton, DFA, Verdict, BatchReport.

Pure data containers with validation. No parsing or simulation logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from dfalab.core.errors import SimulationError

Symbol = str
State = str
Trace = tuple[State, ...]

NO_TRANSITION = -1


@dataclass(frozen=True)
class LoadedDefinition:
    """A loaded automaton-definition file: base filename plus raw text."""

    filename: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"filename": self.filename, "content": self.content}


@dataclass(frozen=True)
class InputBatch:
    """A loaded input file: each line is evaluated independently."""

    filename: str
    lines: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    def to_dict(self) -> dict[str, object]:
        return {"filename": self.filename, "inputLines": list(self.lines)}


@dataclass(frozen=True)
class DraftTransition:
    source: str
    symbol: str
    target: str
    line_number: Optional[int] = None


@dataclass
class DraftAutomaton:
    """
    Everything the parser accumulated, before validation.

    Lists keep declaration order so that validator output is deterministic.
    """

    states: list = field(default_factory=list)
    alphabet: list = field(default_factory=list)
    start: Optional[str] = None
    accepting: list = field(default_factory=list)
    transitions: list = field(default_factory=list)


@dataclass(frozen=True)
class DFA:
    """
    A deterministic finite automaton. Immutable after construction.

    The transition function may be partial; a missing (state, symbol) pair
    rejects at simulation time. `table` is a read-only compiled view of
    `transitions` indexed by (state index, symbol index), NO_TRANSITION where
    undefined.
    """

    states: tuple[State, ...]
    alphabet: tuple[Symbol, ...]
    transitions: Mapping[tuple[State, Symbol], State]
    start: State
    accepting: frozenset[State]
    table: np.ndarray = field(init=False, repr=False, compare=False)
    state_index: Mapping[State, int] = field(init=False, repr=False, compare=False)
    symbol_index: Mapping[Symbol, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Use object.__setattr__ because this is frozen dataclass
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(self, "accepting", frozenset(self.accepting))
        object.__setattr__(self, "transitions", MappingProxyType(dict(self.transitions)))

        if not self.states:
            raise ValueError("states must not be empty")
        if not self.alphabet:
            raise ValueError("alphabet must not be empty")
        if len(set(self.states)) != len(self.states):
            raise ValueError("states must be unique")
        if len(set(self.alphabet)) != len(self.alphabet):
            raise ValueError("alphabet symbols must be unique")
        if any(len(symbol) != 1 for symbol in self.alphabet):
            raise ValueError("alphabet symbols must be single characters")

        state_index = {state: idx for idx, state in enumerate(self.states)}
        symbol_index = {symbol: idx for idx, symbol in enumerate(self.alphabet)}

        if self.start not in state_index:
            raise ValueError("start must be in states")
        if not self.accepting.issubset(state_index):
            raise ValueError("accepting must be a subset of states")

        table = np.full((len(self.states), len(self.alphabet)), NO_TRANSITION, dtype=np.int64)
        for (state, symbol), next_state in self.transitions.items():
            if state not in state_index:
                raise ValueError(f"transition references unknown state: {state}")
            if symbol not in symbol_index:
                raise ValueError(f"transition references unknown symbol: {symbol}")
            if next_state not in state_index:
                raise ValueError(f"transition has unknown next_state: {next_state}")
            table[state_index[state], symbol_index[symbol]] = state_index[next_state]
        table.flags.writeable = False

        object.__setattr__(self, "table", table)
        object.__setattr__(self, "state_index", MappingProxyType(state_index))
        object.__setattr__(self, "symbol_index", MappingProxyType(symbol_index))

    def next_state(self, state: State, symbol: Symbol) -> Optional[State]:
        return self.transitions.get((state, symbol))

    def missing_transitions(self) -> list[tuple[State, Symbol]]:
        rows, cols = np.nonzero(self.table == NO_TRANSITION)
        return [(self.states[r], self.alphabet[c]) for r, c in zip(rows.tolist(), cols.tolist())]

    @property
    def is_complete(self) -> bool:
        return not bool(np.any(self.table == NO_TRANSITION))


@dataclass(frozen=True)
class Verdict:
    """Outcome of running one input line."""

    accepted: bool
    trace: Trace
    error: Optional[SimulationError] = None

    @property
    def final_state(self) -> State:
        return self.trace[-1]


@dataclass(frozen=True)
class BatchReport:
    """
    Verdicts index-aligned with the batch lines.

    An entry is None only when the batch was cancelled before that line ran.
    """

    filename: str
    verdicts: tuple[Optional[Verdict], ...]
    cancelled: bool = False

    def __post_init__(self):
        object.__setattr__(self, "verdicts", tuple(self.verdicts))
        if not self.cancelled and any(v is None for v in self.verdicts):
            raise ValueError("only a cancelled report may contain skipped lines")

    def __len__(self) -> int:
        return len(self.verdicts)

    @property
    def is_complete(self) -> bool:
        return all(v is not None for v in self.verdicts)
