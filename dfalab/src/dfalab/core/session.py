"""
Session: the explicit context holding the single active DFA and input batch.

A definition load parses and validates completely before the active slot is
replaced, so a failed load leaves the previous automaton in place. Loads are
serialized by a lock; batch runs read the slot once and never lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dfalab.core.config import SessionConfig
from dfalab.core.errors import ValidationIssue
from dfalab.core.parser import parse_definition
from dfalab.core.simulation import simulate_all
from dfalab.core.types import DFA, BatchReport, InputBatch, LoadedDefinition
from dfalab.io.files import output_path_for, read_definition_file, read_input_file, write_output
from dfalab.measures.aggregate import BatchSummary, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveAutomaton:
    definition: LoadedDefinition
    dfa: DFA
    warnings: tuple[ValidationIssue, ...] = ()


@dataclass(frozen=True)
class LoadedInput:
    batch: InputBatch
    path: Optional[Path] = None


class Session:
    def __init__(self, config: Optional[SessionConfig] = None) -> None:
        self.config = SessionConfig() if config is None else config
        self._lock = threading.Lock()
        self._active: Optional[ActiveAutomaton] = None
        self._input: Optional[LoadedInput] = None

    @property
    def active(self) -> Optional[ActiveAutomaton]:
        return self._active

    @property
    def dfa(self) -> Optional[DFA]:
        active = self._active
        return None if active is None else active.dfa

    @property
    def batch(self) -> Optional[InputBatch]:
        loaded = self._input
        return None if loaded is None else loaded.batch

    def load_definition(self, definition: LoadedDefinition) -> DFA:
        """
        Parse a definition and make it the active DFA.

        Raises:
            ParseError: The definition is malformed or invalid; the previously
                active DFA is kept.
        """
        outcome = parse_definition(definition.content, self.config.parser, self.config.validator)
        active = ActiveAutomaton(definition=definition, dfa=outcome.dfa, warnings=outcome.warnings)
        with self._lock:
            self._active = active
        logger.info(
            "loaded %s: %d states, %d symbols, %d warning(s)",
            definition.filename,
            len(outcome.dfa.states),
            len(outcome.dfa.alphabet),
            len(outcome.warnings),
        )
        return outcome.dfa

    def load_definition_file(self, path: Union[str, Path]) -> LoadedDefinition:
        definition = read_definition_file(path)
        self.load_definition(definition)
        return definition

    def load_input(self, batch: InputBatch) -> InputBatch:
        with self._lock:
            self._input = LoadedInput(batch=batch)
        return batch

    def load_input_file(self, path: Union[str, Path]) -> InputBatch:
        batch = read_input_file(path)
        with self._lock:
            self._input = LoadedInput(batch=batch, path=Path(path))
        return batch

    def run_batch(
        self,
        batch: Optional[InputBatch] = None,
        cancel_event: Optional[threading.Event] = None,
        progress: bool = False,
    ) -> BatchSummary:
        """Run a batch (or the last loaded one) against the active DFA."""
        active = self._active
        if active is None:
            raise RuntimeError("no DFA loaded")
        if batch is None:
            batch = self.batch
        if batch is None:
            raise RuntimeError("no input loaded")

        report = simulate_all(active.dfa, batch, self.config.simulation, cancel_event, progress)
        return aggregate(report)

    def save_output(self, report: BatchReport, path: Union[str, Path, None] = None) -> Path:
        """Write VALID/INVALID lines, by default next to the loaded input file as `.out`."""
        if path is None:
            loaded = self._input
            if loaded is None or loaded.path is None:
                raise RuntimeError("no input file loaded")
            path = output_path_for(loaded.path)
        return write_output(report, path)
