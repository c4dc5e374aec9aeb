from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

from tqdm.auto import tqdm

from dfalab.core.config import SimulationConfig
from dfalab.core.errors import SimulationError, SimulationErrorKind
from dfalab.core.types import DFA, NO_TRANSITION, BatchReport, InputBatch, Verdict

logger = logging.getLogger(__name__)


def simulate(dfa: DFA, line: str) -> Verdict:
    """
    Run one input line from the start state.

    Stops at the first symbol outside the alphabet or the first missing
    transition; the returned trace holds every state visited up to that point.
    """
    current = dfa.state_index[dfa.start]
    trace = [dfa.start]

    for position, symbol in enumerate(line):
        symbol_idx = dfa.symbol_index.get(symbol)
        if symbol_idx is None:
            error = SimulationError(SimulationErrorKind.UNKNOWN_SYMBOL, symbol=symbol, position=position)
            return Verdict(accepted=False, trace=tuple(trace), error=error)

        next_idx = int(dfa.table[current, symbol_idx])
        if next_idx == NO_TRANSITION:
            error = SimulationError(
                SimulationErrorKind.NO_TRANSITION,
                symbol=symbol,
                position=position,
                state=dfa.states[current],
            )
            return Verdict(accepted=False, trace=tuple(trace), error=error)

        current = next_idx
        trace.append(dfa.states[current])

    return Verdict(accepted=dfa.states[current] in dfa.accepting, trace=tuple(trace))


def _simulate_unless_cancelled(
    dfa: DFA,
    line: str,
    cancel_event: Optional[threading.Event],
) -> Optional[Verdict]:
    if cancel_event is not None and cancel_event.is_set():
        return None
    return simulate(dfa, line)


def _simulate_sequential(
    dfa: DFA,
    lines: tuple[str, ...],
    cancel_event: Optional[threading.Event],
    progress: bool,
) -> list[Optional[Verdict]]:
    verdicts: list[Optional[Verdict]] = [None] * len(lines)
    for idx, line in enumerate(tqdm(lines, desc="lines", disable=not progress)):
        verdict = _simulate_unless_cancelled(dfa, line, cancel_event)
        if verdict is None:
            break
        verdicts[idx] = verdict
    return verdicts


def _simulate_parallel(
    dfa: DFA,
    lines: tuple[str, ...],
    max_workers: int,
    cancel_event: Optional[threading.Event],
    progress: bool,
) -> list[Optional[Verdict]]:
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_simulate_unless_cancelled, dfa, line, cancel_event) for line in lines]
        for _ in tqdm(as_completed(futures), total=len(futures), desc="lines", disable=not progress):
            pass
        # Every future is done here; results are read back in input order.
        return [future.result() for future in futures]


def simulate_all(
    dfa: DFA,
    batch: InputBatch,
    config: Optional[SimulationConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    progress: bool = False,
) -> BatchReport:
    """
    Run every line of a batch against one DFA.

    Lines are independent, so with config.max_workers > 1 they are fanned out
    over a thread pool; the DFA is shared read-only. Setting cancel_event stops
    the batch between lines: finished verdicts are kept and the remaining
    entries stay None.
    """
    config = SimulationConfig() if config is None else config

    if config.max_workers == 1 or len(batch.lines) <= 1:
        verdicts = _simulate_sequential(dfa, batch.lines, cancel_event, progress)
    else:
        verdicts = _simulate_parallel(dfa, batch.lines, config.max_workers, cancel_event, progress)

    cancelled = any(verdict is None for verdict in verdicts)
    if cancelled:
        done = sum(verdict is not None for verdict in verdicts)
        logger.warning("batch %r cancelled after %d of %d lines", batch.filename, done, len(verdicts))
    else:
        logger.debug("batch %r: simulated %d lines", batch.filename, len(verdicts))

    return BatchReport(filename=batch.filename, verdicts=tuple(verdicts), cancelled=cancelled)
