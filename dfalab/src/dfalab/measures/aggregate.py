"""
Batch report aggregation.

Pure functions over a BatchReport: verdict counts, acceptance rate, and how
often each state was visited.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from dfalab.core.types import DFA, BatchReport


@dataclass(frozen=True)
class BatchSummary:
    """Counts over one report, which is carried along in full for display."""

    total: int
    accepted: int
    rejected: int
    errored: int
    skipped: int
    report: BatchReport

    @property
    def evaluated(self) -> int:
        return self.total - self.skipped


def aggregate(report: BatchReport) -> BatchSummary:
    verdicts = [v for v in report.verdicts if v is not None]

    accepted = np.array([v.accepted for v in verdicts], dtype=bool)
    errored = np.array([v.error is not None for v in verdicts], dtype=bool)

    n_accepted = int(np.count_nonzero(accepted))
    n_errored = int(np.count_nonzero(errored))

    return BatchSummary(
        total=len(report.verdicts),
        accepted=n_accepted,
        rejected=len(verdicts) - n_accepted - n_errored,
        errored=n_errored,
        skipped=len(report.verdicts) - len(verdicts),
        report=report,
    )


def acceptance_rate(summary: BatchSummary) -> float:
    if summary.evaluated == 0:
        return 0.0
    return float(summary.accepted) / float(summary.evaluated)


def state_visit_counts(report: BatchReport, dfa: DFA) -> np.ndarray:
    """Visits per state across every trace, aligned with dfa.states."""
    counts = np.zeros(len(dfa.states), dtype=np.int64)
    for verdict in report.verdicts:
        if verdict is None:
            continue
        for state in verdict.trace:
            state_idx = dfa.state_index.get(state)
            if state_idx is None:
                raise ValueError(f"trace references unknown state: {state}")
            counts[state_idx] += 1
    return counts
