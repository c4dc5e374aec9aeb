"""Report serialization: JSON save/load and a pandas table view."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from dfalab.core.errors import SimulationError, SimulationErrorKind
from dfalab.core.types import BatchReport, InputBatch, Verdict


def verdict_to_dict(verdict: Optional[Verdict]) -> Optional[dict]:
    if verdict is None:
        return None
    error = None
    if verdict.error is not None:
        error = {
            "kind": verdict.error.kind.value,
            "symbol": verdict.error.symbol,
            "position": verdict.error.position,
            "state": verdict.error.state,
            "message": verdict.error.message,
        }
    return {"accepted": verdict.accepted, "trace": list(verdict.trace), "error": error}


def verdict_from_dict(data: Optional[dict]) -> Optional[Verdict]:
    if data is None:
        return None
    error = None
    if data.get("error") is not None:
        raw = data["error"]
        error = SimulationError(
            SimulationErrorKind(raw["kind"]),
            symbol=raw["symbol"],
            position=raw["position"],
            state=raw.get("state"),
        )
    return Verdict(accepted=data["accepted"], trace=tuple(data["trace"]), error=error)


def report_to_dict(report: BatchReport) -> dict:
    return {
        "filename": report.filename,
        "cancelled": report.cancelled,
        "verdicts": [verdict_to_dict(v) for v in report.verdicts],
    }


def report_from_dict(data: dict) -> BatchReport:
    return BatchReport(
        filename=data["filename"],
        verdicts=tuple(verdict_from_dict(v) for v in data["verdicts"]),
        cancelled=data.get("cancelled", False),
    )


def save_report_json(report: BatchReport, path: Union[str, Path]) -> None:
    with open(path, "w") as f:
        json.dump(report_to_dict(report), f, indent=2)


def load_report_json(path: Union[str, Path]) -> BatchReport:
    """
    Load a report written by save_report_json.

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not Path(path).exists():
        raise FileNotFoundError(f"Report file not found: {path}")

    with open(path, "r") as f:
        return report_from_dict(json.load(f))


def _status(verdict: Optional[Verdict]) -> str:
    if verdict is None:
        return "skipped"
    if verdict.error is not None:
        return "error"
    return "accepted" if verdict.accepted else "rejected"


def report_to_frame(report: BatchReport, batch: Optional[InputBatch] = None) -> pd.DataFrame:
    """One row per input line; the `input` column is filled when the batch is given."""
    if batch is not None and len(batch) != len(report):
        raise ValueError("batch and report must have the same number of lines")

    rows = []
    for idx, verdict in enumerate(report.verdicts):
        rows.append(
            {
                "line": idx + 1,
                "input": batch.lines[idx] if batch is not None else None,
                "status": _status(verdict),
                "accepted": None if verdict is None else verdict.accepted,
                "final_state": None if verdict is None else verdict.final_state,
                "trace": None if verdict is None else " ".join(verdict.trace),
                "error": None if verdict is None or verdict.error is None else verdict.error.message,
            }
        )
    return pd.DataFrame(
        rows,
        columns=["line", "input", "status", "accepted", "final_state", "trace", "error"],
    )
