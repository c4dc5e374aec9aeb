"""Reading `.dfa` / `.in` files into boundary records and writing `.out` verdict files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from dfalab.core.parser import normalize_newlines
from dfalab.core.types import BatchReport, InputBatch, LoadedDefinition

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

OUTPUT_SUFFIX = ".out"
VALID = "VALID"
INVALID = "INVALID"


def _read_text(path: PathLike) -> str:
    if not Path(path).exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return normalize_newlines(f.read())
    except UnicodeDecodeError as exc:
        raise ValueError(f"{path} is not valid UTF-8 text (byte offset {exc.start})") from exc


def read_definition_file(path: PathLike) -> LoadedDefinition:
    """
    Load an automaton-definition file.

    Args:
        path: Path to a `.dfa` file

    Returns:
        LoadedDefinition with the base filename and newline-normalized content

    Raises:
        FileNotFoundError: If path does not exist
    """
    content = _read_text(path)
    logger.info("read definition %s (%d bytes)", path, len(content))
    return LoadedDefinition(filename=Path(path).name, content=content)


def read_input_file(path: PathLike) -> InputBatch:
    """
    Load an input file, one test line per text line.

    Leading and trailing whitespace of the whole file is dropped, so an empty
    file yields an empty batch. Lines themselves are kept verbatim.

    Raises:
        FileNotFoundError: If path does not exist
    """
    content = _read_text(path).strip()
    lines = tuple(content.split("\n")) if content else ()
    logger.info("read %d input line(s) from %s", len(lines), path)
    return InputBatch(filename=Path(path).name, lines=lines)


def format_output(report: BatchReport) -> str:
    if report.cancelled:
        raise ValueError("cannot format a cancelled report")
    return "".join(f"{VALID if verdict.accepted else INVALID}\n" for verdict in report.verdicts)


def output_path_for(input_path: PathLike) -> Path:
    return Path(input_path).with_suffix(OUTPUT_SUFFIX)


def write_output(report: BatchReport, path: PathLike) -> Path:
    """Write one VALID/INVALID line per verdict to `path`."""
    text = format_output(report)
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info("wrote %d verdict(s) to %s", len(report), path)
    return path
