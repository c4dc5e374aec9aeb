"""
Definition parser: raw automaton-definition text -> validated DFA.

Two line-oriented formats are understood, chosen by the first significant line:
- keyword format: `states:`, `alphabet:`, `start:`, `accept:` declarations plus
  `source, symbol -> target` rules, in any order
- table format: an alphabet line (`a,b`) followed by `marker,state,next...` rows,
  one target column per symbol; marker `-` is start, `+` accepting

Blank lines and comment lines are skipped. Parsing either returns a fully
validated DFA or raises ParseError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from dfalab.core.config import ParserConfig, ValidatorConfig
from dfalab.core.errors import ParseError, ParseErrorKind, ValidationIssue, ValidationKind
from dfalab.core.types import DFA, DraftAutomaton, DraftTransition
from dfalab.core.validator import ValidationResult, build_dfa, validate

logger = logging.getLogger(__name__)

_DECLARATION = re.compile(r"^([A-Za-z_]+)\s*:(.*)$")
_ITEM_SEPARATOR = re.compile(r"[,\s]+")

_KEYWORDS = {
    "states": "states",
    "alphabet": "alphabet",
    "start": "start",
    "accept": "accept",
    "accepting": "accept",
    "final": "accept",
}

_START_MARKERS = {"-", "-+", "+-"}
_ACCEPT_MARKERS = {"+", "-+", "+-"}


@dataclass(frozen=True)
class ParseOutcome:
    """A successfully loaded DFA together with the validator's warnings."""

    dfa: DFA
    warnings: tuple[ValidationIssue, ...] = ()


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _significant_lines(raw_content: str, comment_marker: str) -> Iterator[tuple[int, str]]:
    for line_number, raw_line in enumerate(normalize_newlines(raw_content).split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith(comment_marker):
            continue
        yield line_number, line


def _split_items(text: str) -> list[str]:
    return [item for item in _ITEM_SEPARATOR.split(text.strip()) if item]


def _add_unique(target: list, items: list[str], what: str, line_number: int, line: str) -> None:
    for item in items:
        if item in target:
            raise ParseError.malformed(line_number, line, f"duplicate {what} {item!r}")
        target.append(item)


def _parse_declaration(draft: DraftAutomaton, keyword: str, body: str, line_number: int, line: str) -> None:
    items = _split_items(body)
    if keyword == "states":
        _add_unique(draft.states, items, "state", line_number, line)
    elif keyword == "alphabet":
        for symbol in items:
            if len(symbol) != 1:
                raise ParseError.malformed(line_number, line, f"alphabet symbol {symbol!r} is not a single character")
        _add_unique(draft.alphabet, items, "symbol", line_number, line)
    elif keyword == "start":
        if draft.start is not None:
            raise ParseError.malformed(line_number, line, "multiple start states declared")
        if len(items) != 1:
            raise ParseError.malformed(line_number, line, "start declaration needs exactly one state")
        draft.start = items[0]
    else:
        _add_unique(draft.accepting, items, "accepting state", line_number, line)


def _parse_rule(line_number: int, line: str) -> DraftTransition:
    left, arrow, right = line.partition("->")
    if not arrow:
        raise ParseError.malformed(line_number, line, "unrecognized line")
    source_and_symbol = _split_items(left)
    target = _split_items(right)
    if len(source_and_symbol) != 2 or len(target) != 1:
        raise ParseError.malformed(line_number, line, "transition must read 'source, symbol -> target'")
    source, symbol = source_and_symbol
    return DraftTransition(source=source, symbol=symbol, target=target[0], line_number=line_number)


def _parse_keyword_format(lines: list[tuple[int, str]]) -> DraftAutomaton:
    draft = DraftAutomaton()
    for line_number, line in lines:
        # Rules first: ":" is a legal symbol, so "A : -> B" must not read as a declaration.
        match = None if "->" in line else _DECLARATION.match(line)
        if match is None:
            draft.transitions.append(_parse_rule(line_number, line))
            continue
        keyword = _KEYWORDS.get(match.group(1).lower())
        if keyword is None:
            raise ParseError.malformed(line_number, line, f"unknown declaration {match.group(1)!r}")
        _parse_declaration(draft, keyword, match.group(2), line_number, line)
    return draft


def _parse_table_format(lines: list[tuple[int, str]]) -> DraftAutomaton:
    draft = DraftAutomaton()
    header_number, header = lines[0]
    symbols = [item.strip() for item in header.split(",")]
    for symbol in symbols:
        if len(symbol) != 1:
            raise ParseError.malformed(header_number, header, f"alphabet symbol {symbol!r} is not a single character")
    _add_unique(draft.alphabet, symbols, "symbol", header_number, header)

    n_columns = 2 + len(symbols)
    for line_number, line in lines[1:]:
        cols = [col.strip() for col in line.split(",")]
        if len(cols) != n_columns:
            raise ParseError.malformed(line_number, line, f"expected {n_columns} columns, found {len(cols)}")

        marker, state, targets = cols[0], cols[1], cols[2:]
        if len(marker) > 1 and marker not in _START_MARKERS:
            raise ParseError.malformed(line_number, line, f"unknown state marker {marker!r}")
        if not state:
            raise ParseError.malformed(line_number, line, "missing state name")
        _add_unique(draft.states, [state], "state", line_number, line)

        if marker in _START_MARKERS:
            if draft.start is not None:
                raise ParseError.malformed(line_number, line, "multiple start states declared")
            draft.start = state
        if marker in _ACCEPT_MARKERS:
            draft.accepting.append(state)

        for symbol, target in zip(symbols, targets):
            # An empty cell leaves the transition undefined.
            if target:
                draft.transitions.append(DraftTransition(state, symbol, target, line_number))
    return draft


def parse_draft(raw_content: str, config: Optional[ParserConfig] = None) -> DraftAutomaton:
    """Accumulate definition text into a draft without validating it."""
    config = ParserConfig() if config is None else config
    lines = list(_significant_lines(raw_content, config.comment_marker))
    if not lines:
        return DraftAutomaton()

    first = lines[0][1]
    if ":" in first or "->" in first:
        draft = _parse_keyword_format(lines)
    else:
        draft = _parse_table_format(lines)

    logger.debug(
        "parsed draft: %d states, %d symbols, %d transitions",
        len(draft.states),
        len(draft.alphabet),
        len(draft.transitions),
    )
    return draft


def parse_definition(
    raw_content: str,
    parser_config: Optional[ParserConfig] = None,
    validator_config: Optional[ValidatorConfig] = None,
) -> ParseOutcome:
    draft = parse_draft(raw_content, parser_config)
    result = validate(draft, validator_config)
    if not result.ok:
        raise ParseError.invalid(result.errors)
    return ParseOutcome(dfa=build_dfa(draft), warnings=result.warnings)


def parse(
    raw_content: str,
    parser_config: Optional[ParserConfig] = None,
    validator_config: Optional[ValidatorConfig] = None,
) -> DFA:
    return parse_definition(raw_content, parser_config, validator_config).dfa


def check_syntax(
    raw_content: str,
    parser_config: Optional[ParserConfig] = None,
    validator_config: Optional[ValidatorConfig] = None,
) -> ValidationResult:
    """Parse and validate without raising; a malformed line becomes a single error."""
    try:
        draft = parse_draft(raw_content, parser_config)
    except ParseError as exc:
        if exc.kind is not ParseErrorKind.MALFORMED_LINE:
            raise
        issue = ValidationIssue(
            ValidationKind.MALFORMED_LINE,
            f"{exc.detail}: {exc.raw_text!r}",
            line_number=exc.line_number,
        )
        return ValidationResult(ok=False, errors=(issue,))
    return validate(draft, validator_config)
