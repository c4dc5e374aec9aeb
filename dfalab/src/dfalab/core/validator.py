from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import networkx as nx

from dfalab.core.config import ValidatorConfig
from dfalab.core.errors import ValidationIssue, ValidationKind
from dfalab.core.types import DFA, DraftAutomaton

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()


def _check_states(draft: DraftAutomaton) -> list[ValidationIssue]:
    if draft.states:
        return []
    return [ValidationIssue(ValidationKind.EMPTY_STATES, "no states declared")]


def _check_alphabet(draft: DraftAutomaton) -> list[ValidationIssue]:
    if draft.alphabet:
        return []
    return [ValidationIssue(ValidationKind.EMPTY_ALPHABET, "no alphabet declared")]


def _check_start(draft: DraftAutomaton) -> list[ValidationIssue]:
    if draft.start is None:
        return [ValidationIssue(ValidationKind.INVALID_START, "no start state declared")]
    if draft.start not in draft.states:
        return [
            ValidationIssue(
                ValidationKind.INVALID_START,
                f"start state {draft.start!r} is not a declared state",
                state=draft.start,
            )
        ]
    return []


def _check_accepting(draft: DraftAutomaton) -> list[ValidationIssue]:
    state_set = set(draft.states)
    return [
        ValidationIssue(
            ValidationKind.INVALID_ACCEPTING,
            f"accepting state {state!r} is not a declared state",
            state=state,
        )
        for state in draft.accepting
        if state not in state_set
    ]


def _check_endpoints(draft: DraftAutomaton) -> list[ValidationIssue]:
    state_set = set(draft.states)
    alphabet_set = set(draft.alphabet)
    issues: list[ValidationIssue] = []
    for rule in draft.transitions:
        if rule.source not in state_set:
            issues.append(
                ValidationIssue(
                    ValidationKind.INVALID_TRANSITION_ENDPOINT,
                    f"transition source {rule.source!r} is not a declared state",
                    state=rule.source,
                    line_number=rule.line_number,
                )
            )
        if rule.symbol not in alphabet_set:
            issues.append(
                ValidationIssue(
                    ValidationKind.INVALID_TRANSITION_ENDPOINT,
                    f"transition symbol {rule.symbol!r} is not in the alphabet",
                    symbol=rule.symbol,
                    line_number=rule.line_number,
                )
            )
        if rule.target not in state_set:
            issues.append(
                ValidationIssue(
                    ValidationKind.INVALID_TRANSITION_ENDPOINT,
                    f"transition target {rule.target!r} is not a declared state",
                    state=rule.target,
                    line_number=rule.line_number,
                )
            )
    return issues


def _check_determinism(draft: DraftAutomaton) -> list[ValidationIssue]:
    seen: dict[tuple[str, str], str] = {}
    issues: list[ValidationIssue] = []
    for rule in draft.transitions:
        key = (rule.source, rule.symbol)
        if key not in seen:
            seen[key] = rule.target
        elif seen[key] != rule.target:
            issues.append(
                ValidationIssue(
                    ValidationKind.NON_DETERMINISTIC_TRANSITION,
                    f"state {rule.source!r} on symbol {rule.symbol!r} goes to both "
                    f"{seen[key]!r} and {rule.target!r}",
                    state=rule.source,
                    symbol=rule.symbol,
                    line_number=rule.line_number,
                )
            )
    return issues


def _check_completeness(draft: DraftAutomaton) -> list[ValidationIssue]:
    defined = {(rule.source, rule.symbol) for rule in draft.transitions}
    return [
        ValidationIssue(
            ValidationKind.INCOMPLETE_AUTOMATON,
            f"no transition from state {state!r} on symbol {symbol!r}",
            state=state,
            symbol=symbol,
        )
        for state in draft.states
        for symbol in draft.alphabet
        if (state, symbol) not in defined
    ]


def _check_reachability(draft: DraftAutomaton) -> list[ValidationIssue]:
    graph = nx.DiGraph()
    graph.add_nodes_from(draft.states)
    graph.add_edges_from((rule.source, rule.target) for rule in draft.transitions)
    reachable = nx.descendants(graph, draft.start) | {draft.start}
    return [
        ValidationIssue(
            ValidationKind.UNREACHABLE_STATE,
            f"state {state!r} is unreachable from the start state",
            state=state,
        )
        for state in draft.states
        if state not in reachable
    ]


# Hard checks, in reporting order. The first one that finds anything wins.
_ERROR_CHECKS: tuple[Callable[[DraftAutomaton], list[ValidationIssue]], ...] = (
    _check_states,
    _check_alphabet,
    _check_start,
    _check_accepting,
    _check_endpoints,
    _check_determinism,
)


def validate(draft: DraftAutomaton, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """
    Check a parsed draft for structural well-formedness and completeness.

    Errors short-circuit: only the issues of the first failing check are
    reported. Incompleteness is a warning unless config.strict is set.
    """
    config = ValidatorConfig() if config is None else config

    for check in _ERROR_CHECKS:
        errors = check(draft)
        if errors:
            logger.debug("validation failed at %s with %d issue(s)", check.__name__, len(errors))
            return ValidationResult(ok=False, errors=tuple(errors))

    missing = _check_completeness(draft)
    if missing and config.strict:
        return ValidationResult(ok=False, errors=tuple(missing))

    warnings = list(missing)
    if config.report_unreachable:
        warnings.extend(_check_reachability(draft))

    for warning in warnings:
        logger.info("validation warning: %s", warning)
    return ValidationResult(ok=True, warnings=tuple(warnings))


def build_dfa(draft: DraftAutomaton) -> DFA:
    """Freeze a draft that has passed validation."""
    transitions = {(rule.source, rule.symbol): rule.target for rule in draft.transitions}
    return DFA(
        states=tuple(dict.fromkeys(draft.states)),
        alphabet=tuple(dict.fromkeys(draft.alphabet)),
        transitions=transitions,
        start=draft.start,
        accepting=frozenset(draft.accepting),
    )
