"""
Tests for dfalab.core.validator: check order, short-circuiting, warnings, and strict mode.
"""

import pytest

from dfalab.core.config import ValidatorConfig
from dfalab.core.errors import ValidationKind
from dfalab.core.types import DraftAutomaton, DraftTransition
from dfalab.core.validator import build_dfa, validate


def _draft(**overrides):
    fields = dict(
        states=["q0", "q1"],
        alphabet=["a", "b"],
        start="q0",
        accepting=["q1"],
        transitions=[
            DraftTransition("q0", "a", "q1", 1),
            DraftTransition("q0", "b", "q0", 2),
            DraftTransition("q1", "a", "q1", 3),
            DraftTransition("q1", "b", "q0", 4),
        ],
    )
    fields.update(overrides)
    return DraftAutomaton(**fields)


class TestValidDrafts:
    def test_complete_draft_ok(self):
        result = validate(_draft())
        assert result.ok
        assert result.errors == ()
        assert result.warnings == ()

    def test_build_dfa(self, ab_dfa):
        assert build_dfa(_draft()) == ab_dfa

    def test_exact_duplicate_rule_tolerated(self):
        transitions = _draft().transitions + [DraftTransition("q0", "a", "q1", 5)]
        assert validate(_draft(transitions=transitions)).ok


class TestErrorChecks:
    """Each hard check, one at a time."""

    def test_empty_states(self):
        result = validate(_draft(states=[]))
        assert not result.ok
        assert [e.kind for e in result.errors] == [ValidationKind.EMPTY_STATES]

    def test_empty_alphabet(self):
        result = validate(_draft(alphabet=[]))
        assert [e.kind for e in result.errors] == [ValidationKind.EMPTY_ALPHABET]

    def test_missing_start(self):
        result = validate(_draft(start=None))
        assert [e.kind for e in result.errors] == [ValidationKind.INVALID_START]

    def test_undeclared_start(self):
        result = validate(_draft(start="q7"))
        assert result.errors[0].kind is ValidationKind.INVALID_START
        assert result.errors[0].state == "q7"

    def test_invalid_accepting(self):
        result = validate(_draft(accepting=["q1", "q8", "q9"]))
        assert [e.state for e in result.errors] == ["q8", "q9"]
        assert all(e.kind is ValidationKind.INVALID_ACCEPTING for e in result.errors)

    def test_invalid_transition_endpoints(self):
        transitions = _draft().transitions + [DraftTransition("qx", "c", "qy", 9)]
        result = validate(_draft(transitions=transitions))
        assert not result.ok
        assert len(result.errors) == 3
        assert all(e.kind is ValidationKind.INVALID_TRANSITION_ENDPOINT for e in result.errors)
        assert [e.line_number for e in result.errors] == [9, 9, 9]
        assert result.errors[0].state == "qx"
        assert result.errors[1].symbol == "c"
        assert result.errors[2].state == "qy"

    def test_non_deterministic(self):
        transitions = _draft().transitions + [DraftTransition("q0", "a", "q0", 5)]
        result = validate(_draft(transitions=transitions))
        assert [e.kind for e in result.errors] == [ValidationKind.NON_DETERMINISTIC_TRANSITION]
        err = result.errors[0]
        assert (err.state, err.symbol, err.line_number) == ("q0", "a", 5)
        assert "'q1'" in err.message and "'q0'" in err.message


class TestShortCircuit:
    """Only the first failing check is reported."""

    def test_empty_states_hides_later_failures(self):
        result = validate(DraftAutomaton())
        assert [e.kind for e in result.errors] == [ValidationKind.EMPTY_STATES]

    def test_start_reported_before_accepting(self):
        result = validate(_draft(start="q9", accepting=["q9"]))
        assert [e.kind for e in result.errors] == [ValidationKind.INVALID_START]

    def test_endpoint_reported_before_nondeterminism(self):
        transitions = _draft().transitions + [
            DraftTransition("q0", "a", "q0", 5),
            DraftTransition("q0", "z", "q0", 6),
        ]
        result = validate(_draft(transitions=transitions))
        assert {e.kind for e in result.errors} == {ValidationKind.INVALID_TRANSITION_ENDPOINT}

    def test_deterministic_output(self):
        draft = _draft(accepting=["x", "y", "z"])
        assert validate(draft) == validate(draft)


class TestWarnings:
    def test_incomplete_is_warning_by_default(self):
        result = validate(_draft(transitions=_draft().transitions[:3]))
        assert result.ok
        assert [(w.kind, w.state, w.symbol) for w in result.warnings] == [
            (ValidationKind.INCOMPLETE_AUTOMATON, "q1", "b")
        ]

    def test_incomplete_is_error_when_strict(self):
        result = validate(_draft(transitions=_draft().transitions[:3]), ValidatorConfig(strict=True))
        assert not result.ok
        assert result.errors[0].kind is ValidationKind.INCOMPLETE_AUTOMATON
        assert result.warnings == ()

    def test_unreachable_state_warning(self):
        draft = _draft(
            states=["q0", "q1", "q2"],
            alphabet=["a"],
            transitions=[
                DraftTransition("q0", "a", "q1"),
                DraftTransition("q1", "a", "q0"),
                DraftTransition("q2", "a", "q0"),
            ],
        )
        result = validate(draft)
        assert result.ok
        assert [(w.kind, w.state) for w in result.warnings] == [(ValidationKind.UNREACHABLE_STATE, "q2")]

    def test_unreachable_warning_can_be_disabled(self):
        draft = _draft(
            states=["q0", "q1", "q2"],
            alphabet=["a"],
            transitions=[
                DraftTransition("q0", "a", "q0"),
                DraftTransition("q1", "a", "q1"),
                DraftTransition("q2", "a", "q2"),
            ],
        )
        assert len(validate(draft).warnings) == 2
        assert validate(draft, ValidatorConfig(report_unreachable=False)).warnings == ()

    @pytest.mark.parametrize("strict", [False, True])
    def test_complete_draft_same_under_both_policies(self, strict):
        assert validate(_draft(), ValidatorConfig(strict=strict)).ok
