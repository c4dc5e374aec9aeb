"""
Pytest configuration and fixtures for dfalab tests.

Provides the reference two-state DFA, in both definition formats, and input files on disk.
"""

import matplotlib

matplotlib.use("Agg")

import pytest


AB_DEFINITION = """\
# ends in 'a'
states: q0, q1
alphabet: a, b
start: q0
accept: q1

q0, a -> q1
q0, b -> q0
q1, a -> q1
q1, b -> q0
"""

# Same language as AB_DEFINITION, in the comma-separated table layout (states A, B).
AB_TABLE = """\
a,b
-,A,B,A
+,B,B,A
"""


@pytest.fixture
def ab_definition():
    """Keyword-format definition of the 'ends in a' automaton."""
    return AB_DEFINITION


@pytest.fixture
def ab_table():
    """Table-format definition of the 'ends in a' automaton."""
    return AB_TABLE


@pytest.fixture
def ab_dfa():
    """The 'ends in a' automaton built directly."""
    from dfalab.core.types import DFA

    return DFA(
        states=("q0", "q1"),
        alphabet=("a", "b"),
        transitions={
            ("q0", "a"): "q1",
            ("q0", "b"): "q0",
            ("q1", "a"): "q1",
            ("q1", "b"): "q0",
        },
        start="q0",
        accepting=frozenset({"q1"}),
    )


@pytest.fixture
def partial_dfa():
    """
    Incomplete automaton: q1 has no transition on 'b'.

    Accepts strings of a's of length >= 1.
    """
    from dfalab.core.types import DFA

    return DFA(
        states=("q0", "q1"),
        alphabet=("a", "b"),
        transitions={("q0", "a"): "q1", ("q0", "b"): "q0", ("q1", "a"): "q1"},
        start="q0",
        accepting=frozenset({"q1"}),
    )


@pytest.fixture
def definition_file(tmp_path):
    """The keyword-format definition written to disk with Windows newlines."""
    path = tmp_path / "ends_in_a.dfa"
    path.write_bytes(AB_DEFINITION.replace("\n", "\r\n").encode("utf-8"))
    return path


@pytest.fixture
def input_file(tmp_path):
    """Four input lines, including one with a symbol outside the alphabet."""
    path = tmp_path / "cases.in"
    path.write_bytes(b"a\r\nab\r\nbba\r\nac\r\n")
    return path
