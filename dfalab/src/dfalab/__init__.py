"""dfalab: deterministic finite automaton definitions, validation and batch simulation."""

__version__ = "0.1.0"
