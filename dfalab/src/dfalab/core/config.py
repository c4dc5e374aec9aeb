"""
Configuration records for dfalab: ParserConfig, ValidatorConfig, SimulationConfig, SessionConfig.

Frozen data containers validated on construction. No behavior logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParserConfig:
    """Options for reading definition text."""

    comment_marker: str = "#"

    def __post_init__(self):
        if len(self.comment_marker) != 1:
            raise ValueError("comment_marker must be a single character")
        if self.comment_marker.isspace() or self.comment_marker in ",:-+":
            raise ValueError(f"comment_marker cannot be {self.comment_marker!r}")


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Options for the validator.

    strict: treat an incomplete transition function as a load error instead of a warning.
    report_unreachable: emit a warning for every state unreachable from the start state.
    """

    strict: bool = False
    report_unreachable: bool = True


@dataclass(frozen=True)
class SimulationConfig:
    """Options for batch simulation."""

    max_workers: int = 1

    def __post_init__(self):
        if self.max_workers <= 0:
            raise ValueError("max_workers must be > 0")


@dataclass(frozen=True)
class SessionConfig:
    """All settings a Session needs, grouped."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    validator: ValidatorConfig = field(default_factory=ValidatorConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
