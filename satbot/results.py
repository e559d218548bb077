"""
Result types returned by a solve.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class SolveStatus(Enum):
    """Definitive classification of a finished solve."""
    SAT = "SATISFIABLE"
    UNSAT = "UNSATISFIABLE"
    ABORTED = "UNKNOWN"


@dataclass
class SolverStats:
    """Counters collected during one solve."""
    decisions: int = 0
    propagations: int = 0
    conflicts: int = 0
    restarts: int = 0
    reductions: int = 0
    learned: int = 0
    deleted: int = 0
    elapsed: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "decisions": self.decisions,
            "propagations": self.propagations,
            "conflicts": self.conflicts,
            "restarts": self.restarts,
            "reductions": self.reductions,
            "learned": self.learned,
            "deleted": self.deleted,
            "elapsed": self.elapsed,
        }


@dataclass(frozen=True)
class Satisfiable:
    """
    The problem has a model.

    Attributes:
        assignment: mapping of every variable 1..N to its value
        stats: counters of the solve that produced the model
    """
    assignment: Dict[int, bool]
    stats: SolverStats = field(default_factory=SolverStats, compare=False)

    status = SolveStatus.SAT
    is_sat = True

    def model(self):
        '''The model as a sorted list of signed literals.'''
        return [var if value else -var for var, value in sorted(self.assignment.items())]


@dataclass(frozen=True)
class Unsatisfiable:
    """The problem has no model."""
    stats: SolverStats = field(default_factory=SolverStats, compare=False)

    status = SolveStatus.UNSAT
    is_sat = False


@dataclass(frozen=True)
class Aborted:
    """The solve was cancelled before a verdict was reached."""
    reason: str
    stats: SolverStats = field(default_factory=SolverStats, compare=False)

    status = SolveStatus.ABORTED
    is_sat = False
