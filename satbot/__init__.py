"""
sat-bot: a CDCL SAT solver behind a small command-style bot interface.

Typical use::

    from satbot import solve
    result = solve(3, [[1, 2, 3], [-1, -2], [-2, -3], [-1, -3]])
    if result.is_sat:
        print(result.assignment)
"""

from .cdcl import CdclSolver, SearchState, solve
from .config import SolverConfig, load_configs
from .errors import (
    SatBotError, MalformedProblem, DimacsError, Contradiction, UnsatDetected,
    InvariantViolation, ConfigError, InvalidCommandError
)
from .problem import Problem
from .results import Aborted, Satisfiable, SolverStats, SolveStatus, Unsatisfiable
from .verify import check_assignment, unsatisfied_clauses

__version__ = "0.1.0"

__all__ = [
    # Solver
    'CdclSolver',
    'SearchState',
    'solve',

    # Problem and results
    'Problem',
    'Satisfiable',
    'Unsatisfiable',
    'Aborted',
    'SolveStatus',
    'SolverStats',

    # Configuration
    'SolverConfig',
    'load_configs',

    # Verification
    'check_assignment',
    'unsatisfied_clauses',

    # Errors
    'SatBotError',
    'MalformedProblem',
    'DimacsError',
    'Contradiction',
    'UnsatDetected',
    'InvariantViolation',
    'ConfigError',
    'InvalidCommandError',
]
