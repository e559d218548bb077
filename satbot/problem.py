"""
Structured problem description accepted by the solver.
"""

from typing import Iterable, Sequence, Tuple

from .errors import MalformedProblem


class Problem:
    """
    A CNF formula over the variables ``1..num_vars``.

    The clauses are stored as a tuple of tuples and never mutated after
    validation, so one Problem can be shared by any number of solver
    instances.

    Attributes:
        num_vars: number of variables N
        clauses: the original clauses, each a tuple of non-zero literals
    """
    __slots__ = ['_num_vars', '_clauses']

    def __init__(self, num_vars: int, clauses: Iterable[Sequence[int]]):
        if isinstance(num_vars, bool) or not isinstance(num_vars, int):
            raise MalformedProblem(f"Variable count must be an integer, got {num_vars!r}")
        if num_vars < 0:
            raise MalformedProblem(f"Variable count must be non-negative, got {num_vars}")

        validated = []
        for index, clause in enumerate(clauses):
            if isinstance(clause, (str, bytes)):
                raise MalformedProblem("Clause must be a sequence of integers", clause_index=index)
            literals = tuple(clause)
            if not literals:
                raise MalformedProblem("Empty clause", clause_index=index)
            for lit in literals:
                if isinstance(lit, bool) or not isinstance(lit, int):
                    raise MalformedProblem("Literal must be an integer", clause_index=index, literal=lit)
                if lit == 0:
                    raise MalformedProblem("Literal 0 is not allowed", clause_index=index, literal=lit)
                if abs(lit) > num_vars:
                    raise MalformedProblem(
                        f"Variable index out of range [1, {num_vars}]", clause_index=index, literal=lit
                    )
            validated.append(literals)

        self._num_vars = num_vars
        self._clauses = tuple(validated)

    @classmethod
    def from_clauses(cls, clauses: Iterable[Sequence[int]]) -> "Problem":
        '''Build a problem whose variable count is the largest variable used.'''
        clauses = [list(clause) for clause in clauses]
        num_vars = 0
        for clause in clauses:
            for lit in clause:
                if isinstance(lit, int) and not isinstance(lit, bool):
                    num_vars = max(num_vars, abs(lit))
        return cls(num_vars, clauses)

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def clauses(self) -> Tuple[Tuple[int, ...], ...]:
        return self._clauses

    @property
    def num_clauses(self) -> int:
        return len(self._clauses)

    def __eq__(self, other):
        if not isinstance(other, Problem):
            return NotImplemented
        return self._num_vars == other._num_vars and self._clauses == other._clauses

    def __hash__(self):
        return hash((self._num_vars, self._clauses))

    def __repr__(self):
        return f"Problem(num_vars={self._num_vars}, num_clauses={len(self._clauses)})"
