"""
Model checking against the original clauses of a problem.
"""

from typing import List, Mapping, Sequence

from .problem import Problem


def _satisfied(clause: Sequence[int], assignment: Mapping[int, bool]) -> bool:
    # variables missing from the assignment make none of their literals true
    return any(assignment.get(abs(lit)) == (lit > 0) for lit in clause)


def unsatisfied_clauses(problem: Problem, assignment: Mapping[int, bool]) -> List[int]:
    '''Indices of the clauses with no true literal under assignment.'''
    return [index for index, clause in enumerate(problem.clauses) if not _satisfied(clause, assignment)]


def check_assignment(problem: Problem, assignment: Mapping[int, bool]) -> bool:
    '''Check that every clause has at least one true literal.'''
    return all(_satisfied(clause, assignment) for clause in problem.clauses)
