import itertools

import pytest


def _satisfies(clauses, assignment):
    return all(any(assignment[abs(lit)] == (lit > 0) for lit in clause) for clause in clauses)


def _models(num_vars, clauses):
    for values in itertools.product((False, True), repeat=num_vars):
        assignment = dict(zip(range(1, num_vars + 1), values))
        if _satisfies(clauses, assignment):
            yield assignment


@pytest.fixture
def brute_force():
    """Exhaustive satisfiability check for small problems."""
    def check(problem):
        return next(_models(problem.num_vars, problem.clauses), None) is not None
    return check


@pytest.fixture
def entails():
    """True if every model of the problem satisfies clause."""
    def check(problem, clause):
        return all(_satisfies([clause], model) for model in _models(problem.num_vars, problem.clauses))
    return check
