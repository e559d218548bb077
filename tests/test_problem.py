import pytest

from satbot import MalformedProblem, Problem, check_assignment, unsatisfied_clauses
from satbot.formula import pigeonhole, random_ksat


def test_problem_is_immutable_copy():
    clauses = [[1, -2], [2]]
    problem = Problem(2, clauses)
    clauses[0].append(3)
    assert problem.clauses == ((1, -2), (2,))
    assert problem.num_clauses == 2


def test_from_clauses_infers_variable_count():
    problem = Problem.from_clauses([[1, -4], [2]])
    assert problem.num_vars == 4


def test_equality():
    assert Problem(2, [[1, 2]]) == Problem(2, [(1, 2)])
    assert Problem(2, [[1, 2]]) != Problem(3, [[1, 2]])
    assert len({Problem(2, [[1, 2]]), Problem(2, [[1, 2]])}) == 1


def test_error_details():
    with pytest.raises(MalformedProblem) as excinfo:
        Problem(2, [[1], [1, 3]])
    assert excinfo.value.clause_index == 1
    assert excinfo.value.literal == 3
    assert "clause=1" in str(excinfo.value)
    assert "literal=3" in str(excinfo.value)


def test_string_clause_rejected():
    with pytest.raises(MalformedProblem):
        Problem(1, ["1"])


def test_unsatisfied_clauses():
    problem = Problem(3, [[1, 2], [-1], [3]])
    assert unsatisfied_clauses(problem, {1: True, 2: False, 3: True}) == [1]
    assert unsatisfied_clauses(problem, {1: False, 2: True}) == [2]
    assert not check_assignment(problem, {1: False, 2: True})
    assert check_assignment(problem, {1: False, 2: True, 3: True})


def test_random_ksat_is_reproducible():
    first = random_ksat(10, 30, k=3, seed=42)
    second = random_ksat(10, 30, k=3, seed=42)
    assert first == second
    assert all(len({abs(lit) for lit in clause}) == 3 for clause in first.clauses)


def test_random_ksat_rejects_long_clauses():
    with pytest.raises(ValueError):
        random_ksat(2, 5, k=3)


def test_pigeonhole_shape():
    problem = pigeonhole(3, 2)
    assert problem.num_vars == 6
    # three "at least one hole" clauses plus three pairs per hole
    assert problem.num_clauses == 3 + 2 * 3
    assert problem.clauses[0] == (1, 2)


def test_pigeonhole_needs_a_hole():
    with pytest.raises(ValueError):
        pigeonhole(1, 0)
