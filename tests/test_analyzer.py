import pytest

from satbot.cdcl.analyzer import ConflictAnalyzer
from satbot.cdcl.clauses import ClauseStore
from satbot.cdcl.propagator import UnitPropagator
from satbot.cdcl.trail import Trail
from satbot.errors import UnsatDetected


def setup(num_vars, clauses, minimize=True):
    store = ClauseStore(num_vars)
    for clause in clauses:
        store.add_clause(clause)
    trail = Trail(num_vars)
    return store, trail, UnitPropagator(store, trail), ConflictAnalyzer(store, trail, minimize)


def test_first_uip_clause():
    store, trail, propagator, analyzer = setup(5, [[-5, -1, 2], [-1, 3], [-2, -3]])
    trail.push_decision(5)
    assert propagator.propagate() is None
    trail.push_decision(1)
    conflict = propagator.propagate()
    assert conflict is not None

    learned, level = analyzer.analyze(conflict)
    assert learned == [-1, -5]
    assert level == 1
    assert analyzer.compute_lbd(learned) == 2


def test_single_decision_learns_unit():
    store, trail, propagator, analyzer = setup(4, [[-1, 2], [-1, 3], [-2, -3, 4], [-2, -3, -4]])
    trail.push_decision(1)
    conflict = propagator.propagate()
    assert conflict is not None

    learned, level = analyzer.analyze(conflict)
    assert learned == [-1]
    assert level == 0


def make_redundant_conflict(minimize):
    store, trail, propagator, analyzer = setup(
        4, [[-1, 2], [-3, -1, -2, 4], [-3, -4, -2]], minimize)
    trail.push_decision(1)
    assert propagator.propagate() is None
    trail.push_decision(3)
    conflict = propagator.propagate()
    assert conflict is not None
    return analyzer.analyze(conflict)


def test_minimization_drops_implied_literal():
    learned, level = make_redundant_conflict(minimize=True)
    assert learned == [-3, -1]
    assert level == 1


def test_without_minimization():
    learned, level = make_redundant_conflict(minimize=False)
    assert learned[0] == -3
    assert sorted(learned[1:]) == [-2, -1]
    assert level == 1


def test_conflict_at_level_zero():
    store, trail, propagator, analyzer = setup(2, [[1, 2], [1, -2]])
    trail.push_propagated(-1, None)
    conflict = propagator.propagate()
    assert conflict is not None
    with pytest.raises(UnsatDetected):
        analyzer.analyze(conflict)


def test_seen_marks_are_cleared():
    store, trail, propagator, analyzer = setup(5, [[-5, -1, 2], [-1, 3], [-2, -3]])
    trail.push_decision(5)
    propagator.propagate()
    trail.push_decision(1)
    analyzer.analyze(propagator.propagate())
    assert not any(analyzer._seen)
