import random

import pytest

from satbot.cdcl.trail import Trail


def test_decisions_open_levels():
    trail = Trail(4)
    trail.push_propagated(1, None)
    assert trail.decision_level == 0
    assert trail.push_decision(-2) == 1
    trail.push_propagated(3, 7)
    assert trail.push_decision(4) == 2

    assert trail.value_of(1) is True
    assert trail.value_of(-1) is False
    assert trail.value_of(2) is False
    assert trail.level_of(3) == 1
    assert trail.reason_of(3) == 7
    assert trail.reason_of(2) is None
    assert [entry.level for entry in trail] == [0, 1, 1, 2]


def test_backtrack_restores_unassigned():
    trail = Trail(4)
    trail.push_propagated(1, None)
    trail.push_decision(-2)
    trail.push_propagated(3, 0)
    trail.push_decision(4)

    undone = trail.backtrack_to(1)
    assert undone == [4]
    assert trail.value_of(4) is None
    assert trail.level_of(4) == -1

    undone = trail.backtrack_to(0)
    assert undone == [3, -2]
    assert trail.decision_level == 0
    assert trail.assignment() == {1: True}


def test_backtrack_keeps_level_zero():
    trail = Trail(2)
    trail.push_propagated(1, None)
    assert trail.backtrack_to(0) == []
    assert trail.value_of(1) is True
    with pytest.raises(ValueError):
        trail.backtrack_to(-1)


def test_backtrack_above_current_level():
    trail = Trail(2)
    with pytest.raises(ValueError):
        trail.backtrack_to(1)


def test_double_assignment_rejected():
    trail = Trail(2)
    trail.push_decision(1)
    with pytest.raises(ValueError):
        trail.push_propagated(-1, 0)


def test_levels_stay_monotonic_under_random_operations():
    rng = random.Random(11)
    trail = Trail(30)
    for _ in range(500):
        free = [v for v in range(1, 31) if not trail.is_assigned(v)]
        action = rng.random()
        if free and action < 0.4:
            var = rng.choice(free)
            trail.push_decision(var if rng.random() < 0.5 else -var)
        elif free and action < 0.8:
            var = rng.choice(free)
            trail.push_propagated(var, 0)
        elif trail.decision_level > 0:
            trail.backtrack_to(rng.randrange(trail.decision_level))
        assert trail.levels_monotonic()
        assert len(trail.assignment()) == len(trail)
