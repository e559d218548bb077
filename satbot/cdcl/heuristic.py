from typing import Iterable, List, Optional

from .PriorityQueue import PriorityQueue
from .trail import Trail


class VsidsHeuristic:
    """
    Variable State Independent Decaying Sum branching with phase saving.

    Variables live in an indexed max-heap keyed by activity. Assigned
    variables are only dropped from the heap when they reach the top, and go
    back in when backtracking unassigns them.

    Decay is implemented by growing the bump increment by 1 / var_decay after
    each conflict instead of touching every score; scores and increment are
    rescaled together once they get too large.
    """

    RESCALE_LIMIT = 1e100

    def __init__(self, num_vars: int, trail: Trail, var_decay: float = 0.95,
                 polarity: str = "negative", phase_saving: bool = True):
        self._trail = trail
        self._queue = PriorityQueue([0.0] * (num_vars + 1))
        self._inc = 1.0
        self._var_decay = var_decay
        self._default_phase = polarity == "positive"
        self._phase_saving = phase_saving
        self._phase: List[Optional[bool]] = [None] * (num_vars + 1)

    def pick_branch_literal(self) -> Optional[int]:
        '''
        Choose the unassigned variable with highest activity and its polarity.

        Returns:
            the literal to branch on, or None if all variables are assigned
        '''
        while True:
            var = self._queue.get_top()
            if var == -1:
                return None
            if not self._trail.is_assigned(var):
                break

        value = self._default_phase
        if self._phase_saving and self._phase[var] is not None:
            value = self._phase[var]
        return var if value else -var

    def bump(self, variables: Iterable[int]):
        for var in variables:
            self._queue.increase_update(var, self._inc)
            if self._queue.priority(var) > self.RESCALE_LIMIT:
                self._queue.scale(1 / self.RESCALE_LIMIT)
                self._inc /= self.RESCALE_LIMIT

    def decay(self):
        self._inc /= self._var_decay

    def on_unassigned(self, literal: int):
        var = abs(literal)
        self._phase[var] = literal > 0
        self._queue.add(var)

    def activity(self, var: int) -> float:
        return self._queue.priority(var)
