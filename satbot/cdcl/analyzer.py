"""
First-UIP conflict analysis.
"""

from typing import List, Tuple

from ..errors import UnsatDetected
from .clauses import ClauseStore
from .trail import Trail


class ConflictAnalyzer:
    """
    Derives a learned clause and a backtrack level from a conflicting clause.

    The implication graph is never built explicitly: the analysis walks the
    trail backward from the most recent assignment and resolves the current
    clause with the reason of every marked literal of the conflict level,
    until a single literal of that level is left (the first unique
    implication point).
    """

    def __init__(self, store: ClauseStore, trail: Trail, minimize: bool = True):
        self._store = store
        self._trail = trail
        self._minimize = minimize
        self._seen = [False] * (store.num_vars + 1)

    def analyze(self, conflict_ref: int) -> Tuple[List[int], int]:
        '''
        Analyze a conflict.

        Parameters:
            conflict_ref: ClauseRef of a clause whose literals are all false

        Returns:
            (learned clause, backtrack level); the asserting literal comes
            first and a literal of the backtrack level second

        Raises:
            UnsatDetected: the conflict happened at decision level 0
        '''
        trail = self._trail
        store = self._store
        seen = self._seen
        current_level = trail.decision_level

        if current_level == 0:
            raise UnsatDetected()

        learned = [0]
        pending = 0
        uip_var = 0
        index = len(trail) - 1
        ref = conflict_ref

        while True:
            store.bump_clause(ref)
            for lit in store.get_clause(ref).literals:
                var = abs(lit)
                if var == uip_var or seen[var]:
                    continue
                level = trail.level_of(var)
                if level == 0:
                    continue
                seen[var] = True
                if level >= current_level:
                    pending += 1
                else:
                    learned.append(lit)

            # next marked literal on the trail
            while not seen[abs(trail[index].literal)]:
                index -= 1
            uip_lit = trail[index].literal
            uip_var = abs(uip_lit)
            index -= 1
            seen[uip_var] = False
            pending -= 1
            if pending == 0:
                break
            ref = trail.reason_of(uip_var)

        learned[0] = -uip_lit

        marked = learned
        if self._minimize:
            learned = [learned[0]] + [lit for lit in learned[1:] if not self._redundant(lit)]

        for lit in marked[1:]:
            seen[abs(lit)] = False

        if len(learned) == 1:
            return learned, 0

        max_index = 1
        for i in range(2, len(learned)):
            if trail.level_of(abs(learned[i])) > trail.level_of(abs(learned[max_index])):
                max_index = i
        learned[1], learned[max_index] = learned[max_index], learned[1]

        return learned, trail.level_of(abs(learned[1]))

    def _redundant(self, lit):
        '''A literal whose reason only contains marked or level-0 literals.'''
        var = abs(lit)
        reason = self._trail.reason_of(var)
        if reason is None:
            return False
        for other in self._store.get_clause(reason).literals:
            other_var = abs(other)
            if other_var == var:
                continue
            if not self._seen[other_var] and self._trail.level_of(other_var) > 0:
                return False
        return True

    def compute_lbd(self, literals: List[int]) -> int:
        '''Number of distinct decision levels among literals.'''
        return len({self._trail.level_of(abs(lit)) for lit in literals})
