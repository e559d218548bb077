from typing import Optional

from .clauses import ClauseStore
from .trail import Trail


class UnitPropagator:
    """
    Boolean constraint propagation over two watched literals.

    Every trail entry that has not been propagated yet is taken in order;
    only the clauses watching the complement of that literal are visited.
    """

    def __init__(self, store: ClauseStore, trail: Trail):
        self._store = store
        self._trail = trail
        self._qhead = 0
        self.propagations = 0

    def reset(self):
        '''Rewind the propagation queue after the trail shrank.'''
        if self._qhead > len(self._trail):
            self._qhead = len(self._trail)

    def propagate(self) -> Optional[int]:
        '''
        Make all implications of the unpropagated part of the trail.

        Returns:
            the ClauseRef of a conflicting clause, or None at fixpoint
        '''
        trail = self._trail
        store = self._store
        value_of = trail.value_of

        while self._qhead < len(trail):
            true_lit = trail[self._qhead].literal
            self._qhead += 1
            self.propagations += 1
            false_lit = -true_lit

            watchers = store.watchers_of(true_lit)
            n = len(watchers)
            i = j = 0
            while i < n:
                ref = watchers[i]
                i += 1
                lits = store.get_clause(ref).literals

                # keep the falsified watch in slot 1
                if lits[0] == false_lit:
                    lits[0], lits[1] = lits[1], lits[0]

                first = lits[0]
                first_value = value_of(first)
                if first_value is True:
                    watchers[j] = ref
                    j += 1
                    continue

                for k in range(2, len(lits)):
                    if value_of(lits[k]) is not False:
                        lits[1], lits[k] = lits[k], lits[1]
                        store.watchers_of(-lits[1]).append(ref)
                        break
                else:
                    watchers[j] = ref
                    j += 1
                    if first_value is False:
                        while i < n:
                            watchers[j] = watchers[i]
                            j += 1
                            i += 1
                        del watchers[j:]
                        self._qhead = len(trail)
                        return ref
                    trail.push_propagated(first, ref)

            del watchers[j:]

        return None
