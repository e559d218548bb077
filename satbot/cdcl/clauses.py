from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from ..errors import Contradiction, InvariantViolation


class ClauseKind(Enum):
    ORIGINAL = "original"
    LEARNED = "learned"


class Clause:
    """
    Class used to store one clause of the clause database.

    Attributes:
        literals: the literals of the clause; literals[0] and literals[1] are watched
        kind: ClauseKind.ORIGINAL or ClauseKind.LEARNED
        activity: bumped whenever the clause takes part in conflict analysis
        lbd: number of distinct decision levels when the clause was learned
    """
    __slots__ = ['literals', 'kind', 'activity', 'lbd']

    def __init__(self, literals, kind, lbd=0):
        self.literals = literals
        self.kind = kind
        self.activity = 0.0
        self.lbd = lbd

    @property
    def learned(self):
        return self.kind is ClauseKind.LEARNED

    def __len__(self):
        return len(self.literals)

    def __repr__(self):
        return f"Clause({self.literals}, {self.kind.value})"


class ClauseStore:
    """
    Owns every original and learned clause and the watch lists.

    Clauses are referred to by ClauseRef, an integer index into the store.
    Slots of deleted clauses are never reused, so a stale reference can never
    silently point at a different clause.

    Watch lists are keyed by literal: ``watchers_of(lit)`` holds the clauses
    that watch ``-lit``, i.e. the clauses to visit once ``lit`` becomes true.
    """

    def __init__(self, num_vars: int):
        self._num_vars = num_vars
        self._clauses: List[Optional[Clause]] = []
        self._watches: Dict[int, List[int]] = {}
        for var in range(1, num_vars + 1):
            self._watches[var] = []
            self._watches[-var] = []
        self._num_learned = 0
        self._num_live = 0
        self._clause_inc = 1.0

    def add_clause(self, literals: Iterable[int], kind: ClauseKind = ClauseKind.ORIGINAL, lbd: int = 0) -> Optional[int]:
        '''
        Add a clause to the database.

        Duplicate literals are merged and the order of first occurrence is kept,
        so literals[0] and literals[1] of the input become the watched pair.

        Returns:
            the ClauseRef of the new clause, or None if the clause is a tautology
        '''
        clause_literals = []
        seen = set()
        for lit in literals:
            if -lit in seen:
                return None
            if lit not in seen:
                seen.add(lit)
                clause_literals.append(lit)

        if not clause_literals:
            raise Contradiction()

        ref = len(self._clauses)
        self._clauses.append(Clause(clause_literals, kind, lbd))
        self._num_live += 1
        if kind is ClauseKind.LEARNED:
            self._num_learned += 1

        if len(clause_literals) >= 2:
            self._watches[-clause_literals[0]].append(ref)
            self._watches[-clause_literals[1]].append(ref)

        return ref

    def get_clause(self, ref: int) -> Clause:
        '''Get the clause behind a ClauseRef.'''
        clause = self._clauses[ref] if 0 <= ref < len(self._clauses) else None
        if clause is None:
            raise KeyError(f"No clause with reference {ref}")
        return clause

    def delete_clause(self, ref: int):
        '''
        Remove a learned clause and unregister it from its watch lists.

        Must only be called between propagation rounds, never while a watch
        list is being scanned.
        '''
        clause = self.get_clause(ref)
        if not clause.learned:
            raise ValueError(f"Clause {ref} is an original clause and cannot be deleted")

        lits = clause.literals
        if len(lits) >= 2:
            self._watches[-lits[0]].remove(ref)
            self._watches[-lits[1]].remove(ref)

        self._clauses[ref] = None
        self._num_live -= 1
        self._num_learned -= 1

    def watchers_of(self, literal: int) -> List[int]:
        '''Clauses watching the complement of literal.'''
        return self._watches[literal]

    def bump_clause(self, ref: int):
        clause = self._clauses[ref]
        if clause is None or not clause.learned:
            return
        clause.activity += self._clause_inc
        if clause.activity > 1e20:
            for other in self._clauses:
                if other is not None and other.learned:
                    other.activity *= 1e-20
            self._clause_inc *= 1e-20

    def decay_clause_activity(self, decay: float):
        self._clause_inc /= decay

    def learned_refs(self) -> List[int]:
        return [ref for ref, clause in enumerate(self._clauses) if clause is not None and clause.learned]

    def original_refs(self) -> List[int]:
        return [ref for ref, clause in enumerate(self._clauses) if clause is not None and not clause.learned]

    @property
    def num_learned(self) -> int:
        return self._num_learned

    @property
    def num_vars(self) -> int:
        return self._num_vars

    def __len__(self):
        return self._num_live

    def __contains__(self, ref):
        return isinstance(ref, int) and 0 <= ref < len(self._clauses) and self._clauses[ref] is not None

    def __iter__(self) -> Iterator[int]:
        for ref, clause in enumerate(self._clauses):
            if clause is not None:
                yield ref

    def check_watches(self):
        '''
        Verify that every live clause of length >= 2 sits on exactly the watch
        lists of the complements of literals[0] and literals[1].
        '''
        expected = {}
        for ref, clause in enumerate(self._clauses):
            if clause is None or len(clause.literals) < 2:
                continue
            expected[ref] = sorted((-clause.literals[0], -clause.literals[1]))

        actual = {}
        for key, refs in self._watches.items():
            for ref in refs:
                if ref not in expected:
                    raise InvariantViolation(f"Watch list of {key} holds dead or unit clause {ref}")
                actual.setdefault(ref, []).append(key)

        for ref, keys in expected.items():
            if sorted(actual.get(ref, [])) != keys:
                raise InvariantViolation(
                    f"Clause {ref} is watched by {sorted(actual.get(ref, []))}, expected {keys}"
                )
