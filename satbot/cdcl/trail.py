from typing import Dict, Iterator, List, Optional


class TrailEntry:
    """
    One assignment on the trail.

    Attributes:
        literal: the literal made true
        level: decision level at which it was assigned
        reason: ClauseRef of the clause that forced it, None for decisions
    """
    __slots__ = ['literal', 'level', 'reason']

    def __init__(self, literal, level, reason):
        self.literal = literal
        self.level = level
        self.reason = reason

    def __repr__(self):
        return f"TrailEntry({self.literal}, level={self.level}, reason={self.reason})"


class Trail:
    """
    Chronological record of every assignment, with decision-level boundaries.

    Per-variable value, level and reason are kept in flat arrays so that
    value lookups are O(1) and backtracking costs only the number of
    assignments it undoes.
    """

    def __init__(self, num_vars: int):
        self._entries: List[TrailEntry] = []
        self._limits: List[int] = []
        self._values: List[Optional[bool]] = [None] * (num_vars + 1)
        self._levels: List[int] = [-1] * (num_vars + 1)
        self._reasons: List[Optional[int]] = [None] * (num_vars + 1)

    @property
    def decision_level(self) -> int:
        return len(self._limits)

    def _assign(self, literal, reason):
        var = abs(literal)
        if self._values[var] is not None:
            raise ValueError(f"Variable {var} is already assigned")
        self._values[var] = literal > 0
        self._levels[var] = len(self._limits)
        self._reasons[var] = reason
        self._entries.append(TrailEntry(literal, len(self._limits), reason))

    def push_decision(self, literal: int) -> int:
        '''
        Open a new decision level and assign literal as its decision.

        Returns:
            the new decision level
        '''
        self._limits.append(len(self._entries))
        self._assign(literal, None)
        return len(self._limits)

    def push_propagated(self, literal: int, reason: Optional[int]):
        '''Assign a literal forced by the clause reason at the current level.'''
        self._assign(literal, reason)

    def backtrack_to(self, level: int) -> List[int]:
        '''
        Undo every assignment above level.

        Returns:
            the undone literals, most recent first
        '''
        if level < 0:
            raise ValueError("Cannot backtrack below decision level 0")
        if level > len(self._limits):
            raise ValueError(f"Cannot backtrack to level {level} from level {len(self._limits)}")
        if level == len(self._limits):
            return []

        start = self._limits[level]
        undone = []
        for entry in reversed(self._entries[start:]):
            var = abs(entry.literal)
            self._values[var] = None
            self._levels[var] = -1
            self._reasons[var] = None
            undone.append(entry.literal)

        del self._entries[start:]
        del self._limits[level:]
        return undone

    def value_of(self, literal: int) -> Optional[bool]:
        value = self._values[abs(literal)]
        if value is None:
            return None
        return value if literal > 0 else not value

    def is_assigned(self, var: int) -> bool:
        return self._values[var] is not None

    def level_of(self, var: int) -> int:
        return self._levels[var]

    def reason_of(self, var: int) -> Optional[int]:
        return self._reasons[var]

    def assignment(self) -> Dict[int, bool]:
        return {abs(entry.literal): entry.literal > 0 for entry in self._entries}

    def levels_monotonic(self) -> bool:
        '''Check that decision levels never decrease along the trail.'''
        previous = 0
        for entry in self._entries:
            if entry.level < previous:
                return False
            previous = entry.level
        return True

    def __len__(self):
        return len(self._entries)

    def __getitem__(self, index) -> TrailEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[TrailEntry]:
        return iter(self._entries)
