import logging
import time
from enum import Enum, auto
from typing import Iterable, Optional, Sequence, Union

from ..config import SolverConfig
from ..errors import Contradiction, InvariantViolation, UnsatDetected
from ..problem import Problem
from ..results import Aborted, Satisfiable, SolverStats, Unsatisfiable
from .analyzer import ConflictAnalyzer
from .clauses import ClauseKind, ClauseStore
from .heuristic import VsidsHeuristic
from .LubyGenerator import LubyGenerator
from .propagator import UnitPropagator
from .trail import Trail

logger = logging.getLogger(__name__)

SolveResult = Union[Satisfiable, Unsatisfiable, Aborted]


class SearchState(Enum):
    PROPAGATING = auto()
    DECIDING = auto()
    ANALYZING = auto()
    RESTARTING = auto()
    REDUCING = auto()
    SATISFIED = auto()
    UNSATISFIABLE = auto()
    ABORTED = auto()


TERMINAL_STATES = (SearchState.SATISFIED, SearchState.UNSATISFIABLE, SearchState.ABORTED)


class CdclSolver:
    """
    CDCL (Conflict-Driven Clause Learning) SAT Solver.

    One instance owns the whole working set of one solve: clause store,
    trail, watch lists and activity scores. Instances share nothing but the
    immutable Problem, so independent solves can run side by side.

    The search is a state machine:
      - PROPAGATING: run unit propagation to fixpoint
      - DECIDING:    branch on the most active unassigned variable
      - ANALYZING:   learn a clause from a conflict and backjump
      - RESTARTING:  backtrack to level 0, keeping learned clauses
      - REDUCING:    delete low-activity learned clauses
    ending in SATISFIED, UNSATISFIABLE or ABORTED.

    Public Methods:
        solve(): runs the search and returns Satisfiable, Unsatisfiable or Aborted
    """

    def __init__(self, problem: Problem, config: Optional[SolverConfig] = None):
        '''
        Constructor for the CdclSolver class

        Parameters:
            problem: the validated Problem to solve
            config: tunable parameters, defaults to SolverConfig()
        '''
        if not isinstance(problem, Problem):
            raise TypeError(f"Expected a Problem, got {type(problem).__name__}")
        self._problem = problem
        self._config = config if config is not None else SolverConfig()
        self._num_vars = problem.num_vars

        self.store = ClauseStore(self._num_vars)
        self.trail = Trail(self._num_vars)
        self.propagator = UnitPropagator(self.store, self.trail)
        self.heuristic = VsidsHeuristic(
            self._num_vars, self.trail,
            var_decay=self._config.var_decay,
            polarity=self._config.polarity,
            phase_saving=self._config.phase_saving,
        )
        self.analyzer = ConflictAnalyzer(self.store, self.trail, minimize=self._config.minimize_learned)

        self.stats = SolverStats()
        self.state = SearchState.PROPAGATING
        self._conflict_ref = None
        self._abort_reason = None
        self._deadline = None
        self._started = False

        self._luby = LubyGenerator()
        self._conflicts_since_restart = 0
        self._restart_limit = None
        self._restart_limit = self._next_restart_limit()
        self._reduce_limit = self._config.reduce_base

        if not self._load():
            self.state = SearchState.UNSATISFIABLE

    def _load(self):
        '''
        Add the original clauses, asserting units at level 0.

        Literals already false at level 0 are dropped and clauses already
        satisfied at level 0 are skipped.

        Returns:
            False if the formula is found unsatisfiable while loading
        '''
        value_of = self.trail.value_of
        for clause in self._problem.clauses:
            literals = []
            satisfied = False
            for lit in clause:
                value = value_of(lit)
                if value is True:
                    satisfied = True
                    break
                if value is None:
                    literals.append(lit)
            if satisfied:
                continue

            try:
                ref = self.store.add_clause(literals, ClauseKind.ORIGINAL)
            except Contradiction:
                logger.debug("Clause %s is falsified at level 0", list(clause))
                return False

            if ref is None:
                continue
            stored = self.store.get_clause(ref).literals
            if len(stored) == 1:
                self.trail.push_propagated(stored[0], None)
        return True

    def solve(self) -> SolveResult:
        '''
        Solve the SAT problem.

        Returns:
            Satisfiable(assignment), Unsatisfiable() or Aborted(reason)
        '''
        if self._started:
            raise RuntimeError("A CdclSolver instance can only be solved once")
        self._started = True

        start = time.monotonic()
        if self._config.timeout is not None:
            self._deadline = start + self._config.timeout

        try:
            self._search()
        finally:
            self.stats.propagations = self.propagator.propagations
            self.stats.elapsed = time.monotonic() - start

        if self.state is SearchState.SATISFIED:
            assignment = self.trail.assignment()
            result = Satisfiable({var: assignment.get(var, False) for var in range(1, self._num_vars + 1)}, self.stats)
        elif self.state is SearchState.UNSATISFIABLE:
            result = Unsatisfiable(self.stats)
        else:
            result = Aborted(self._abort_reason, self.stats)

        logger.info(
            "%s: %d vars, %d clauses, %d decisions, %d conflicts, %d restarts in %.3fs",
            result.status.value, self._num_vars, self._problem.num_clauses,
            self.stats.decisions, self.stats.conflicts, self.stats.restarts, self.stats.elapsed,
        )
        return result

    def _search(self):
        config = self._config

        while self.state not in TERMINAL_STATES:
            state = self.state

            if state is SearchState.PROPAGATING:
                conflict = self.propagator.propagate()
                if config.check_invariants:
                    self._check_invariants()
                if conflict is not None:
                    self._conflict_ref = conflict
                    self.state = SearchState.ANALYZING
                elif len(self.trail) == self._num_vars:
                    self.state = SearchState.SATISFIED
                elif self._restart_due():
                    self.state = SearchState.RESTARTING
                elif self._reduce_due():
                    self.state = SearchState.REDUCING
                else:
                    self.state = SearchState.DECIDING

            elif state is SearchState.DECIDING:
                literal = self.heuristic.pick_branch_literal()
                if literal is None:
                    self.state = SearchState.SATISFIED
                else:
                    self.trail.push_decision(literal)
                    self.stats.decisions += 1
                    self.state = SearchState.PROPAGATING

            elif state is SearchState.ANALYZING:
                self.stats.conflicts += 1
                self._conflicts_since_restart += 1
                try:
                    learned, backtrack_level = self.analyzer.analyze(self._conflict_ref)
                except UnsatDetected:
                    self.state = SearchState.UNSATISFIABLE
                    continue
                self._conflict_ref = None

                lbd = self.analyzer.compute_lbd(learned)
                self._backtrack(backtrack_level)
                self._learn(learned, lbd)
                self.heuristic.decay()
                self.store.decay_clause_activity(config.clause_decay)

                self.state = SearchState.ABORTED if self._poll_cancellation() else SearchState.PROPAGATING

            elif state is SearchState.RESTARTING:
                self._restart()
                if self._poll_cancellation():
                    self.state = SearchState.ABORTED
                elif self._reduce_due():
                    self.state = SearchState.REDUCING
                else:
                    self.state = SearchState.DECIDING

            elif state is SearchState.REDUCING:
                self._reduce_db()
                self.state = SearchState.DECIDING

    def _backtrack(self, level):
        '''Undo the trail above level and hand the freed variables back to the heuristic.'''
        for literal in self.trail.backtrack_to(level):
            self.heuristic.on_unassigned(literal)
        self.propagator.reset()

    def _learn(self, literals, lbd):
        '''
        Store a learned clause and assert its first literal.

        Must be called right after backtracking to the clause's assertion
        level: literals[0] is then unassigned and every other literal false.
        '''
        ref = self.store.add_clause(literals, ClauseKind.LEARNED, lbd=lbd)
        self.stats.learned += 1
        self.heuristic.bump(abs(lit) for lit in literals)

        if len(literals) == 1:
            self.trail.push_propagated(literals[0], None)
        else:
            self.store.bump_clause(ref)
            self.trail.push_propagated(literals[0], ref)

    def _next_restart_limit(self):
        policy = self._config.restart_policy
        if policy == "luby":
            return self._config.restart_base * self._luby.get_next_luby_number()
        if policy == "geometric":
            if self._restart_limit is None:
                return self._config.restart_base
            return max(self._restart_limit + 1, int(self._restart_limit * self._config.restart_factor))
        return None

    def _restart_due(self):
        return self._restart_limit is not None and self._conflicts_since_restart >= self._restart_limit

    def _restart(self):
        logger.debug(
            "Restart %d after %d conflicts (%d learned clauses)",
            self.stats.restarts + 1, self._conflicts_since_restart, self.store.num_learned,
        )
        self._backtrack(0)
        self.stats.restarts += 1
        self._conflicts_since_restart = 0
        self._restart_limit = self._next_restart_limit()

    def _reduce_due(self):
        return self.store.num_learned >= self._reduce_limit

    def _locked(self, ref):
        '''True if the clause is the reason of an assignment still on the trail.'''
        trail = self.trail
        return any(trail.reason_of(abs(lit)) == ref for lit in self.store.get_clause(ref).literals)

    def _reduce_db(self):
        '''
        Delete the least active share of the learned clauses.

        Binary clauses, glue clauses (LBD <= 2) and clauses serving as the
        reason of a trail entry are always kept.
        '''
        store = self.store
        learned = store.learned_refs()
        candidates = []
        for ref in learned:
            clause = store.get_clause(ref)
            if len(clause) <= 2 or clause.lbd <= 2 or self._locked(ref):
                continue
            candidates.append(ref)
        candidates.sort(key=lambda r: store.get_clause(r).activity)

        target = min(len(candidates), int(len(learned) * self._config.reduce_fraction))
        for ref in candidates[:target]:
            store.delete_clause(ref)

        self.stats.reductions += 1
        self.stats.deleted += target
        self._reduce_limit += self._config.reduce_increment
        logger.debug(
            "Reduced learned clauses: deleted %d of %d, next limit %d",
            target, len(learned), self._reduce_limit,
        )

    def _poll_cancellation(self):
        '''
        Check the cooperative cancellation signals.

        Returns:
            True if the search must stop; the reason is kept for the result
        '''
        config = self._config
        if config.cancel is not None and config.cancel.is_set():
            self._abort_reason = "cancelled"
        elif self._deadline is not None and time.monotonic() >= self._deadline:
            self._abort_reason = "timeout"
        elif config.max_conflicts is not None and self.stats.conflicts >= config.max_conflicts:
            self._abort_reason = "conflict budget exhausted"
        return self._abort_reason is not None

    def _check_invariants(self):
        if not self.trail.levels_monotonic():
            raise InvariantViolation("Decision levels decrease along the trail")
        self.store.check_watches()


def solve(num_vars: int, clauses: Iterable[Sequence[int]], config: Optional[SolverConfig] = None) -> SolveResult:
    '''
    Validate a problem and solve it with a fresh solver instance.

    Raises:
        MalformedProblem: the problem description is invalid
    '''
    return CdclSolver(Problem(num_vars, clauses), config).solve()
