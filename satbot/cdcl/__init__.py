from .cdcl import CdclSolver, SearchState, solve
from .clauses import Clause, ClauseKind, ClauseStore
from .trail import Trail, TrailEntry
from .propagator import UnitPropagator
from .heuristic import VsidsHeuristic
from .analyzer import ConflictAnalyzer
from .PriorityQueue import PriorityQueue
from .LubyGenerator import LubyGenerator
