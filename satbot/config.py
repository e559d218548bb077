"""
Solver configuration.

The solver never reads the environment; everything it needs is passed in
through a SolverConfig. Named configurations can be kept in a YAML file,
which is how the benchmark runner and the CLI pick them up.
"""

import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

RESTART_POLICIES = ("luby", "geometric", "none")
POLARITIES = ("negative", "positive")


@dataclass
class SolverConfig:
    """
    Tunable parameters of one solve.

    Attributes:
        restart_policy: "luby", "geometric" or "none"
        restart_base: conflicts in one Luby unit / first geometric interval
        restart_factor: growth of the geometric interval after each restart
        reduce_base: number of learned clauses that triggers the first reduction
        reduce_increment: growth of that limit after every reduction
        reduce_fraction: share of the learned clauses deleted by a reduction
        var_decay: variable activity decay factor, in (0, 1)
        clause_decay: learned clause activity decay factor, in (0, 1)
        polarity: default branching polarity, "negative" or "positive"
        phase_saving: reuse the last assigned phase of a variable when branching
        minimize_learned: remove redundant literals from learned clauses
        timeout: wall-clock budget in seconds, None for no limit
        max_conflicts: conflict budget, None for no limit
        cancel: object with an ``is_set()`` method (e.g. threading.Event)
        check_invariants: verify trail and watch invariants after each propagation
    """
    restart_policy: str = "luby"
    restart_base: int = 100
    restart_factor: float = 1.5
    reduce_base: int = 2000
    reduce_increment: int = 300
    reduce_fraction: float = 0.5
    var_decay: float = 0.95
    clause_decay: float = 0.999
    polarity: str = "negative"
    phase_saving: bool = True
    minimize_learned: bool = True
    timeout: Optional[float] = None
    max_conflicts: Optional[int] = None
    cancel: Any = None
    check_invariants: bool = False

    def __post_init__(self):
        if self.restart_policy not in RESTART_POLICIES:
            raise ConfigError(f"restart_policy must be one of {list(RESTART_POLICIES)}")
        if self.polarity not in POLARITIES:
            raise ConfigError(f"polarity must be one of {list(POLARITIES)}")
        if self.restart_base < 1:
            raise ConfigError("restart_base must be at least 1")
        if self.restart_factor <= 1.0:
            raise ConfigError("restart_factor must be greater than 1")
        if self.reduce_base < 1 or self.reduce_increment < 0:
            raise ConfigError("reduce_base must be positive and reduce_increment non-negative")
        if not 0.0 < self.reduce_fraction <= 1.0:
            raise ConfigError("reduce_fraction must be in (0, 1]")
        if not 0.0 < self.var_decay < 1.0:
            raise ConfigError("var_decay must be in (0, 1)")
        if not 0.0 < self.clause_decay < 1.0:
            raise ConfigError("clause_decay must be in (0, 1)")
        if self.timeout is not None and (math.isnan(self.timeout) or self.timeout < 0):
            raise ConfigError("timeout must be non-negative")
        if self.max_conflicts is not None and self.max_conflicts < 0:
            raise ConfigError("max_conflicts must be non-negative")
        if self.cancel is not None and not callable(getattr(self.cancel, "is_set", None)):
            raise ConfigError("cancel must provide an is_set() method")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SolverConfig":
        '''Build a config from a plain mapping, rejecting unknown keys.'''
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def with_overrides(self, **overrides) -> "SolverConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_configs(path: str) -> Dict[str, SolverConfig]:
    """
    Load named solver configurations from a YAML file.

    The file maps a configuration name to the keyword arguments of
    SolverConfig; an empty entry means the defaults.

    Parameters:
        path: path of the YAML file

    Return:
        dictionary of configuration name to SolverConfig
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config format in {path}")
    return {str(name): SolverConfig.from_dict(entry) for name, entry in data.items()}
