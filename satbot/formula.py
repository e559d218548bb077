"""
Instance generators for benchmarking, testing and the bot's generate command.
"""

import random
from typing import Optional

from .problem import Problem


def random_ksat(n_vars: int, n_clauses: int, k: int = 3, seed: Optional[int] = None) -> Problem:
    """
    Generate a uniform random k-SAT formula.

    Args:
        n_vars: Number of variables.
        n_clauses: Number of clauses.
        k: Number of distinct variables per clause (default 3 for 3-SAT).
        seed: Seed for a private random generator; the global one is never touched.

    Returns:
        The generated Problem.
    """
    if k < 1 or k > n_vars:
        raise ValueError(f"Clause length must be between 1 and {n_vars}, got {k}")
    rng = random.Random(seed)
    clauses = []
    for _ in range(n_clauses):
        clause_vars = rng.sample(range(1, n_vars + 1), k)
        clauses.append([var if rng.random() < 0.5 else -var for var in clause_vars])
    return Problem(n_vars, clauses)


def pigeonhole(pigeons: int, holes: int) -> Problem:
    """
    Encode "every pigeon sits in a hole, no hole holds two pigeons".

    Variable ``p * holes + h + 1`` means pigeon p sits in hole h. The formula
    is unsatisfiable exactly when pigeons > holes.
    """
    if pigeons < 0 or holes < 1:
        raise ValueError("Need a non-negative pigeon count and at least one hole")

    def var(p, h):
        return p * holes + h + 1

    clauses = [[var(p, h) for h in range(holes)] for p in range(pigeons)]
    for h in range(holes):
        for p1 in range(pigeons):
            for p2 in range(p1 + 1, pigeons):
                clauses.append([-var(p1, h), -var(p2, h)])
    return Problem(pigeons * holes, clauses)
