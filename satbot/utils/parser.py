import re

from ..errors import DimacsError
from ..problem import Problem
from ..results import SolveStatus

HEADER = re.compile(r'^p\s+cnf\s+(\d+)\s+(\d+)\s*$')
TOKEN = re.compile(r'-?\d+')


def parse_dimacs(text):
    '''
    Parse DIMACS CNF text into a Problem.

    Clauses may span several lines and are terminated by 0. Comment lines
    ("c ...") are skipped and a "%" line ends the formula, as in the SATLIB
    benchmark files. Without a "p cnf" header the variable count is taken
    from the largest variable used.
    '''
    clauses = []
    current = []
    num_vars = None
    num_clauses = None

    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith('c'):
            continue
        if line.startswith('%'):
            break
        if line.startswith('p'):
            match = HEADER.match(line)
            if match is None:
                raise DimacsError(f"Invalid problem line: {line!r}", line=line_no)
            if num_vars is not None:
                raise DimacsError("Duplicate problem line", line=line_no)
            num_vars, num_clauses = int(match.group(1)), int(match.group(2))
            continue

        tokens = line.split()
        if any(TOKEN.fullmatch(token) is None for token in tokens):
            raise DimacsError(f"Unexpected token in clause line: {line!r}", line=line_no)
        for lit in map(int, tokens):
            if lit == 0:
                clauses.append(current)
                current = []
            else:
                current.append(lit)

    if current:
        clauses.append(current)

    if num_clauses is not None and num_clauses != len(clauses):
        raise DimacsError(f"Header announces {num_clauses} clauses, found {len(clauses)}")

    if num_vars is None:
        return Problem.from_clauses(clauses)
    return Problem(num_vars, clauses)


def read_cnf(path):
    with open(path) as f:
        return parse_dimacs(f.read())


def write_dimacs(problem, comment=None):
    '''Render a Problem as DIMACS CNF text.'''
    lines = []
    if comment:
        lines.extend(f"c {row}" for row in comment.splitlines())
    lines.append(f"p cnf {problem.num_vars} {problem.num_clauses}")
    for clause in problem.clauses:
        lines.append(" ".join(str(lit) for lit in clause) + " 0")
    return "\n".join(lines) + "\n"


def format_result(result):
    '''
    Render a solve result in the SAT competition output format:
    an "s" status line, then "v" lines with the model for SAT answers.
    '''
    lines = [f"s {result.status.value}"]
    if result.status is SolveStatus.SAT:
        model = [str(lit) for lit in result.model()] + ["0"]
        for i in range(0, len(model), 10):
            lines.append("v " + " ".join(model[i:i + 10]))
    elif result.status is SolveStatus.ABORTED:
        lines.append(f"c aborted: {result.reason}")
    return "\n".join(lines)
