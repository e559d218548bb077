from .parser import format_result, parse_dimacs, read_cnf, write_dimacs
from .timer import Timer
