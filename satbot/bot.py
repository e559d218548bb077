"""
Command front-end of sat-bot.

A message is a command line, optionally followed by a body on the next
lines. Replies are plain text. The transport (chat platform, stdin, HTTP)
is left to the caller: it hands every message to SatBot.handle and sends
back the returned string.

    solve [timeout=S] [restart=luby|geometric|none]
    p cnf 3 2
    1 -2 0
    2 3 0
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from .cdcl import CdclSolver
from .config import RESTART_POLICIES, SolverConfig
from .errors import ConfigError, InvalidCommandError, MalformedProblem
from .formula import pigeonhole, random_ksat
from .results import SolveStatus
from .utils.parser import format_result, parse_dimacs, write_dimacs
from .verify import unsatisfied_clauses

logger = logging.getLogger(__name__)


class CommandType(Enum):
    """Types of commands the bot understands."""
    HELP = auto()
    SOLVE = auto()
    CHECK = auto()
    GENERATE = auto()


@dataclass
class Command:
    """Represents a parsed bot message."""
    type: CommandType
    args: List[str] = field(default_factory=list)
    options: Dict[str, str] = field(default_factory=dict)
    body: str = ""  # everything after the command line
    raw: str = ""


COMMAND_NAMES = {
    "help": CommandType.HELP,
    "solve": CommandType.SOLVE,
    "check": CommandType.CHECK,
    "generate": CommandType.GENERATE,
}

OPTION_PATTERN = re.compile(r"([a-z_]+)=(\S+)")

HELP_TEXT = """\
Commands:
  solve [timeout=S] [restart=luby|geometric|none]   solve the DIMACS CNF on the following lines
  check <literals...>                               check a model against the DIMACS CNF on the following lines
  generate pigeonhole <pigeons> <holes>             print a pigeonhole instance
  generate random <vars> <clauses> [k] [seed=N]     print a random k-SAT instance
  help                                              show this message"""


class CommandParser:
    """Splits a message into a Command. Chat-style "!" and "/" prefixes are accepted."""

    def parse(self, message: str) -> Command:
        if not message or not message.strip():
            raise InvalidCommandError(message or "", "empty message")

        head, _, body = message.strip().partition("\n")
        words = head.split()
        name = words[0].lstrip("!/").lower()
        if name not in COMMAND_NAMES:
            raise InvalidCommandError(head, f"unknown command {name!r}, try 'help'")

        args = []
        options = {}
        for word in words[1:]:
            match = OPTION_PATTERN.fullmatch(word)
            if match:
                options[match.group(1)] = match.group(2)
            else:
                args.append(word)

        return Command(type=COMMAND_NAMES[name], args=args, options=options, body=body, raw=message)


class SatBot:
    """
    Answers bot messages. Every solve runs on its own CdclSolver instance.

    Attributes:
        config: base solver configuration
        default_timeout: timeout applied when a message does not ask for one
        max_timeout: upper bound on the timeout a message may ask for
        max_vars: largest variable count the bot will solve or generate
        max_clauses: largest clause count the bot will solve or generate

    The timeout is only polled after conflicts and restarts, so the size
    limits are what bound loading and conflict-free search.
    """

    def __init__(self, config: Optional[SolverConfig] = None, default_timeout: float = 10.0,
                 max_timeout: float = 60.0, max_vars: int = 100000, max_clauses: int = 1000000):
        self.config = config if config is not None else SolverConfig()
        self.default_timeout = default_timeout
        self.max_timeout = max_timeout
        self.max_vars = max_vars
        self.max_clauses = max_clauses
        self.parser = CommandParser()

    def _check_size(self, command: Command, num_vars: int, num_clauses: int):
        if num_vars > self.max_vars:
            raise InvalidCommandError(command.raw, f"{num_vars} variables exceed the limit of {self.max_vars}")
        if num_clauses > self.max_clauses:
            raise InvalidCommandError(command.raw, f"{num_clauses} clauses exceed the limit of {self.max_clauses}")

    def handle(self, message: str) -> str:
        '''Answer one message. Errors are turned into an "Error: ..." reply.'''
        try:
            command = self.parser.parse(message)
            handler = {
                CommandType.HELP: self._help,
                CommandType.SOLVE: self._solve,
                CommandType.CHECK: self._check,
                CommandType.GENERATE: self._generate,
            }[command.type]
            return handler(command)
        except (InvalidCommandError, MalformedProblem, ConfigError) as e:
            logger.warning("Rejected message: %s", e)
            return f"Error: {e}"

    def _help(self, command: Command) -> str:
        return HELP_TEXT

    def _solve(self, command: Command) -> str:
        unknown = sorted(set(command.options) - {"timeout", "restart"})
        if unknown:
            raise InvalidCommandError(command.raw, f"unknown options {unknown}")
        if not command.body.strip():
            raise InvalidCommandError(command.raw, "solve needs a DIMACS CNF body")

        timeout = self.default_timeout
        if "timeout" in command.options:
            try:
                timeout = float(command.options["timeout"])
            except ValueError:
                raise InvalidCommandError(command.raw, "timeout must be a number")
            if not math.isfinite(timeout):
                raise InvalidCommandError(command.raw, "timeout must be a finite number")
            if timeout <= 0:
                raise InvalidCommandError(command.raw, "timeout must be positive")
        timeout = min(timeout, self.max_timeout)

        restart = command.options.get("restart")
        if restart is not None and restart not in RESTART_POLICIES:
            raise InvalidCommandError(command.raw, f"restart must be one of {list(RESTART_POLICIES)}")

        problem = parse_dimacs(command.body)
        self._check_size(command, problem.num_vars, problem.num_clauses)
        config = self.config.with_overrides(timeout=timeout, restart_policy=restart)
        result = CdclSolver(problem, config).solve()

        stats = result.stats
        reply = format_result(result)
        reply += (f"\nc {problem.num_vars} vars, {problem.num_clauses} clauses, "
                  f"{stats.decisions} decisions, {stats.conflicts} conflicts, {stats.elapsed:.3f}s")
        if result.status is SolveStatus.ABORTED:
            logger.info("Solve aborted: %s", result.reason)
        return reply

    def _check(self, command: Command) -> str:
        if not command.body.strip():
            raise InvalidCommandError(command.raw, "check needs a DIMACS CNF body")
        try:
            literals = [int(arg) for arg in command.args]
        except ValueError:
            raise InvalidCommandError(command.raw, "the model must be a list of integers")

        problem = parse_dimacs(command.body)
        assignment = {}
        for lit in literals:
            if lit == 0:
                continue
            if abs(lit) > problem.num_vars:
                raise InvalidCommandError(command.raw, f"variable {abs(lit)} is not in the formula")
            if assignment.get(abs(lit)) == (lit < 0):
                raise InvalidCommandError(command.raw, f"variable {abs(lit)} is assigned both ways")
            assignment[abs(lit)] = lit > 0

        failed = unsatisfied_clauses(problem, assignment)
        if not failed:
            return f"OK: all {problem.num_clauses} clauses satisfied"
        shown = ", ".join(str(i + 1) for i in failed[:20])
        more = "" if len(failed) <= 20 else f" (and {len(failed) - 20} more)"
        return f"FAIL: {len(failed)} of {problem.num_clauses} clauses unsatisfied: {shown}{more}"

    def _generate(self, command: Command) -> str:
        if not command.args:
            raise InvalidCommandError(command.raw, "generate needs a family: pigeonhole or random")
        family, numbers = command.args[0].lower(), command.args[1:]
        try:
            numbers = [int(n) for n in numbers]
            seed = int(command.options["seed"]) if "seed" in command.options else None
        except ValueError:
            raise InvalidCommandError(command.raw, "sizes must be integers")

        try:
            if family == "pigeonhole" and len(numbers) == 2:
                pigeons, holes = numbers
                self._check_size(command, pigeons * holes, pigeons + holes * pigeons * (pigeons - 1) // 2)
                problem = pigeonhole(pigeons, holes)
                comment = f"pigeonhole {pigeons} pigeons {holes} holes"
            elif family == "random" and len(numbers) in (2, 3):
                self._check_size(command, numbers[0], numbers[1])
                problem = random_ksat(*numbers, seed=seed)
                comment = f"random {problem.num_vars} vars {problem.num_clauses} clauses"
            else:
                raise InvalidCommandError(command.raw, "usage: generate pigeonhole P H | generate random N M [K]")
        except ValueError as e:
            raise InvalidCommandError(command.raw, str(e))

        return write_dimacs(problem, comment=comment).rstrip("\n")
