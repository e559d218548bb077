"""
sat-bot command line: solve DIMACS files, generate instances, or run the
bot over stdin.
"""
import argparse
import logging
import sys

from .bot import SatBot
from .cdcl import CdclSolver
from .config import RESTART_POLICIES, SolverConfig, load_configs
from .errors import ConfigError, MalformedProblem
from .formula import pigeonhole, random_ksat
from .results import SolveStatus
from .utils.parser import format_result, read_cnf, write_dimacs

EXIT_CODES = {
    SolveStatus.SAT: 10,
    SolveStatus.UNSAT: 20,
    SolveStatus.ABORTED: 0,
}

logger = logging.getLogger(__name__)


def _setup_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _base_config(selector):
    '''Resolve "--config NAME@FILE" (or "FILE" for its first entry).'''
    if selector is None:
        return SolverConfig()
    name, sep, path = selector.partition("@")
    if not sep:
        name, path = None, selector
    configs = load_configs(path)
    if not configs:
        raise ConfigError(f"No configurations in {path}")
    if name is None:
        return next(iter(configs.values()))
    if name not in configs:
        raise ConfigError(f"No configuration named {name!r} in {path}")
    return configs[name]


def _solve(args):
    config = _base_config(args.config).with_overrides(timeout=args.timeout, restart_policy=args.restart)
    problem = read_cnf(args.file)
    result = CdclSolver(problem, config).solve()
    print(format_result(result))
    if args.stats:
        for key, value in result.stats.as_dict().items():
            print(f"c {key}: {value}")
    return EXIT_CODES[result.status]


def _generate(args):
    if args.family == "pigeonhole":
        problem = pigeonhole(args.pigeons, args.holes)
        comment = f"pigeonhole {args.pigeons} pigeons {args.holes} holes"
    else:
        problem = random_ksat(args.vars, args.clauses, args.k, seed=args.seed)
        comment = f"random {args.k}-SAT, seed {args.seed}"
    sys.stdout.write(write_dimacs(problem, comment=comment))
    return 0


def _reply(bot, message):
    '''Answer one message; an unexpected failure must not end the loop.'''
    try:
        return bot.handle(message)
    except Exception:
        logger.exception("Failed to answer message %r", message.partition("\n")[0])
        return "Error: internal error"


def _bot(args):
    '''Read messages from stdin, a blank line ends each message.'''
    bot = SatBot(_base_config(args.config), default_timeout=args.timeout, max_timeout=args.max_timeout,
                 max_vars=args.max_vars, max_clauses=args.max_clauses)
    lines = []
    for line in sys.stdin:
        if line.strip():
            lines.append(line.rstrip("\n"))
            continue
        if lines:
            print(_reply(bot, "\n".join(lines)), flush=True)
            print(flush=True)
            lines = []
    if lines:
        print(_reply(bot, "\n".join(lines)), flush=True)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog="satbot", description="CDCL SAT solver and bot")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    subparsers = parser.add_subparsers(dest="command")

    solve_parser = subparsers.add_parser("solve", help="solve a DIMACS CNF file")
    solve_parser.add_argument("file")
    solve_parser.add_argument("--timeout", type=float, default=None)
    solve_parser.add_argument("--restart", choices=RESTART_POLICIES, default=None)
    solve_parser.add_argument("--config", type=str, default=None, help="NAME@FILE.yaml or FILE.yaml")
    solve_parser.add_argument("--stats", action="store_true")

    gen_parser = subparsers.add_parser("generate", help="print a generated instance as DIMACS")
    families = gen_parser.add_subparsers(dest="family", required=True)
    php = families.add_parser("pigeonhole")
    php.add_argument("pigeons", type=int)
    php.add_argument("holes", type=int)
    rnd = families.add_parser("random")
    rnd.add_argument("vars", type=int)
    rnd.add_argument("clauses", type=int)
    rnd.add_argument("-k", type=int, default=3)
    rnd.add_argument("--seed", type=int, default=None)

    bot_parser = subparsers.add_parser("bot", help="answer bot messages from stdin")
    bot_parser.add_argument("--config", type=str, default=None)
    bot_parser.add_argument("--timeout", type=float, default=10.0)
    bot_parser.add_argument("--max-timeout", type=float, default=60.0)
    bot_parser.add_argument("--max-vars", type=int, default=100000)
    bot_parser.add_argument("--max-clauses", type=int, default=1000000)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    handlers = {"solve": _solve, "generate": _generate, "bot": _bot}
    if args.command not in handlers:
        parser.print_help()
        return 0

    try:
        return handlers[args.command](args)
    except (MalformedProblem, ConfigError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
