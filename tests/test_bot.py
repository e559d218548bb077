import pytest

from satbot import InvalidCommandError
from satbot.bot import CommandParser, CommandType, SatBot

EXACTLY_ONE = "p cnf 3 4\n1 2 3 0\n-1 -2 0\n-2 -3 0\n-1 -3 0"
PHP_3_2 = "generate pigeonhole 3 2"


@pytest.fixture
def bot():
    return SatBot(default_timeout=5.0, max_timeout=10.0)


def test_parse_command_with_options():
    command = CommandParser().parse("!solve timeout=3 restart=none\np cnf 1 1\n1 0")
    assert command.type is CommandType.SOLVE
    assert command.options == {"timeout": "3", "restart": "none"}
    assert command.args == []
    assert command.body == "p cnf 1 1\n1 0"


def test_parse_slash_prefix_and_args():
    command = CommandParser().parse("/Generate random 10 40 seed=1")
    assert command.type is CommandType.GENERATE
    assert command.args == ["random", "10", "40"]
    assert command.options == {"seed": "1"}


@pytest.mark.parametrize("message", ["", "   \n", "frobnicate 1 2"])
def test_parse_rejects(message):
    with pytest.raises(InvalidCommandError):
        CommandParser().parse(message)


def test_invalid_command_message():
    error = InvalidCommandError("frob", "unknown command")
    assert str(error) == "Invalid command: 'frob'\n  Reason: unknown command"


def test_help(bot):
    assert bot.handle("help").startswith("Commands:")


def test_solve_sat(bot):
    reply = bot.handle("solve\n" + EXACTLY_ONE)
    lines = reply.splitlines()
    assert lines[0] == "s SATISFIABLE"
    assert lines[1].startswith("v ")
    assert lines[1].endswith(" 0")
    assert lines[-1].startswith("c 3 vars, 4 clauses,")


def test_solve_unsat(bot):
    problem = bot.handle(PHP_3_2)
    reply = bot.handle("solve restart=geometric\n" + problem)
    assert reply.splitlines()[0] == "s UNSATISFIABLE"


def test_solve_malformed_body(bot):
    reply = bot.handle("solve\np cnf 1 1\n2 0")
    assert reply.startswith("Error: Variable index out of range")


@pytest.mark.parametrize("message", [
    "solve",
    "solve timeout=abc\np cnf 1 1\n1 0",
    "solve timeout=-1\np cnf 1 1\n1 0",
    "solve restart=sometimes\np cnf 1 1\n1 0",
    "solve level=3\np cnf 1 1\n1 0",
    "solve timeout=nan\np cnf 1 1\n1 0",
    "solve timeout=inf\np cnf 1 1\n1 0",
    "solve timeout=-inf\np cnf 1 1\n1 0",
])
def test_solve_rejects_bad_options(bot, message):
    assert bot.handle(message).startswith("Error: Invalid command")


def test_check_model(bot):
    assert bot.handle("check 1 -2 -3\n" + EXACTLY_ONE) == "OK: all 4 clauses satisfied"
    assert bot.handle("check 1 2 -3\n" + EXACTLY_ONE) == "FAIL: 1 of 4 clauses unsatisfied: 2"


def test_check_rejects_bad_models(bot):
    assert bot.handle("check 1 -1\n" + EXACTLY_ONE).startswith("Error:")
    assert bot.handle("check 7\n" + EXACTLY_ONE).startswith("Error:")
    assert bot.handle("check x\n" + EXACTLY_ONE).startswith("Error:")


def test_generate_pigeonhole(bot):
    reply = bot.handle(PHP_3_2)
    lines = reply.splitlines()
    assert lines[0] == "c pigeonhole 3 pigeons 2 holes"
    assert lines[1] == "p cnf 6 9"


def test_generate_random_is_seeded(bot):
    first = bot.handle("generate random 10 40 seed=5")
    assert first == bot.handle("generate random 10 40 seed=5")
    assert "p cnf 10 40" in first


@pytest.mark.parametrize("message", [
    "generate",
    "generate pigeonhole 3",
    "generate triangle 3 3",
    "generate random 2 5 3",
    "generate random ten 5",
])
def test_generate_errors(bot, message):
    assert bot.handle(message).startswith("Error:")


def test_errors_are_logged(bot, caplog):
    with caplog.at_level("WARNING", logger="satbot.bot"):
        bot.handle("frobnicate")
    assert "Rejected message" in caplog.text


@pytest.fixture
def small_bot():
    return SatBot(default_timeout=5.0, max_timeout=10.0, max_vars=10, max_clauses=5)


@pytest.mark.parametrize("message", [
    "solve\np cnf 11 1\n1 0",
    "solve\np cnf 2 6\n1 0\n2 0\n1 2 0\n-1 2 0\n1 -2 0\n2 1 0",
    "generate pigeonhole 4 3",
    "generate pigeonhole 3 2",
    "generate random 11 5",
    "generate random 10 6",
])
def test_size_limits(small_bot, message):
    reply = small_bot.handle(message)
    assert reply.startswith("Error: Invalid command")
    assert "exceed the limit" in reply


def test_within_size_limits(small_bot):
    assert small_bot.handle("solve\np cnf 10 1\n1 0").startswith("s SATISFIABLE")
    assert "p cnf 10 5" in small_bot.handle("generate random 10 5 seed=2")


def test_huge_header_rejected_before_solving(bot):
    reply = bot.handle("solve timeout=0.1\np cnf 3000000 1\n1 0")
    assert reply.startswith("Error: Invalid command")
    assert "3000000 variables" in reply
