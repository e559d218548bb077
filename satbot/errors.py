"""
Custom exception classes for the sat-bot solver.

Malformed input is reported through exceptions so that a solve never starts
on a problem that failed validation. Cancellation is not an exception: it is
reported as an ``Aborted`` result.
"""


class SatBotError(Exception):
    """Base exception class for all sat-bot exceptions."""
    pass


class MalformedProblem(SatBotError):
    """
    Raised when a problem description cannot be solved as given.

    Attributes:
        clause_index: index of the offending clause in the input, if known
        literal: the offending literal, if known
    """
    def __init__(self, message="Malformed problem", clause_index=None, literal=None):
        self.clause_index = clause_index
        self.literal = literal
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        details = []
        if self.clause_index is not None:
            details.append(f"clause={self.clause_index}")
        if self.literal is not None:
            details.append(f"literal={self.literal}")

        detail_str = ", ".join(details)
        return f"{self.message} ({detail_str})" if details else self.message


class DimacsError(MalformedProblem):
    """Raised when DIMACS CNF text cannot be parsed."""
    def __init__(self, message="Invalid DIMACS input", line=None):
        self.line = line
        super().__init__(message)

    def __str__(self):
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        return self.message


class Contradiction(SatBotError):
    """
    Raised by the clause store when a clause is empty after simplification.

    The solver turns this into an ``Unsatisfiable`` result.
    """
    def __init__(self, message="Clause is empty after simplification"):
        self.message = message
        super().__init__(self.message)


class UnsatDetected(SatBotError):
    """
    Raised by conflict analysis when a conflict occurs at decision level 0.

    This is a valid terminal outcome, not an error; it is separated as an
    exception for control flow purposes.
    """
    def __init__(self, message="Conflict at decision level 0"):
        self.message = message
        super().__init__(self.message)


class InvariantViolation(SatBotError):
    """Raised when an internal solver invariant does not hold. Always a bug."""
    pass


class ConfigError(SatBotError):
    """Raised for an invalid solver configuration."""
    pass


class InvalidCommandError(SatBotError):
    """Raised when a bot message is not a well-formed command."""

    def __init__(self, command: str, reason: str = ""):
        self.command = command
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Invalid command: {repr(self.command)}"
        if self.reason:
            msg += f"\n  Reason: {self.reason}"
        return msg
