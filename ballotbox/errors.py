"""Exceptions raised by election operations."""

from typing import Any


class ElectionError(Exception):
    """Base class for errors raised by the election core."""
    pass


class PermissionDenied(ElectionError):
    """Raised when a non-owner caller attempts an administrative operation."""

    def __init__(self, caller: Any, operation: str = ""):
        self.caller = caller
        self.operation = operation
        message = f"caller {caller!r} is not the election administrator"
        if operation:
            message += f" (attempted {operation})"
        super().__init__(message)


class InvalidState(ElectionError):
    """Raised when an operation is attempted outside its lifecycle phase."""

    def __init__(self, election_id: int, phase: Any, operation: str):
        self.election_id = election_id
        self.phase = phase
        self.operation = operation
        super().__init__(
            f"cannot {operation} election {election_id}: election is {phase}"
        )


class NotFound(ElectionError):
    """Raised when an election or candidate id does not exist."""

    def __init__(self, kind: str, identifier: Any):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier!r} not found")
