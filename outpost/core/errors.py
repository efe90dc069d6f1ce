"""Custom exceptions for the Outpost turn engine."""
from typing import Optional


class OutpostError(Exception):
    """Base exception for all Outpost engine errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self):
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({context_str})"


class InvariantViolation(OutpostError):
    """A caller precondition was not checked.

    Raised for a node without a group, a consumption with no stockpile left
    to draw from, or an occupant of the wrong type. Aborts the whole turn.
    """
    pass


class InvalidActionError(OutpostError):
    """A player interaction was rejected before touching any state."""
    pass


class UnknownConstructionError(InvalidActionError, KeyError):
    """Construction kind is not in the catalog."""

    def __str__(self):
        return OutpostError.__str__(self)


class ScenarioError(OutpostError):
    """Scenario data is malformed or inconsistent."""
    pass
