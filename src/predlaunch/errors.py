"""Typed failures raised by launch operations.

Every error carries a machine-readable ``code`` so callers (CLI, tests, any
outer transport) can branch on the kind without parsing messages. Nothing in
the core recovers from these; they surface to the caller unchanged.
"""

from __future__ import annotations


class LaunchError(Exception):
    """Base for all launch-market failures."""

    code: str = "launch_error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail or self.__class__.__doc__ or self.code
        super().__init__(self.detail)


class ValidationError(LaunchError):
    """Malformed input."""

    code = "validation"


class WrongPhase(LaunchError):
    """Wrong phase for this action."""

    code = "wrong_phase"


class PhaseEnded(LaunchError):
    """Phase has ended."""

    code = "phase_ended"


class PhaseNotEnded(LaunchError):
    """Phase has not ended yet."""

    code = "phase_not_ended"


class AlreadyClaimed(LaunchError):
    """Tokens already claimed."""

    code = "already_claimed"


class NotAuthorized(LaunchError):
    """Caller identity does not match the required authority or bettor."""

    code = "not_authorized"


class ArithmeticOverflow(LaunchError):
    """Intermediate value exceeds its guaranteed-safe integer width."""

    code = "arithmetic_overflow"


class DuplicateRecord(LaunchError):
    """A record with this key already exists."""

    code = "duplicate"


class NotFound(LaunchError):
    """No record with this key."""

    code = "not_found"
