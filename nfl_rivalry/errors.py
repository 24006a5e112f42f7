# nfl_rivalry/errors.py
"""
Exception types raised across the dashboard.

Each carries the HTTP status the Flask layer answers with.
"""

from __future__ import annotations


class RivalryError(Exception):
    """Base class for all dashboard errors."""

    status_code = 500
    public_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class AuthRequiredError(RivalryError):
    """The caller has no authenticated session or valid token."""

    status_code = 401
    public_message = "Authentication required"


class DataUnavailableError(RivalryError):
    """The historical dataset could not be read."""

    status_code = 503
    public_message = "Game data unavailable"


class ScoreSourceError(RivalryError):
    """The live score source failed or returned something unusable."""

    status_code = 502
    public_message = "Live score source unavailable"


class SquaresStateError(RivalryError):
    """The requested squares action does not fit the current game state."""

    status_code = 409
    public_message = "No squares game in progress"


class SquaresValidationError(RivalryError):
    """Invalid input for a squares action (bad cell, wager or labels)."""

    status_code = 400
    public_message = "Invalid squares request"
