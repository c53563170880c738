"""Exceptions raised by healthtrack."""

from __future__ import annotations


class HealthTrackError(Exception):
    """Base exception for healthtrack errors."""

    pass


class InvalidInputError(HealthTrackError, ValueError):
    """Raised when a numeric or enum precondition is violated."""

    pass


class UserNotFoundError(HealthTrackError):
    """Raised when no profile exists for a user identifier."""

    def __init__(self, user_id: str):
        super().__init__(f"No user profile found for '{user_id}'")
        self.user_id = user_id
