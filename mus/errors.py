"""Rejection types raised by the Mus engine.

Every error is raised before the engine mutates any state, so callers can
surface the message and re-prompt the actor.
"""

from __future__ import annotations


class MusError(ValueError):
    """Base class for rejected game actions."""

    code = "invalid_action"


class TurnViolation(MusError):
    """Raised when a seat acts out of turn, twice, or while eliminated."""

    code = "turn_violation"


class InvalidCardinality(MusError):
    """Raised when a discard selection is not 1-4 distinct cards of the hand."""

    code = "invalid_cardinality"


class InvalidRaise(MusError):
    """Raised when a raise amount is missing or not positive."""

    code = "invalid_raise"


class InvalidActionForState(MusError):
    """Raised when the action does not fit the current round stage."""

    code = "invalid_action"
