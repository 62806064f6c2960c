"""Core engine package for the Mus card game."""

__all__ = [
    "cards",
    "deck",
    "errors",
    "seating",
    "hands",
    "negotiation",
    "betting",
    "scoring",
    "game",
    "rules_schema",
    "service",
]
