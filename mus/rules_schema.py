"""Validation schema for Mus rules configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

ALLOWED_WIN_SCORES = (30, 40)


class BotDelayConfig(BaseModel):
    min_seconds: float = Field(0.8, ge=0, description="Shortest artificial thinking delay for bots.")
    max_seconds: float = Field(2.0, ge=0, description="Longest artificial thinking delay for bots.")

    @model_validator(mode="after")
    def check_range(self) -> "BotDelayConfig":
        if self.max_seconds < self.min_seconds:
            raise ValueError("Bot delay max_seconds must be >= min_seconds.")
        return self


class RuleSet(BaseModel):
    win_score: int = Field(40, description="Score that ends the game.")
    pass_points: int = Field(1, ge=0, description="Points for winning Grand or Petit when every seat passes.")
    jeu_prime_thirty_one: int = Field(3, ge=0, description="Deferred prime for a winning Jeu of 31.")
    jeu_prime: int = Field(2, ge=0, description="Deferred prime for any other winning Jeu.")
    puntuak_prime: int = Field(1, ge=0, description="Deferred prime for winning Puntuak uncontested.")
    bot_delay: BotDelayConfig = Field(default_factory=BotDelayConfig)

    @field_validator("win_score")
    @classmethod
    def validate_win_score(cls, value: int) -> int:
        if value not in ALLOWED_WIN_SCORES:
            raise ValueError(f"win_score must be one of {ALLOWED_WIN_SCORES}, got {value}.")
        return value


DEFAULT_RULES = RuleSet()


def load_rules(path: Optional[Union[str, Path]] = None) -> RuleSet:
    """Load a rule set from a JSON file, or return the defaults."""
    if path is None:
        return RuleSet()
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return RuleSet.model_validate(payload)
