"""Bot strategies for Mus."""

from .base import BotStrategy
from .heuristic import AggressiveBot, BalancedBot, BluffBot, CautiousBot, HeuristicBot
from .random_bot import RandomBot

__all__ = [
    "BotStrategy",
    "HeuristicBot",
    "AggressiveBot",
    "CautiousBot",
    "BalancedBot",
    "BluffBot",
    "RandomBot",
]
