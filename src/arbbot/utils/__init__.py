"""Generic utility functions."""

from .config import BotConfig, parse_args, parse_balance

__all__ = ["BotConfig", "parse_args", "parse_balance"]
