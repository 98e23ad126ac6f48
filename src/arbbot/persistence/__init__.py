"""Persistence layer exports."""

from .dal import DAL, DBDecision, DBLeg

__all__ = [
    "DAL",
    "DBDecision",
    "DBLeg",
]
