"""Exchange connectors."""

from .connector import AbstractConnector, PaperConnector, ExecutionResult

__all__ = ["AbstractConnector", "PaperConnector", "ExecutionResult"]
