"""
Exception types raised by the SQL rendering and translation engine.
"""

from typing import Optional


class SqlRenderError(Exception):
    """Base exception for all sqlrender errors."""


class PatternError(SqlRenderError, ValueError):
    """Raised when a search pattern cannot be compiled."""

    def __init__(self, message: str, pattern: Optional[str] = None):
        super().__init__(message)
        self.pattern = pattern


class RuleLoopError(SqlRenderError, RuntimeError):
    """Raised when a rule keeps matching past the configured iteration cap."""

    def __init__(self, pattern: str, iterations: int):
        super().__init__(
            f"Rule did not reach a fixpoint after {iterations} replacements: {pattern}"
        )
        self.pattern = pattern
        self.iterations = iterations


class RuleTableError(SqlRenderError, ValueError):
    """Raised when a rule table file is missing fields or holds a bad rule."""

    def __init__(self, message: str, source_file: Optional[str] = None):
        super().__init__(message)
        self.source_file = source_file
