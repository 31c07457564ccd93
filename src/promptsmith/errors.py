"""Error types raised by promptsmith.

The optimization pipeline itself never raises for bad input; these are
used for configuration loading and for reporting pattern failures.
"""

from __future__ import annotations

from typing import Optional


class PromptsmithError(Exception):
    """Base class for all promptsmith errors."""

    #: Short, actionable suggestion shown after the main message.
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class ConfigError(PromptsmithError):
    """Raised when a configuration file cannot be read or parsed."""

    hint = "Check the file path and that it contains a YAML or JSON mapping."


class PatternError(PromptsmithError):
    """Wraps an exception raised while applying a pattern."""

    def __init__(self, pattern_id: str, cause: Exception) -> None:
        super().__init__(f"Pattern {pattern_id} failed: {type(cause).__name__}: {cause}")
        self.pattern_id = pattern_id
        self.cause = cause
