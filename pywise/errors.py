"""Exception hierarchy for pywise.

All pywise errors inherit from PyWiseError and carry:
- error_code: an ErrorCode enum for programmatic handling
- suggestions: actionable steps to resolve the issue
- context: free-form details (parameter names, combination keys, ...)

Input errors also inherit from ValueError so callers that only care about
"bad argument" can keep catching the builtin.

Example:
    try:
        generate_combinatorial(parameters, limit=0)
    except PyWiseError as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes.

    - E2xx: Input validation errors
    - E4xx: Generation errors
    - E9xx: Unknown/internal errors
    """

    INVALID_INPUT = "E201"
    INVALID_CONFIG = "E202"
    INVALID_MODEL = "E203"

    INCONSISTENT_COMBINATION = "E401"
    NO_CANDIDATES = "E402"

    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 300:
            return "validation"
        elif code_num < 500:
            return "generation"
        else:
            return "unknown"


class PyWiseError(Exception):
    """Base exception for all pywise errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        suggestions: List of actionable steps to resolve the issue
        context: Extra details about where the error happened
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.cause = cause
        self.context = dict(context)
        self._suggestions = suggestions

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [f"Error [{self.error_code.value}]: {self.message}"]

        if self.context:
            lines.append("")
            for key, value in self.context.items():
                lines.append(f"{key}: {value}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": {k: str(v) for k, v in self.context.items()},
            "cause": str(self.cause) if self.cause else None,
        }


class InvalidInputError(PyWiseError, ValueError):
    """A required argument is missing or malformed.

    Raised at the API boundary before any computation starts: empty
    parameter names, missing partition lists, duplicate names, limits
    below one, partitions placed into the wrong combination slot.
    """

    error_code = ErrorCode.INVALID_INPUT
    default_message = "Invalid input"
    default_suggestions = [
        "Check that every parameter has a non-empty name and a partition list",
        "Make sure partition names are unique within their parameter",
    ]


class ConfigError(PyWiseError, ValueError):
    """Settings could not be loaded or failed validation."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check the YAML syntax of the settings file",
        "Environment variables use the PYWISE_ prefix (e.g. PYWISE_JUMP=3)",
    ]


class ModelLoadError(PyWiseError, ValueError):
    """A YAML model file could not be read or does not describe a valid input."""

    error_code = ErrorCode.INVALID_MODEL
    default_message = "Invalid model file"
    default_suggestions = [
        "A model needs a 'parameters' list; each entry needs 'name' and 'values'",
        "Rules reference parameters and values by the names used in the model",
    ]


class InconsistentCombinationError(PyWiseError):
    """A partial combination handed to completion already contains a conflict.

    This is a logic fault in the calling algorithm and is never retried.
    """

    error_code = ErrorCode.INCONSISTENT_COMBINATION
    default_message = "Combination should be initially consistent, with no conflicting values"


class NoCandidatesError(PyWiseError, RuntimeError):
    """The candidate queue is not empty but none of it can be used.

    Raised instead of looping forever when every remaining candidate pair is
    found conflicting. Usually points at a rule whose answer changes between
    calls.
    """

    error_code = ErrorCode.NO_CANDIDATES
    default_message = "No usable candidate pairs remain in the queue"
    default_suggestions = [
        "Make sure rules are pure functions of the two partitions",
        "Check that no rule raises for partitions of unrelated parameters",
    ]
