"""
Error Handling Module
---------------------
Typed interpreter errors with classification and user-facing messages.
Matching is deterministic, so nothing in here retries.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, List, Optional
import logging
import traceback


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    NO_MATCH = auto()                # Input matched no registered pattern
    MALFORMED_CAPTURE = auto()       # Slot matched but failed validation
    INTERNAL_INCONSISTENCY = auto()  # Resolver/registry disagree (defect)
    REGISTRY_ERROR = auto()          # Bad pattern definitions at load time
    VALIDATION_ERROR = auto()        # Request validation failed
    EXECUTOR_FAILURE = auto()        # Downstream executor reported failure
    NETWORK_ERROR = auto()           # Network/API error
    TIMEOUT_ERROR = auto()           # Executor timed out


class InterpreterError(Exception):
    """Base class for every failure raised by the command interpreter."""

    category: ErrorCategory = ErrorCategory.INTERNAL_INCONSISTENCY
    recoverable: bool = True

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NoMatch(InterpreterError):
    """Input matched no pattern under any intent."""
    category = ErrorCategory.NO_MATCH

    def __init__(self, text: str):
        super().__init__("Command not recognized", details={"text": text})
        self.text = text


class MalformedCapture(InterpreterError):
    """A slot matched syntactically but its value is not acceptable."""
    category = ErrorCategory.MALFORMED_CAPTURE

    def __init__(self, slot: str, value: str, reason: str):
        super().__init__(
            f"Invalid {slot} '{value}': {reason}",
            details={"slot": slot, "value": value, "reason": reason},
        )
        self.slot = slot
        self.value = value
        self.reason = reason


class InternalInconsistency(InterpreterError):
    """Programming defect: resolver got something the registry can't produce."""
    category = ErrorCategory.INTERNAL_INCONSISTENCY
    recoverable = False


class RegistryError(InterpreterError):
    """Pattern definitions are invalid. Raised at initialization only."""
    category = ErrorCategory.REGISTRY_ERROR
    recoverable = False


@dataclass
class CommandError:
    """
    Structured error with metadata.

    Used for consistent error handling and reporting across the CLI,
    HTTP and MCP surfaces.
    """
    category: ErrorCategory
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)
    stack_trace: Optional[str] = None
    recoverable: bool = True

    @classmethod
    def from_exception(
        cls,
        exception: Exception,
        category: Optional[ErrorCategory] = None,
        details: Optional[Dict] = None
    ) -> "CommandError":
        """Create error from an exception."""
        if isinstance(exception, InterpreterError):
            return cls(
                category=category or exception.category,
                message=exception.message,
                details=details or exception.details,
                stack_trace=traceback.format_exc(),
                recoverable=exception.recoverable,
            )

        category = category or ErrorCategory.INTERNAL_INCONSISTENCY
        return cls(
            category=category,
            message=str(exception),
            details=details,
            stack_trace=traceback.format_exc(),
            recoverable=category not in {
                ErrorCategory.INTERNAL_INCONSISTENCY,
                ErrorCategory.REGISTRY_ERROR,
            }
        )

    def __repr__(self) -> str:
        return f"CommandError({self.category.name}: {self.message})"


class ErrorHandler:
    """
    Central error handler with logging and user messages.
    """

    GENERIC_INTERNAL_MESSAGE = "Something went wrong internally. Please try again later."

    def __init__(self, max_history: int = 100):
        self._logger = logging.getLogger("monad.errors")
        self._error_history: List[CommandError] = []
        self._max_history = max_history

    def handle(self, error: CommandError) -> str:
        """
        Handle an error and return user-friendly message.
        """
        self._log_error(error)

        self._error_history.append(error)
        if len(self._error_history) > self._max_history:
            self._error_history.pop(0)

        return self._get_user_message(error)

    def handle_exception(self, exception: Exception) -> str:
        """Shortcut for surfaces that caught an exception."""
        return self.handle(CommandError.from_exception(exception))

    def _log_error(self, error: CommandError) -> None:
        """Log error with appropriate level."""
        level_map = {
            ErrorCategory.NO_MATCH: logging.INFO,
            ErrorCategory.MALFORMED_CAPTURE: logging.WARNING,
            ErrorCategory.VALIDATION_ERROR: logging.WARNING,
            ErrorCategory.EXECUTOR_FAILURE: logging.ERROR,
            ErrorCategory.NETWORK_ERROR: logging.ERROR,
            ErrorCategory.TIMEOUT_ERROR: logging.ERROR,
            ErrorCategory.REGISTRY_ERROR: logging.CRITICAL,
            ErrorCategory.INTERNAL_INCONSISTENCY: logging.CRITICAL,
        }

        level = level_map.get(error.category, logging.ERROR)

        self._logger.log(
            level,
            f"{error.category.name}: {error.message}",
            extra={"details": error.details}
        )

        if error.stack_trace and level >= logging.ERROR:
            self._logger.debug(f"Stack trace:\n{error.stack_trace}")

    def _get_user_message(self, error: CommandError) -> str:
        """Generate user-friendly error message."""
        messages = {
            ErrorCategory.NO_MATCH: "Command not recognized",
            ErrorCategory.MALFORMED_CAPTURE: error.message,
            ErrorCategory.VALIDATION_ERROR: error.message,
            ErrorCategory.EXECUTOR_FAILURE: error.message,
            ErrorCategory.NETWORK_ERROR: "Network error: No response received from server",
            ErrorCategory.TIMEOUT_ERROR: "That took too long. Please try again.",
            ErrorCategory.REGISTRY_ERROR: self.GENERIC_INTERNAL_MESSAGE,
            ErrorCategory.INTERNAL_INCONSISTENCY: self.GENERIC_INTERNAL_MESSAGE,
        }

        return messages.get(error.category, "An error occurred.")

    def get_error_stats(self) -> Dict[str, int]:
        """Get error statistics."""
        stats = {}
        for error in self._error_history:
            key = error.category.name
            stats[key] = stats.get(key, 0) + 1
        return stats

    def clear_history(self) -> None:
        """Clear error history."""
        self._error_history.clear()


# Convenience functions

def create_executor_error(message: str, executor_name: str = "") -> CommandError:
    """Create an executor failure error."""
    return CommandError(
        category=ErrorCategory.EXECUTOR_FAILURE,
        message=message,
        details={"executor": executor_name}
    )


def create_validation_error(message: str, field: str = "") -> CommandError:
    """Create a validation error."""
    return CommandError(
        category=ErrorCategory.VALIDATION_ERROR,
        message=message,
        details={"field": field}
    )
