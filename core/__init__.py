# Core module - Orchestrator and error handling
# This is the ONLY coordinator - every surface goes through here

from .errors import (
    ErrorHandler, CommandError, ErrorCategory,
    InterpreterError, NoMatch, MalformedCapture, InternalInconsistency, RegistryError
)

__all__ = [
    "ErrorHandler", "CommandError", "ErrorCategory",
    "InterpreterError", "NoMatch", "MalformedCapture",
    "InternalInconsistency", "RegistryError",
]
