"""
Centralized Logging
-------------------
Structured logging with turn_id propagation for request traceability.

Design:
- Every interpreted command gets a unique turn_id
- turn_id propagates through: Interpreter -> Executor -> Surface
- Console output through Rich, file output as JSON lines
- Severity discipline: INFO=state, WARNING=recoverable, ERROR=abort

Usage:
    from infra.logging import get_logger, TurnContext, log_turn_end

    logger = get_logger("core")

    with TurnContext() as turn_id:
        logger.info("Processing command")
        log_turn_end(turn_id, success=True, intent="swap")
"""

from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
import contextvars
import json
import logging
import uuid

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "monad"

# Context variable for turn_id - thread-safe and async-safe
_turn_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "turn_id", default=None
)


def generate_turn_id() -> str:
    """Generate a unique turn ID."""
    return f"turn_{uuid.uuid4().hex[:12]}"


def get_turn_id() -> Optional[str]:
    """Get the current turn ID from context."""
    return _turn_id_var.get()


class TurnContext:
    """
    Context manager for turn scoping.

    Usage:
        with TurnContext() as turn_id:
            # All logs within this block carry turn_id
            logger.info("Processing...")
    """

    def __init__(self, turn_id: Optional[str] = None):
        self._turn_id = turn_id or generate_turn_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _turn_id_var.set(self._turn_id)
        return self._turn_id

    def __exit__(self, *args) -> None:
        if self._token is not None:
            _turn_id_var.reset(self._token)


class TurnIdFilter(logging.Filter):
    """Logging filter that adds turn_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "turn_id", None) is None:
            record.turn_id = get_turn_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    EXTRA_FIELDS = ("intent", "executor", "execution_time_ms", "success", "status", "details")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "turn_id": getattr(record, "turn_id", "-"),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class TurnConsoleFormatter(logging.Formatter):
    """Prefix console messages with the turn id when one is active."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        turn_id = getattr(record, "turn_id", "-")
        return f"[{turn_id}] {message}" if turn_id != "-" else message


_logging_initialized = False


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    console: bool = True,
    file: bool = True,
    rich_console: Optional[Console] = None,
) -> None:
    """
    Configure the logging system. Safe to call more than once;
    only the first call takes effect.

    Args:
        level: Logging level (default INFO)
        log_dir: Directory for log files (default: ./logs)
        console: Enable console output
        file: Enable file output
        rich_console: Console to log to (stderr by default)
    """
    global _logging_initialized

    if _logging_initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG if file else level)
    root_logger.handlers.clear()

    turn_filter = TurnIdFilter()

    if console:
        console_handler = RichHandler(
            console=rich_console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(level)
        console_handler.setFormatter(TurnConsoleFormatter("%(message)s"))
        console_handler.addFilter(turn_filter)
        root_logger.addHandler(console_handler)

    if file:
        log_path = Path(log_dir) if log_dir else Path("logs")
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            str(log_path / "monad.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File gets everything
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(turn_filter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the project namespace.

    Args:
        name: Logger name (prefixed with 'monad.' if not already)
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def log_turn_end(
    turn_id: str,
    success: bool,
    intent: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """
    Log the end of a command turn with summary information.

    Args:
        turn_id: The turn ID being completed
        success: Whether the turn completed successfully
        intent: Intent that was dispatched, if any
        error: Error message if unsuccessful
    """
    logger = get_logger("core.turn")

    extra = {
        "turn_id": turn_id,
        "success": success,
        "intent": intent or "-",
    }

    if success:
        logger.info(f"TURN_END: success=True, intent={intent}", extra=extra)
    else:
        extra["details"] = {"error": error or "Unknown error"}
        logger.warning(f"TURN_END: success=False, error={error or 'Unknown'}", extra=extra)
