"""
Orchestrator
------------
Central coordinator: text in, CommandResult out.
All surfaces (CLI, HTTP, MCP) go through this module.

Flow: interpret (registry -> matcher -> resolver) -> execute -> report.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging

from api.client import create_memory_lol_client
from commands import ActionDescriptor, CommandInterpreter, get_default_registry
from infra.config import ConfigManager
from infra.logging import TurnContext, log_turn_end
from tools import (
    ExecutionContext, ExecutionResult, ExecutionStatus,
    ExecutorRegistry, ToolExecutor, create_default_executors
)
from tools.twitter import TwitterHistoryChecker
from .errors import (
    CommandError, ErrorCategory, ErrorHandler, InterpreterError, create_executor_error
)


@dataclass
class OrchestratorConfig:
    """Configuration for the orchestrator."""
    registry_path: Optional[str] = None
    timeout_seconds: float = 30.0
    dry_run: bool = False

    @classmethod
    def from_manager(cls, config: ConfigManager) -> "OrchestratorConfig":
        return cls(
            registry_path=config.get("commands.registry_path"),
            timeout_seconds=float(config.get("executors.timeout_seconds", 30.0)),
            dry_run=bool(config.get("executors.dry_run", False)),
        )


@dataclass
class CommandResult:
    """Result of processing one command."""
    success: bool
    text: str
    action: Optional[ActionDescriptor] = None
    output: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_category: Optional[ErrorCategory] = None
    execution_time_ms: float = 0.0
    turn_id: Optional[str] = None

    @property
    def recognized(self) -> bool:
        return self.action is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "command": self.text,
            "action": self.action.to_dict() if self.action else None,
            "output": self.output,
            "data": self.data,
            "error": self.error,
            "errorCategory": self.error_category.name if self.error_category else None,
            "executionTimeMs": self.execution_time_ms,
            "turnId": self.turn_id,
        }

    def __repr__(self) -> str:
        status = "✓" if self.success else "✗"
        intent = self.action.intent.value if self.action else "-"
        return f"CommandResult({status} {intent}, output={self.output or self.error})"


class Orchestrator:
    """
    Central orchestrator.

    Responsibilities:
    - Interpretation of free text
    - Dispatch to executors
    - Error routing through ErrorHandler
    - Turn-scoped logging

    Collaborators are injected; defaults are built from config.
    """

    def __init__(
        self,
        config: Optional[OrchestratorConfig] = None,
        interpreter: Optional[CommandInterpreter] = None,
        executors: Optional[ExecutorRegistry] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.config = config or OrchestratorConfig()
        self._logger = logging.getLogger("monad.orchestrator")

        self.interpreter = interpreter or CommandInterpreter(
            get_default_registry(self.config.registry_path)
        )
        self.executors = executors if executors is not None else create_default_executors(
            timeout_seconds=self.config.timeout_seconds
        )
        self._tool_executor = ToolExecutor(
            self.executors,
            ExecutionContext(dry_run=self.config.dry_run)
        )
        self.error_handler = error_handler or ErrorHandler()

        # Event callbacks
        self._on_command: Optional[Callable[[ActionDescriptor], None]] = None
        self._on_result: Optional[Callable[[CommandResult], None]] = None

    def interpret(self, text: str) -> ActionDescriptor:
        """Interpret only. Raises InterpreterError subclasses."""
        return self.interpreter.interpret(text)

    def process_text(self, text: str) -> CommandResult:
        """
        Interpret and execute a command.
        Never raises for interpreter or executor failures.
        """
        with TurnContext() as turn_id:
            self._logger.info(f"Processing command: '{text}'")

            try:
                action = self.interpreter.interpret(text)
            except InterpreterError as e:
                result = CommandResult(
                    success=False,
                    text=text,
                    error=self.error_handler.handle(CommandError.from_exception(e)),
                    error_category=e.category,
                    turn_id=turn_id,
                )
                return self._finish(result)

            if self._on_command:
                self._on_command(action)

            return self._finish(self.execute(action, text=text, turn_id=turn_id))

    def execute(
        self,
        action: ActionDescriptor,
        text: str = "",
        turn_id: Optional[str] = None
    ) -> CommandResult:
        """Execute an already-resolved action."""
        execution = self._tool_executor.execute(action, turn_id=turn_id)

        if execution.success:
            return CommandResult(
                success=True,
                text=text,
                action=action,
                output=execution.text,
                data=execution.data,
                execution_time_ms=execution.execution_time_ms,
                turn_id=turn_id,
            )

        return CommandResult(
            success=False,
            text=text,
            action=action,
            error=self._execution_error(execution),
            error_category=self._execution_category(execution),
            execution_time_ms=execution.execution_time_ms,
            turn_id=turn_id,
        )

    def _execution_error(self, execution: ExecutionResult) -> str:
        if execution.status == ExecutionStatus.FAILED:
            error = create_executor_error(execution.error or "Unknown error", execution.executor_name)
        else:
            # Timeouts and crashes: details stay in the log
            category = self._execution_category(execution)
            error = CommandError(
                category=category,
                message=execution.error or "Unknown error",
                details={"executor": execution.executor_name, "status": execution.status.name},
                recoverable=category == ErrorCategory.TIMEOUT_ERROR,
            )
        return self.error_handler.handle(error)

    @staticmethod
    def _execution_category(execution: ExecutionResult) -> ErrorCategory:
        if execution.status == ExecutionStatus.TIMEOUT:
            return ErrorCategory.TIMEOUT_ERROR
        if execution.status == ExecutionStatus.FAILED:
            return ErrorCategory.EXECUTOR_FAILURE
        return ErrorCategory.INTERNAL_INCONSISTENCY

    def _finish(self, result: CommandResult) -> CommandResult:
        log_turn_end(
            result.turn_id,
            success=result.success,
            intent=result.action.intent.value if result.action else None,
            error=result.error,
        )

        if self._on_result:
            self._on_result(result)

        return result

    def get_status(self) -> Dict[str, Any]:
        """Get current system status."""
        registry = self.interpreter.registry
        return {
            "intents_loaded": len(registry),
            "patterns_loaded": registry.pattern_count,
            "executors_loaded": len(self.executors),
            "dry_run": self._tool_executor.context.dry_run,
            "errors": self.error_handler.get_error_stats(),
        }

    # Event registration
    def on_command(self, callback: Callable[[ActionDescriptor], None]) -> None:
        """Register callback for interpreted commands."""
        self._on_command = callback

    def on_result(self, callback: Callable[[CommandResult], None]) -> None:
        """Register callback for command results."""
        self._on_result = callback


def create_orchestrator(
    config: Optional[ConfigManager] = None,
    dry_run: Optional[bool] = None,
) -> Orchestrator:
    """
    Build an orchestrator with collaborators wired from configuration.

    Args:
        config: Loaded configuration (reads ./config.yaml if omitted)
        dry_run: Override executors.dry_run
    """
    config = config or ConfigManager()
    settings = OrchestratorConfig.from_manager(config)
    if dry_run is not None:
        settings.dry_run = dry_run

    twitter = config.get_section("twitter")
    checker = TwitterHistoryChecker(
        client=create_memory_lol_client(
            base_url=twitter["base_url"],
            timeout_seconds=float(twitter["timeout_seconds"]),
        ),
        save_reports=bool(twitter["save_reports"]),
        report_dir=twitter["report_dir"],
    )

    executors = create_default_executors(
        timeout_seconds=settings.timeout_seconds,
        twitter_checker=checker,
    )
    return Orchestrator(settings, executors=executors)
