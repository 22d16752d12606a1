"""
Tool Executor
-------------
Runs the executor registered for an action's intent, with timeout
enforcement and logging. Never raises for executor problems; every
outcome comes back as an ExecutionResult.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional
import concurrent.futures
import logging

from commands.registry import Intent
from commands.resolver import ActionDescriptor
from .registry import Executor, ExecutorFailure, ExecutorOutput, ExecutorRegistry


class ExecutionStatus(Enum):
    """Status of an execution."""
    SUCCESS = auto()
    FAILED = auto()            # Executor raised ExecutorFailure
    UNKNOWN_EXECUTOR = auto()  # No executor registered for the intent
    TIMEOUT = auto()
    EXECUTION_ERROR = auto()   # Executor crashed


@dataclass
class ExecutionResult:
    """Result of executing an action."""
    intent: Intent
    executor_name: str
    status: ExecutionStatus
    text: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    execution_time_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    turn_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS

    def __repr__(self) -> str:
        status = "✓" if self.success else "✗"
        return f"ExecutionResult({status} {self.executor_name}: {self.text or self.error})"


@dataclass
class ExecutionContext:
    """Context for execution."""
    dry_run: bool = False  # If True, describe instead of running


class ToolExecutor:
    """
    Dispatches ActionDescriptors to their executors.

    Rules:
    - One executor per intent
    - Timeouts enforced per executor
    - All executions logged
    """

    def __init__(
        self,
        registry: ExecutorRegistry,
        context: Optional[ExecutionContext] = None
    ):
        self.registry = registry
        self.context = context or ExecutionContext()
        self._logger = logging.getLogger("monad.tools.executor")

    def execute(
        self,
        action: ActionDescriptor,
        turn_id: Optional[str] = None
    ) -> ExecutionResult:
        """Execute an action with its registered executor."""
        executor = self.registry.get(action.intent)
        if executor is None:
            return ExecutionResult(
                intent=action.intent,
                executor_name="",
                status=ExecutionStatus.UNKNOWN_EXECUTOR,
                error=f"No executor registered for intent: {action.intent.value}",
                turn_id=turn_id
            )

        if self.context.dry_run:
            return ExecutionResult(
                intent=action.intent,
                executor_name=executor.name,
                status=ExecutionStatus.SUCCESS,
                text=f"[DRY RUN] Would execute {executor.name} with {action.params}",
                turn_id=turn_id
            )

        return self._execute_with_timeout(executor, action, turn_id)

    def _execute_with_timeout(
        self,
        executor: Executor,
        action: ActionDescriptor,
        turn_id: Optional[str]
    ) -> ExecutionResult:
        """Execute with timeout and error handling."""
        start_time = datetime.now(timezone.utc)
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)

        try:
            future = pool.submit(executor.handler, dict(action.params))
            output = future.result(timeout=executor.timeout_seconds)
        except concurrent.futures.TimeoutError:
            self._logger.error(f"Timeout executing {executor.name}")
            return ExecutionResult(
                intent=action.intent,
                executor_name=executor.name,
                status=ExecutionStatus.TIMEOUT,
                error=f"Execution timed out after {executor.timeout_seconds}s",
                turn_id=turn_id
            )
        except ExecutorFailure as e:
            self._logger.warning(f"{executor.name} failed: {e.message}")
            return ExecutionResult(
                intent=action.intent,
                executor_name=executor.name,
                status=ExecutionStatus.FAILED,
                error=e.message,
                execution_time_ms=self._elapsed_ms(start_time),
                turn_id=turn_id
            )
        except Exception as e:
            self._logger.exception(f"Executor {executor.name} crashed")
            return ExecutionResult(
                intent=action.intent,
                executor_name=executor.name,
                status=ExecutionStatus.EXECUTION_ERROR,
                error=f"Unexpected error: {e}",
                execution_time_ms=self._elapsed_ms(start_time),
                turn_id=turn_id
            )
        finally:
            # Don't block on a timed-out worker
            pool.shutdown(wait=False)

        if isinstance(output, str):
            output = ExecutorOutput(text=output)
        elif not isinstance(output, ExecutorOutput):
            self._logger.error(
                f"Executor {executor.name} returned {type(output).__name__}, not text"
            )
            return ExecutionResult(
                intent=action.intent,
                executor_name=executor.name,
                status=ExecutionStatus.EXECUTION_ERROR,
                error=f"Unexpected error: executor returned {type(output).__name__}",
                execution_time_ms=self._elapsed_ms(start_time),
                turn_id=turn_id
            )

        execution_time = self._elapsed_ms(start_time)
        self._logger.info(
            f"Executed {executor.name} in {execution_time:.1f}ms",
            extra={"executor": executor.name, "execution_time_ms": execution_time}
        )

        return ExecutionResult(
            intent=action.intent,
            executor_name=executor.name,
            status=ExecutionStatus.SUCCESS,
            text=output.text,
            data=output.data,
            execution_time_ms=execution_time,
            turn_id=turn_id
        )

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> float:
        return (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
