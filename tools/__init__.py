# Tools module - Executor registry and execution
# Each intent has exactly one executor; hosts may replace the defaults

from .registry import (
    Executor, ExecutorCategory, ExecutorFailure, ExecutorOutput,
    ExecutorRegistry, create_default_executors
)
from .executor import ToolExecutor, ExecutionResult, ExecutionStatus, ExecutionContext

__all__ = [
    "Executor",
    "ExecutorCategory",
    "ExecutorFailure",
    "ExecutorOutput",
    "ExecutorRegistry",
    "create_default_executors",
    "ToolExecutor",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutionContext",
]
