"""
Executor Registry
-----------------
One downstream executor per intent.
Executors are opaque callables: params in, ExecutorOutput out,
ExecutorFailure for handled failures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging

from commands.registry import Intent


class ExecutorCategory(str, Enum):
    """What kind of collaborator an executor fronts."""
    BLOCKCHAIN = "blockchain"
    ANALYTICS = "analytics"
    SOCIAL = "social"


@dataclass
class ExecutorOutput:
    """Success payload: human-readable text plus optional structured data."""
    text: str
    data: Optional[Dict[str, Any]] = None


class ExecutorFailure(Exception):
    """Handled executor failure with a user-presentable message."""

    def __init__(self, message: str, code: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class Executor:
    """
    Executor definition.

    Each executor defines:
    - The intent it serves
    - Name and description
    - Handler taking the action params
    - Timeout enforced by the ToolExecutor
    """
    intent: Intent
    name: str
    description: str
    handler: Callable[[Dict[str, Any]], ExecutorOutput]
    category: ExecutorCategory = ExecutorCategory.BLOCKCHAIN
    timeout_seconds: float = 30.0

    def __repr__(self) -> str:
        return f"Executor(name={self.name}, intent={self.intent.value})"


class ExecutorRegistry:
    """Registry mapping intents to their executors."""

    def __init__(self):
        self._executors: Dict[Intent, Executor] = {}
        self._logger = logging.getLogger("monad.tools.registry")

    def register(self, executor: Executor) -> None:
        """Register an executor, replacing any existing one for the intent."""
        if executor.intent in self._executors:
            self._logger.warning(f"Overwriting executor for intent: {executor.intent.value}")

        self._executors[executor.intent] = executor
        self._logger.debug(f"Registered executor: {executor.name} ({executor.intent.value})")

    def unregister(self, intent: Intent) -> bool:
        """Unregister the executor for an intent."""
        if intent in self._executors:
            del self._executors[intent]
            return True
        return False

    def get(self, intent: Intent) -> Optional[Executor]:
        """Get the executor for an intent."""
        return self._executors.get(intent)

    def list_executors(self) -> List[Executor]:
        """List all registered executors."""
        return list(self._executors.values())

    def __len__(self) -> int:
        return len(self._executors)

    def __contains__(self, intent: object) -> bool:
        return intent in self._executors


def create_default_executors(
    timeout_seconds: float = 30.0,
    twitter_checker=None,
) -> ExecutorRegistry:
    """
    Create registry with the default executors.

    Chain and analytics intents get plan executors that describe the
    action for the signing / analytics collaborator; check-twitter gets
    the memory.lol lookup.
    """
    # Import here to avoid circular imports
    from .plans import plan_swap, plan_send, plan_token_analysis, plan_address_analysis
    from .twitter import TwitterHistoryChecker

    registry = ExecutorRegistry()
    checker = twitter_checker or TwitterHistoryChecker()

    registry.register(Executor(
        intent=Intent.SWAP,
        name="uniswap-swap",
        description="Swap MON for a token through the testnet router",
        handler=plan_swap,
        category=ExecutorCategory.BLOCKCHAIN,
        timeout_seconds=timeout_seconds,
    ))

    registry.register(Executor(
        intent=Intent.SEND,
        name="send-tx",
        description="Send MON to an address",
        handler=plan_send,
        category=ExecutorCategory.BLOCKCHAIN,
        timeout_seconds=timeout_seconds,
    ))

    registry.register(Executor(
        intent=Intent.ANALYZE_TOKEN,
        name="token-analyzer",
        description="Analyze an ERC-20 token contract",
        handler=plan_token_analysis,
        category=ExecutorCategory.ANALYTICS,
        timeout_seconds=timeout_seconds,
    ))

    registry.register(Executor(
        intent=Intent.ANALYZE_ADDRESS,
        name="address-analyzer",
        description="Analyze a wallet address",
        handler=plan_address_analysis,
        category=ExecutorCategory.ANALYTICS,
        timeout_seconds=timeout_seconds,
    ))

    registry.register(Executor(
        intent=Intent.CHECK_TWITTER,
        name="twitter-checker",
        description="Twitter username change history from memory.lol",
        handler=checker,
        category=ExecutorCategory.SOCIAL,
        timeout_seconds=timeout_seconds,
    ))

    return registry
