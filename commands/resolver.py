"""
Dispatch Resolver
-----------------
Turns a MatchResult into an ActionDescriptor with the parameter names
each downstream executor expects. Shapes data only; no I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from core.errors import InternalInconsistency
from .matcher import MatchResult
from .registry import Intent, PatternRegistry


# Slot name -> canonical parameter name, per intent.
CANONICAL_PARAMS: Dict[Intent, Dict[str, str]] = {
    Intent.SWAP: {"amount": "amount", "contract_address": "contractAddress"},
    Intent.SEND: {"amount": "amount", "to_address": "toAddress"},
    Intent.ANALYZE_TOKEN: {"token_address": "tokenAddress"},
    Intent.ANALYZE_ADDRESS: {"address": "address"},
    Intent.CHECK_TWITTER: {"screen_name": "screenName"},
}


@dataclass(frozen=True)
class ActionDescriptor:
    """Normalized interpretation output, handed to an executor."""
    intent: Intent
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"intent": self.intent.value, "params": dict(self.params)}

    def __repr__(self) -> str:
        return f"ActionDescriptor(intent={self.intent.value}, params={self.params})"


class DispatchResolver:
    """Maps slot captures to canonical parameter names."""

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        param_names: Optional[Mapping[Intent, Mapping[str, str]]] = None,
    ):
        self._registry = registry
        self._param_names = param_names if param_names is not None else CANONICAL_PARAMS

    def resolve(self, match: MatchResult) -> ActionDescriptor:
        """
        Build the ActionDescriptor for a match.

        Raises InternalInconsistency when the intent is unknown to the
        resolver or registry, or when a declared slot is missing.
        """
        intent = match.intent
        mapping = self._param_names.get(intent)

        if mapping is None:
            raise InternalInconsistency(
                f"No parameter mapping for intent: {intent}",
                details={"intent": str(intent)},
            )

        if self._registry is not None and intent not in self._registry:
            raise InternalInconsistency(
                f"Intent not in registry: {intent}",
                details={"intent": str(intent)},
            )

        params = {}
        for slot_name, param_name in mapping.items():
            if slot_name not in match.captures:
                raise InternalInconsistency(
                    f"Match for {intent.value} is missing slot '{slot_name}'",
                    details={"intent": intent.value, "slot": slot_name},
                )
            params[param_name] = match.captures[slot_name]

        return ActionDescriptor(intent=intent, params=params)
