"""
Command Matcher
---------------
Deterministic command matching from user text.
No LLM logic. No execution. Only pattern matching.

First intent in priority order wins; inside an intent, the first
registered pattern wins. There is no scoring.
"""

from dataclasses import dataclass, field
from typing import Any, Dict
import logging

from core.errors import NoMatch
from .registry import Intent, Pattern, PatternRegistry


@dataclass(frozen=True)
class MatchResult:
    """
    Result of matching user text to an intent.
    Captures hold type-converted slot values keyed by slot name.
    """
    intent: Intent
    matched_text: str
    pattern: str
    captures: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"MatchResult(intent={self.intent.value}, captures={self.captures})"


class Matcher:
    """
    Matches free text against a frozen PatternRegistry.

    Pure function of (text, registry): calling match() twice with the
    same input yields equal results.
    """

    def __init__(self, registry: PatternRegistry):
        self._registry = registry
        self._logger = logging.getLogger("monad.commands.matcher")

    @property
    def registry(self) -> PatternRegistry:
        return self._registry

    def match(self, text: str) -> MatchResult:
        """
        Match user text to an intent.

        Raises NoMatch if nothing matches, MalformedCapture if a slot
        matched but its value is not acceptable.
        """
        for intent in self._registry.all_intents_in_priority_order():
            for pattern in self._registry.patterns_for_intent(intent):
                found = pattern.regex.search(text)
                if found:
                    return self._build_result(pattern, found)

        self._logger.debug(f"No pattern matched: {text!r}")
        raise NoMatch(text)

    def _build_result(self, pattern: Pattern, found) -> MatchResult:
        """Convert raw captures with their slot types."""
        definition = self._registry.get_definition(pattern.intent)
        captures = {}

        for name in pattern.slot_names:
            slot = definition.get_slot(name)
            captures[name] = slot.type.convert(name, found.group(name))

        self._logger.debug(f"Matched {pattern!r} -> {captures}")

        return MatchResult(
            intent=pattern.intent,
            matched_text=found.group(0),
            pattern=pattern.template,
            captures=captures,
        )
