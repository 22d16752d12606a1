# Commands module - Pattern registry, matching and dispatch resolution
# This module does NOT execute commands, only interprets them
# No network, no LLM logic

from .registry import (
    Intent, IntentDefinition, Pattern, PatternRegistry,
    INTENT_PRIORITY, get_default_registry
)
from .matcher import Matcher, MatchResult
from .resolver import ActionDescriptor, DispatchResolver, CANONICAL_PARAMS
from .interpreter import CommandInterpreter

__all__ = [
    "Intent", "IntentDefinition", "Pattern", "PatternRegistry",
    "INTENT_PRIORITY", "get_default_registry",
    "Matcher", "MatchResult",
    "ActionDescriptor", "DispatchResolver", "CANONICAL_PARAMS",
    "CommandInterpreter",
]
