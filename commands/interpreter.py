"""
Command Interpreter
-------------------
Registry + Matcher + Resolver behind one call.

Usage:
    interpreter = CommandInterpreter()
    action = interpreter.interpret("swap 2.5 MON to 0x...")
    action.intent   # Intent.SWAP
    action.params   # {"amount": 2.5, "contractAddress": "0x..."}
"""

from typing import Optional
import logging

from .matcher import Matcher, MatchResult
from .registry import PatternRegistry, get_default_registry
from .resolver import ActionDescriptor, DispatchResolver


class CommandInterpreter:
    """
    Interprets free text into an ActionDescriptor.

    Stateless apart from the frozen registry, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        resolver: Optional[DispatchResolver] = None,
    ):
        self.registry = registry if registry is not None else get_default_registry()
        if not self.registry.frozen:
            self.registry.freeze()

        self.matcher = Matcher(self.registry)
        self.resolver = resolver or DispatchResolver(self.registry)
        self._logger = logging.getLogger("monad.commands.interpreter")

    def match(self, text: str) -> MatchResult:
        """Match only; raises NoMatch / MalformedCapture."""
        return self.matcher.match(text)

    def interpret(self, text: str) -> ActionDescriptor:
        """
        Match and resolve user text.

        Raises NoMatch, MalformedCapture or InternalInconsistency.
        """
        result = self.matcher.match(text)
        action = self.resolver.resolve(result)
        self._logger.info(f"Interpreted '{result.matched_text}' as {action.intent.value}")
        return action
