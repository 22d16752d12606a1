"""
Pattern Registry
----------------
Canonical table of intents and the phrasings that express them.
No execution, no network. Only pattern definitions.

Patterns are loaded from YAML, compiled once, then frozen.
Every surface (CLI, HTTP, MCP) shares the same registry.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging
import re
import yaml

from core.errors import RegistryError
from .slots import SlotType, SLOT_TYPES


DEFAULT_REGISTRY_PATH = Path(__file__).parent / "command_map.yaml"


class Intent(str, Enum):
    """Closed set of recognized user requests."""
    SWAP = "swap"
    SEND = "send"
    ANALYZE_TOKEN = "analyze-token"
    ANALYZE_ADDRESS = "analyze-address"
    CHECK_TWITTER = "check-twitter"


# Transaction intents first, then analysis, then social lookups.
INTENT_PRIORITY: Tuple[Intent, ...] = (
    Intent.SWAP,
    Intent.SEND,
    Intent.ANALYZE_TOKEN,
    Intent.ANALYZE_ADDRESS,
    Intent.CHECK_TWITTER,
)


@dataclass(frozen=True)
class SlotDefinition:
    """A named, typed parameter an intent captures."""
    name: str
    type: SlotType


@dataclass(frozen=True)
class IntentDefinition:
    """Definition of an intent from the registry file."""
    intent: Intent
    name: str
    description: str
    slots: Tuple[SlotDefinition, ...] = ()

    @property
    def slot_names(self) -> Tuple[str, ...]:
        return tuple(slot.name for slot in self.slots)

    def get_slot(self, name: str) -> Optional[SlotDefinition]:
        for slot in self.slots:
            if slot.name == name:
                return slot
        return None


@dataclass(frozen=True)
class Pattern:
    """One compiled phrasing of an intent."""
    intent: Intent
    template: str
    regex: re.Pattern
    slot_names: Tuple[str, ...]

    def __repr__(self) -> str:
        return f"Pattern({self.intent.value}: {self.template!r})"


_PLACEHOLDER = re.compile(r"\{(\w+)\}")
_WHITESPACE = re.compile(r"(\s+)")


def _literal_to_regex(text: str) -> str:
    """Escape literal text; any run of whitespace matches one or more."""
    parts = []
    for chunk in _WHITESPACE.split(text):
        if not chunk:
            continue
        parts.append(r"\s+" if chunk.isspace() else re.escape(chunk))
    return "".join(parts)


class PatternRegistry:
    """
    Registry of intents and their ordered patterns.

    Responsibilities:
    - Load intent definitions from YAML
    - Compile pattern templates to regexes
    - Serve patterns in priority order

    Mutation is only allowed before freeze().
    """

    def __init__(self, registry_path: Optional[str] = None):
        self._definitions: Dict[Intent, IntentDefinition] = {}
        self._patterns: Dict[Intent, List[Pattern]] = {}
        self._frozen = False
        self._logger = logging.getLogger("monad.commands.registry")

        if registry_path:
            self.load(registry_path)

    def load(self, registry_path: str) -> None:
        """Load intent definitions and patterns from a YAML file."""
        path = Path(registry_path)

        if not path.exists():
            raise RegistryError(f"Command registry not found: {registry_path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        for intent_data in data.get('intents', []):
            try:
                intent = Intent(intent_data['id'])
            except ValueError:
                raise RegistryError(f"Unknown intent id: {intent_data['id']}") from None

            slots = []
            for slot_data in intent_data.get('slots', []):
                type_name = slot_data.get('type', '')
                if type_name not in SLOT_TYPES:
                    raise RegistryError(
                        f"Unknown slot type '{type_name}' in intent {intent.value}"
                    )
                slots.append(SlotDefinition(name=slot_data['name'], type=SLOT_TYPES[type_name]))

            self.define_intent(IntentDefinition(
                intent=intent,
                name=intent_data.get('name', intent.value),
                description=intent_data.get('description', ''),
                slots=tuple(slots),
            ))

            for template in intent_data.get('patterns', []):
                self.register(intent, template)

        self._logger.debug(f"Loaded {self.pattern_count} patterns from {path}")

    def define_intent(self, definition: IntentDefinition) -> None:
        """Declare an intent and its slots. Must precede register()."""
        self._ensure_mutable()

        if definition.intent in self._definitions:
            raise RegistryError(f"Intent defined twice: {definition.intent.value}")

        self._definitions[definition.intent] = definition
        self._patterns[definition.intent] = []

    def register(self, intent: Intent, template: str) -> Pattern:
        """Compile and append a pattern template for an intent."""
        self._ensure_mutable()

        definition = self._definitions.get(intent)
        if definition is None:
            raise RegistryError(f"Pattern registered for undefined intent: {intent}")

        pattern = self._compile(definition, template.strip())
        self._patterns[intent].append(pattern)
        return pattern

    def _compile(self, definition: IntentDefinition, template: str) -> Pattern:
        """
        Convert a template to a compiled regex.
        "swap {amount} MON to {contract_address}" becomes
        r"\\bswap\\s+(?P<amount>...)\\s+MON\\s+to\\s+(?P<contract_address>...)"
        """
        parts = []
        slot_names = []
        position = 0

        for placeholder in _PLACEHOLDER.finditer(template):
            name = placeholder.group(1)
            slot = definition.get_slot(name)
            if slot is None:
                raise RegistryError(
                    f"Undeclared slot '{name}' in pattern {template!r} "
                    f"for intent {definition.intent.value}"
                )
            if name in slot_names:
                raise RegistryError(f"Slot '{name}' used twice in pattern {template!r}")

            parts.append(_literal_to_regex(template[position:placeholder.start()]))
            parts.append(slot.type.group(name))
            slot_names.append(name)
            position = placeholder.end()

        parts.append(_literal_to_regex(template[position:]))

        missing = set(definition.slot_names) - set(slot_names)
        if missing:
            raise RegistryError(
                f"Pattern {template!r} does not capture {sorted(missing)} "
                f"for intent {definition.intent.value}"
            )

        regex = re.compile(r"\b" + "".join(parts), re.IGNORECASE)

        return Pattern(
            intent=definition.intent,
            template=template,
            regex=regex,
            slot_names=tuple(slot_names),
        )

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RegistryError("Pattern registry is frozen; register during initialization only")

    def freeze(self) -> "PatternRegistry":
        """End initialization. Later register() calls raise."""
        self._frozen = True
        self._logger.info(
            f"Pattern registry frozen: {len(self)} intents, {self.pattern_count} patterns"
        )
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def pattern_count(self) -> int:
        return sum(len(patterns) for patterns in self._patterns.values())

    def patterns_for_intent(self, intent: Intent) -> Tuple[Pattern, ...]:
        """Patterns for an intent, in registration order."""
        return tuple(self._patterns.get(intent, ()))

    def all_intents_in_priority_order(self) -> Tuple[Intent, ...]:
        """Defined intents, ordered by the fixed intent priority."""
        return tuple(intent for intent in INTENT_PRIORITY if intent in self._definitions)

    def get_definition(self, intent: Intent) -> Optional[IntentDefinition]:
        """Get an intent definition."""
        return self._definitions.get(intent)

    def list_definitions(self) -> List[IntentDefinition]:
        """Definitions in priority order."""
        return [self._definitions[intent] for intent in self.all_intents_in_priority_order()]

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, intent: object) -> bool:
        return intent in self._definitions


@lru_cache(maxsize=None)
def _load_registry(path: str) -> PatternRegistry:
    return PatternRegistry(path).freeze()


def get_default_registry(registry_path: Optional[str] = None) -> PatternRegistry:
    """
    Get the canonical frozen registry.

    Loaded once per path; safe to share between threads since it is
    read-only after freeze().
    """
    path = Path(registry_path) if registry_path else DEFAULT_REGISTRY_PATH
    return _load_registry(str(path.resolve()))
