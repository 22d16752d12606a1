"""
Slot Types
----------
Typed capture slots used inside command patterns.

Each slot type owns the regex fragment that bounds what it can capture
and the converter that turns the captured text into a typed value.
Converters raise MalformedCapture; the regex alone decides NoMatch.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict
import math

from core.errors import MalformedCapture


def _to_amount(slot: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise MalformedCapture(slot, raw, "not a decimal number") from None

    if not math.isfinite(value):
        raise MalformedCapture(slot, raw, "amount is not a finite number")
    if value < 0:
        raise MalformedCapture(slot, raw, "amount must not be negative")
    return value


def _to_address(slot: str, raw: str) -> str:
    # Checksumming belongs to the chain collaborator; keep the text verbatim.
    return raw


def _to_handle(slot: str, raw: str) -> str:
    handle = raw[1:] if raw.startswith("@") else raw
    if not 1 <= len(handle) <= 15:
        raise MalformedCapture(slot, raw, "handle must be 1-15 characters")
    return handle


@dataclass(frozen=True)
class SlotType:
    """A named capture type: regex fragment plus converter."""
    name: str
    regex: str
    converter: Callable[[str, str], Any]
    prefix: str = ""  # Matched before the group, never captured

    def group(self, slot_name: str) -> str:
        """Regex for a named capture group of this type."""
        return f"{self.prefix}(?P<{slot_name}>{self.regex})"

    def convert(self, slot_name: str, raw: str) -> Any:
        return self.converter(slot_name, raw)


AMOUNT = SlotType(
    name="amount",
    regex=r"\d+(?:\.\d+)?",
    converter=_to_amount,
)

# Exactly 40 hex digits; a 41st digit fails the whole pattern.
ADDRESS = SlotType(
    name="address",
    regex=r"\b0x[0-9a-f]{40}(?![0-9a-f])",
    converter=_to_address,
)

# Twitter handles: word characters only, at most 15 of them. A bare
# "history" is the keyword of the longer phrasings, never a handle; an
# explicit "@history" still is.
HANDLE = SlotType(
    name="handle",
    regex=r"[a-z0-9_]{1,15}(?![a-z0-9_])",
    converter=_to_handle,
    prefix=r"(?:@|(?!history(?![a-z0-9_])))",
)

SLOT_TYPES: Dict[str, SlotType] = {
    slot.name: slot for slot in (AMOUNT, ADDRESS, HANDLE)
}


def get_slot_type(name: str) -> SlotType:
    """Look up a slot type by name. Raises KeyError if unknown."""
    return SLOT_TYPES[name]
