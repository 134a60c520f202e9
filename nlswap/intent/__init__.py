"""Intent extraction and validation."""

from nlswap.intent.parsing import extract_intent
from nlswap.intent.validator import IntentValidator

__all__ = ["IntentValidator", "extract_intent"]
