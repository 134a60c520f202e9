"""Test helpers module for shared test utilities.

- constants: Token, pair and account addresses
- factories: Raw intents and swap events
- fakes: In-memory chain client
"""

from tests.helpers.constants import (
    ACCOUNT,
    PAIR_A_AX,
    PAIR_B_BX,
    TOKEN_A,
    TOKEN_AX,
    TOKEN_B,
    TOKEN_BX,
)
from tests.helpers.factories import deposit_intent, make_swap_event, query_intent, swap_intent
from tests.helpers.fakes import FakeChainClient

__all__ = [
    # Constants
    "ACCOUNT",
    "PAIR_A_AX",
    "PAIR_B_BX",
    "TOKEN_A",
    "TOKEN_AX",
    "TOKEN_B",
    "TOKEN_BX",
    # Factories
    "deposit_intent",
    "make_swap_event",
    "query_intent",
    "swap_intent",
    # Fakes
    "FakeChainClient",
]
