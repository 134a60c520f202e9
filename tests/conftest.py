"""Pytest configuration and fixtures."""

import pytest

from nlswap.dispatch import CommandDispatcher
from nlswap.service import IntentService
from nlswap.tokens import TokenRegistry
from nlswap.tokens.defaults import DEFAULT_TOKENS
from tests.helpers.constants import ACCOUNT, PAIR_A_AX, PAIR_B_BX, TOKEN_A, TOKEN_AX, TOKEN_B, TOKEN_BX
from tests.helpers.fakes import FakeChainClient


@pytest.fixture
def registry() -> TokenRegistry:
    """Built-in devnet tokens with 0 decimals, so amounts are base units."""
    return TokenRegistry.from_pairs(DEFAULT_TOKENS, decimals=0)


@pytest.fixture
def chain() -> FakeChainClient:
    """Fake chain with A/AX and B/BX pairs deployed."""
    fake = FakeChainClient()
    fake.add_pair(TOKEN_A, TOKEN_AX, PAIR_A_AX, reserves=(100_000, 50_000))
    fake.add_pair(TOKEN_B, TOKEN_BX, PAIR_B_BX, reserves=(1_000_000, 1_000_000))
    return fake


@pytest.fixture
def dispatcher(chain: FakeChainClient, registry: TokenRegistry) -> CommandDispatcher:
    """Dispatcher for ACCOUNT over the fake chain."""
    return CommandDispatcher(chain, ACCOUNT, registry=registry)


@pytest.fixture
def service(registry: TokenRegistry, dispatcher: CommandDispatcher) -> IntentService:
    """Service without a language model."""
    return IntentService(registry, dispatcher=dispatcher)
