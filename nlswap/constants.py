"""Exchange constants for the pair contracts nlswap drives.

Centralizes fee parameters, event signatures and chart defaults.
"""

from nlswap.models.types import is_valid_address

# Standard pair fee in basis points (30 = 0.3%)
DEFAULT_FEE_BPS = 30
FEE_DENOMINATOR = 10_000

# Tokens are assumed to use 18 decimals unless the registry says otherwise
DEFAULT_TOKEN_DECIMALS = 18

# Swap topic is keccak256 of the signature
SWAP_EVENT_SIGNATURE = "Swap(address,uint256,uint256,uint256,uint256,address)"
SWAP_EVENT_TOPIC = "0xd78ad95fa46c994b6551d0da85fc275fe613ce37657fb8d5e3d130840159d822"

# Reserve curve sampling defaults (display only)
DEFAULT_CURVE_DOMAIN = range(1, 101)
DISPLAY_CEILING = 1_000_000.0

# Symbols the model may use to ask for every pool at once
WILDCARD_POOL_NAMES = frozenset({"all", "*", "every", "any"})


def _validate_contract_address(name: str, address: str) -> str:
    """Validate a well-known contract address at import time."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Factory of the local devnet deployment the default token table belongs to
DEFAULT_FACTORY_ADDRESS = _validate_contract_address(
    "factory", "0x0165878a594ca255338adfa4d48449f69242eb8f"
)
