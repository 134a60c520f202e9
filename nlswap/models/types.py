"""Shared type definitions for exchange models."""

from typing import Annotated

from pydantic import Field

from nlswap.safe_int import UINT256_MAX

# 20-byte address, 0x-prefixed hex
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Non-negative integer that fits in a uint256
Uint256 = Annotated[int, Field(ge=0, le=UINT256_MAX)]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with a 0x prefix.

    Args:
        address: Address with or without 0x prefix, any case
        validate: If True, raise ValueError for malformed addresses

    Returns:
        Lowercase 0x-prefixed address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check that a string is a 0x-prefixed 20-byte hex address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False

