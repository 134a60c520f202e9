"""Calldata encoding for call steps.

Turns each planned step into the (target, calldata) of the contract call
that performs it: ERC20 approve/transfer on the token, swap/mint/burn on the
pair.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from nlswap.models.steps import (
    AnyStep,
    ApproveStep,
    BurnStep,
    MintStep,
    SwapStep,
    TransferStep,
)
from nlswap.models.types import is_valid_address, normalize_address

# Function selectors
APPROVE_SELECTOR = "0x095ea7b3"  # approve(address,uint256)
TRANSFER_SELECTOR = "0xa9059cbb"  # transfer(address,uint256)
SWAP_SELECTOR = "0x022c0d9f"  # swap(uint256,uint256,address,bytes)
MINT_SELECTOR = "0x6a627842"  # mint(address)
BURN_SELECTOR = "0x89afcb44"  # burn(address)


def _address_bytes(address: str, field: str) -> bytes:
    if not is_valid_address(address):
        raise ValueError(f"Invalid {field} address: {address}")
    return bytes.fromhex(address[2:])


def encode_call_step(step: AnyStep) -> tuple[str, str]:
    """Encode a call step as contract calldata.

    Args:
        step: The step to encode

    Returns:
        Tuple of (target_address, calldata), both 0x-prefixed lowercase hex

    Raises:
        ValueError: If an address in the step is invalid
        TypeError: If the step kind is unknown
    """
    if isinstance(step, ApproveStep):
        args = encode(
            ["address", "uint256"],
            [_address_bytes(step.spender, "spender"), step.amount],
        )
        return normalize_address(step.token), APPROVE_SELECTOR + args.hex()

    if isinstance(step, TransferStep):
        args = encode(
            ["address", "uint256"],
            [_address_bytes(step.to, "recipient"), step.amount],
        )
        return normalize_address(step.token), TRANSFER_SELECTOR + args.hex()

    if isinstance(step, SwapStep):
        # Empty data: a plain swap, not a flash swap callback
        args = encode(
            ["uint256", "uint256", "address", "bytes"],
            [step.amount0_out, step.amount1_out, _address_bytes(step.to, "recipient"), b""],
        )
        return normalize_address(step.pair), SWAP_SELECTOR + args.hex()

    if isinstance(step, MintStep):
        args = encode(["address"], [_address_bytes(step.to, "recipient")])
        return normalize_address(step.pair), MINT_SELECTOR + args.hex()

    if isinstance(step, BurnStep):
        args = encode(["address"], [_address_bytes(step.to, "recipient")])
        return normalize_address(step.pair), BURN_SELECTOR + args.hex()

    raise TypeError(f"Unknown call step: {type(step).__name__}")
