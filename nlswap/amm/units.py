"""Conversion between human token amounts and integer base units.

Human amounts come from model output as Decimals; on-chain amounts are
integers scaled by the token's decimals. Conversions run in a 78-digit
context so that nothing is rounded for values up to uint256.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_DOWN, Decimal

from nlswap.safe_int import UINT256_MAX, S, Uint256Overflow

# 78 digits of precision covers uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

# Largest power of ten below UINT256_MAX
_UINT256_MAX_EXPONENT = len(str(UINT256_MAX)) - 1


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Scale a human amount to base units, rounding down.

    Dust below one base unit is dropped, as a wallet would for the same
    input.

    Raises:
        ValueError: If amount is negative or not finite
        Uint256Overflow: If the scaled amount does not fit in a uint256
    """
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Amount must be a finite non-negative number: {amount}")
    # Magnitude check before scaling; huge exponents never reach int()
    if amount and amount.adjusted() + decimals > _UINT256_MAX_EXPONENT:
        raise Uint256Overflow(f"Amount {amount} with {decimals} decimals exceeds uint256 max")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        base = int(amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))
    return S(base).to_uint256()


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Scale base units back to a human amount (exact)."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount).scaleb(-decimals)
