"""Constant-product market math."""

from nlswap.amm.quote import (
    InvalidReserves,
    curve_for_reserves,
    curve_points,
    derive_price,
    orient_reserves,
    quote,
    quote_amount_in,
)
from nlswap.amm.units import from_base_units, to_base_units

__all__ = [
    "InvalidReserves",
    "curve_for_reserves",
    "curve_points",
    "derive_price",
    "from_base_units",
    "orient_reserves",
    "quote",
    "quote_amount_in",
    "to_base_units",
]
