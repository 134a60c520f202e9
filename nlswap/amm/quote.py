"""Constant-product pricing for pair contracts.

Pairs hold reserves x and y and keep x * y = k (net of fees). Two kinds of
math live here and must not be mixed:

- integer math (quote, quote_amount_in): the only path allowed to produce
  amounts sent on-chain, matching the pair contract's uint256 arithmetic
- float math (derive_price, curve_points): display only, for charts
"""

from __future__ import annotations

from collections.abc import Iterable

from nlswap.constants import (
    DEFAULT_CURVE_DOMAIN,
    DEFAULT_FEE_BPS,
    DISPLAY_CEILING,
    FEE_DENOMINATOR,
)
from nlswap.models.events import CurvePoint
from nlswap.models.tokens import PairHandle
from nlswap.safe_int import DivisionByZero, S, SafeIntError


class InvalidReserves(SafeIntError):
    """A pool side is empty, or a request would drain it."""


def _fee_multiplier(fee_bps: int) -> int:
    """10000 - fee_bps, e.g. 9970 for the standard 30 bps fee."""
    if not 0 <= fee_bps < FEE_DENOMINATOR:
        raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}), got {fee_bps}")
    return FEE_DENOMINATOR - fee_bps


def quote(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """Output amount for selling amount_in into a pair.

    Formula:
        amount_in_with_fee = amount_in * (10000 - fee_bps)
        amount_out = amount_in_with_fee * reserve_out
                     // (reserve_in * 10000 + amount_in_with_fee)

    The result is always strictly below reserve_out, non-decreasing in
    amount_in and non-increasing in reserve_in.

    Args:
        amount_in: Input amount in base units
        reserve_in: Pair reserve of the input token
        reserve_out: Pair reserve of the output token
        fee_bps: Pair fee in basis points (default 30 = 0.3%)

    Returns:
        Output amount in base units (floor)

    Raises:
        InvalidReserves: If either reserve is zero
        Uint256Overflow: If any argument is negative or exceeds uint256
        ValueError: If fee_bps is out of range
    """
    fee_multiplier = _fee_multiplier(fee_bps)
    s_in = S(S(amount_in).to_uint256())
    s_reserve_in = S(S(reserve_in).to_uint256())
    s_reserve_out = S(S(reserve_out).to_uint256())

    if s_reserve_in == 0 or s_reserve_out == 0:
        raise InvalidReserves(f"Empty reserves: reserve_in={reserve_in}, reserve_out={reserve_out}")

    amount_in_with_fee = s_in * fee_multiplier
    numerator = amount_in_with_fee * s_reserve_out
    denominator = s_reserve_in * FEE_DENOMINATOR + amount_in_with_fee

    return (numerator // denominator).to_uint256()


def quote_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """Input needed to receive at least amount_out (inverse of quote, rounded up).

    Formula: amount_in = reserve_in * amount_out * 10000
                         / ((reserve_out - amount_out) * (10000 - fee_bps)) + 1

    Raises:
        InvalidReserves: If a reserve is zero or amount_out >= reserve_out
    """
    fee_multiplier = _fee_multiplier(fee_bps)
    s_out = S(S(amount_out).to_uint256())
    s_reserve_in = S(S(reserve_in).to_uint256())
    s_reserve_out = S(S(reserve_out).to_uint256())

    if s_reserve_in == 0 or s_reserve_out == 0:
        raise InvalidReserves(f"Empty reserves: reserve_in={reserve_in}, reserve_out={reserve_out}")
    if s_out >= s_reserve_out:
        raise InvalidReserves(f"Cannot take {amount_out} out of a reserve of {reserve_out}")
    if s_out == 0:
        return 0

    numerator = s_reserve_in * s_out * FEE_DENOMINATOR
    denominator = (s_reserve_out - s_out) * fee_multiplier
    return ((numerator // denominator) + 1).to_uint256()


def orient_reserves(
    pair: PairHandle,
    reserves: tuple[int, int],
    token_in: str,
) -> tuple[int, int, bool]:
    """Order a (reserve0, reserve1) snapshot as (reserve_in, reserve_out).

    Returns:
        (reserve_in, reserve_out, token_in_is_token0)

    Raises:
        ValueError: If token_in is not one of the pair's tokens
    """
    if not pair.has_token(token_in):
        raise ValueError(f"Token {token_in} not in pair {pair.address}")
    reserve0, reserve1 = reserves
    if pair.is_token0(token_in):
        return reserve0, reserve1, True
    return reserve1, reserve0, False


def derive_price(amount_in: int, amount_out: int) -> float:
    """Execution price amount_out / amount_in, for charting only.

    Raises:
        DivisionByZero: If amount_in is zero
    """
    if amount_in == 0:
        raise DivisionByZero(f"Price of a zero-input trade: {amount_out} / 0")
    return amount_out / amount_in


def curve_points(
    k: float,
    domain: Iterable[int] = DEFAULT_CURVE_DOMAIN,
    ceiling: float = DISPLAY_CEILING,
) -> list[CurvePoint]:
    """Sample y = k / x over an integer domain for the reserve chart.

    Points with x <= 0, y <= 0 or y above the display ceiling are dropped.
    """
    points = []
    for x in domain:
        if x <= 0:
            continue
        y = k / x
        if y <= 0 or y > ceiling:
            continue
        points.append(CurvePoint(x=x, y=y))
    return points


def curve_for_reserves(
    reserve0: int,
    reserve1: int,
    decimals0: int = 18,
    decimals1: int = 18,
    domain: Iterable[int] = DEFAULT_CURVE_DOMAIN,
    ceiling: float = DISPLAY_CEILING,
) -> list[CurvePoint]:
    """Reserve curve of a pair, with k computed in human units."""
    k = (reserve0 / 10**decimals0) * (reserve1 / 10**decimals1)
    return curve_points(k, domain=domain, ceiling=ceiling)
