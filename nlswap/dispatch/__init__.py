"""Command dispatch: planning and executing call steps."""

from nlswap.dispatch.dispatcher import CommandDispatcher
from nlswap.dispatch.outcome import (
    AnyEffect,
    DepositEffect,
    DispatchError,
    DispatchOutcome,
    MintEffect,
    RedeemEffect,
    ReservesEffect,
    SwapEffect,
    SwapsEffect,
    VolumeEffect,
)

__all__ = [
    "AnyEffect",
    "CommandDispatcher",
    "DepositEffect",
    "DispatchError",
    "DispatchOutcome",
    "MintEffect",
    "RedeemEffect",
    "ReservesEffect",
    "SwapEffect",
    "SwapsEffect",
    "VolumeEffect",
]
