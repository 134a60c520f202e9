"""Data models for tokens, commands, call steps and swap history."""

from nlswap.models.commands import (
    Command,
    DepositCommand,
    QueryCommand,
    QueryKind,
    RedeemCommand,
    SwapCommand,
    TokenAmount,
)
from nlswap.models.events import CurvePoint, PricePoint, SwapEvent, SwapSummary
from nlswap.models.failures import (
    AnyCommand,
    FailureKind,
    ValidationFailure,
    ValidationResult,
)
from nlswap.models.steps import (
    AnyStep,
    ApproveStep,
    BurnStep,
    CallStep,
    MintStep,
    SwapStep,
    TransferStep,
)
from nlswap.models.tokens import PairHandle, PoolListing, Token
from nlswap.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Tokens and pairs
    "Token",
    "PairHandle",
    "PoolListing",
    # Commands
    "AnyCommand",
    "Command",
    "DepositCommand",
    "QueryCommand",
    "QueryKind",
    "RedeemCommand",
    "SwapCommand",
    "TokenAmount",
    # Validation
    "FailureKind",
    "ValidationFailure",
    "ValidationResult",
    # Call steps
    "AnyStep",
    "ApproveStep",
    "BurnStep",
    "CallStep",
    "MintStep",
    "SwapStep",
    "TransferStep",
    # History
    "CurvePoint",
    "PricePoint",
    "SwapEvent",
    "SwapSummary",
]
