"""Tests for call step calldata encoding and Swap log decoding."""

import pytest
from eth_abi import encode  # type: ignore[attr-defined]
from web3 import Web3

from nlswap.chain import decode_swap_log, encode_call_step
from nlswap.chain.encoding import (
    APPROVE_SELECTOR,
    BURN_SELECTOR,
    MINT_SELECTOR,
    SWAP_SELECTOR,
    TRANSFER_SELECTOR,
)
from nlswap.constants import SWAP_EVENT_SIGNATURE, SWAP_EVENT_TOPIC
from nlswap.models import ApproveStep, BurnStep, MintStep, SwapEvent, SwapStep, TransferStep
from tests.helpers import ACCOUNT, PAIR_A_AX, TOKEN_A


def word(value: int) -> str:
    return f"{value:064x}"


def address_word(address: str) -> str:
    return address[2:].rjust(64, "0")


class TestEncodeCallStep:
    """Tests for encode_call_step."""

    def test_approve(self):
        """approve(spender, amount) on the token."""
        target, calldata = encode_call_step(ApproveStep(token=TOKEN_A, spender=PAIR_A_AX, amount=1000))
        assert target == TOKEN_A
        assert calldata == APPROVE_SELECTOR + address_word(PAIR_A_AX) + word(1000)

    def test_transfer(self):
        """transfer(to, amount) on the token."""
        target, calldata = encode_call_step(TransferStep(token=TOKEN_A, to=PAIR_A_AX, amount=7))
        assert target == TOKEN_A
        assert calldata == TRANSFER_SELECTOR + address_word(PAIR_A_AX) + word(7)

    def test_swap_has_empty_data(self):
        """swap(amount0Out, amount1Out, to, "") on the pair."""
        step = SwapStep(pair=PAIR_A_AX, amount0_out=0, amount1_out=493, to=ACCOUNT)
        target, calldata = encode_call_step(step)
        assert target == PAIR_A_AX
        assert calldata.startswith(SWAP_SELECTOR)
        body = calldata[len(SWAP_SELECTOR) :]
        # Head: two amounts, recipient, offset of data; tail: zero length
        assert body == word(0) + word(493) + address_word(ACCOUNT) + word(128) + word(0)

    def test_mint_and_burn(self):
        """mint(to) and burn(to) on the pair."""
        _, mint = encode_call_step(MintStep(pair=PAIR_A_AX, to=ACCOUNT))
        _, burn = encode_call_step(BurnStep(pair=PAIR_A_AX, to=ACCOUNT))
        assert mint == MINT_SELECTOR + address_word(ACCOUNT)
        assert burn == BURN_SELECTOR + address_word(ACCOUNT)

    def test_checksummed_target_normalized(self):
        """Targets come back lowercase."""
        checksummed = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
        target, _ = encode_call_step(ApproveStep(token=checksummed, spender=PAIR_A_AX, amount=1))
        assert target == TOKEN_A

    def test_unknown_step_raises(self):
        """Only the five call steps can be encoded."""
        with pytest.raises(TypeError):
            encode_call_step("swap")  # type: ignore[arg-type]


class TestDecodeSwapLog:
    """Tests for decode_swap_log."""

    def test_decodes_amounts(self):
        """The four amounts come back in declaration order."""
        data = encode(["uint256", "uint256", "uint256", "uint256"], [1000, 0, 0, 493])
        assert decode_swap_log(data) == SwapEvent(
            amount0_in=1000, amount1_in=0, amount0_out=0, amount1_out=493
        )


class TestSwapEventTopic:
    """Tests for the Swap event topic constant."""

    def test_topic_is_keccak_of_signature(self):
        assert Web3.to_hex(Web3.keccak(text=SWAP_EVENT_SIGNATURE)) == SWAP_EVENT_TOPIC
