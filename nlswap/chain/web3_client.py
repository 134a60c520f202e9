"""ChainClient backed by a JSON-RPC node through web3."""

from __future__ import annotations

from typing import Any

import structlog
from eth_abi import decode  # type: ignore[attr-defined]
from web3 import Web3

from nlswap.chain.client import ChainClientError
from nlswap.chain.encoding import encode_call_step
from nlswap.constants import SWAP_EVENT_TOPIC
from nlswap.models.events import SwapEvent
from nlswap.models.steps import AnyStep
from nlswap.models.tokens import PairHandle
from nlswap.models.types import normalize_address

logger = structlog.get_logger()

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Factory ABI - minimal, just the functions we need
FACTORY_ABI = [
    {
        "name": "getPair",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "outputs": [{"name": "pair", "type": "address"}],
    },
    {
        "name": "allPairsLength",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "allPairs",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "", "type": "uint256"}],
        "outputs": [{"name": "pair", "type": "address"}],
    },
]

# Pair ABI - read functions only; writes go through encode_call_step
PAIR_ABI = [
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
    },
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


def decode_swap_log(data: bytes) -> SwapEvent:
    """Decode the non-indexed part of a Swap log.

    Swap(address indexed sender, uint amount0In, uint amount1In,
         uint amount0Out, uint amount1Out, address indexed to)
    """
    amount0_in, amount1_in, amount0_out, amount1_out = decode(
        ["uint256", "uint256", "uint256", "uint256"], data
    )
    return SwapEvent(
        amount0_in=amount0_in,
        amount1_in=amount1_in,
        amount0_out=amount0_out,
        amount1_out=amount1_out,
    )


class Web3ChainClient:
    """Real chain client talking to a node over HTTP.

    Transactions are sent from `account`. With a private key they are signed
    locally; without one the node must manage the account (e.g. a devnet
    with unlocked accounts).
    """

    def __init__(
        self,
        rpc_url: str,
        factory_address: str,
        account: str,
        private_key: str | None = None,
        receipt_timeout: float = 120.0,
    ) -> None:
        """Connect to the node.

        Args:
            rpc_url: HTTP RPC URL
            factory_address: Pair factory contract address
            account: Sender of every transaction
            private_key: Optional key for local signing
            receipt_timeout: Seconds to wait for each transaction to be mined
        """
        self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        self.factory = self.w3.eth.contract(
            address=Web3.to_checksum_address(factory_address),
            abi=FACTORY_ABI,
        )
        self.account = Web3.to_checksum_address(account)
        self._private_key = private_key
        self.receipt_timeout = receipt_timeout

    def _pair_contract(self, pair: PairHandle) -> Any:
        return self.w3.eth.contract(address=Web3.to_checksum_address(pair.address), abi=PAIR_ABI)

    def resolve_pair(self, token_a: str, token_b: str) -> PairHandle | None:
        try:
            pair_address = self.factory.functions.getPair(
                Web3.to_checksum_address(token_a),
                Web3.to_checksum_address(token_b),
            ).call()
        except Exception as e:
            raise ChainClientError(f"getPair failed: {e}") from e

        if normalize_address(pair_address) == ZERO_ADDRESS:
            return None
        return self._pair_handle(pair_address)

    def list_pairs(self) -> list[PairHandle]:
        try:
            count = self.factory.functions.allPairsLength().call()
            addresses = [self.factory.functions.allPairs(i).call() for i in range(count)]
        except Exception as e:
            raise ChainClientError(f"allPairs failed: {e}") from e

        logger.debug("pairs_listed", count=len(addresses))
        return [self._pair_handle(address) for address in addresses]

    def _pair_handle(self, pair_address: str) -> PairHandle:
        contract = self.w3.eth.contract(address=pair_address, abi=PAIR_ABI)
        try:
            token0 = contract.functions.token0().call()
            token1 = contract.functions.token1().call()
        except Exception as e:
            raise ChainClientError(f"Pair token lookup failed: {e}") from e

        return PairHandle(
            address=normalize_address(pair_address),
            token0=normalize_address(token0),
            token1=normalize_address(token1),
        )

    def get_reserves(self, pair: PairHandle) -> tuple[int, int]:
        try:
            reserve0, reserve1, _ = self._pair_contract(pair).functions.getReserves().call()
        except Exception as e:
            raise ChainClientError(f"getReserves failed for {pair.address}: {e}") from e
        return int(reserve0), int(reserve1)

    def get_balance(self, pair: PairHandle, account: str) -> int:
        try:
            balance = (
                self._pair_contract(pair)
                .functions.balanceOf(Web3.to_checksum_address(account))
                .call()
            )
        except Exception as e:
            raise ChainClientError(f"balanceOf failed for {pair.address}: {e}") from e
        return int(balance)

    def execute_call_step(self, step: AnyStep) -> str:
        target, calldata = encode_call_step(step)
        tx: dict[str, Any] = {
            "from": self.account,
            "to": Web3.to_checksum_address(target),
            "data": calldata,
        }

        try:
            if self._private_key:
                tx["nonce"] = self.w3.eth.get_transaction_count(self.account)
                tx["chainId"] = self.w3.eth.chain_id
                tx["gas"] = self.w3.eth.estimate_gas(tx)
                tx["gasPrice"] = self.w3.eth.gas_price
                signed = self.w3.eth.account.sign_transaction(tx, self._private_key)
                tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            else:
                tx_hash = self.w3.eth.send_transaction(tx)  # type: ignore[arg-type]
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except Exception as e:
            raise ChainClientError(f"{step.kind} transaction failed: {e}") from e

        if receipt["status"] != 1:
            raise ChainClientError(f"{step.kind} transaction reverted: {Web3.to_hex(tx_hash)}")

        tx_hex = Web3.to_hex(tx_hash)
        logger.debug("call_step_mined", kind=step.kind, target=target, tx_hash=tx_hex)
        return tx_hex

    def get_swap_events(
        self,
        pair: PairHandle,
        from_block: int | str,
        to_block: int | str,
    ) -> list[SwapEvent]:
        try:
            logs = self.w3.eth.get_logs(
                {
                    "address": Web3.to_checksum_address(pair.address),
                    "fromBlock": from_block,  # type: ignore[typeddict-item]
                    "toBlock": to_block,  # type: ignore[typeddict-item]
                    "topics": [SWAP_EVENT_TOPIC],
                }
            )
        except Exception as e:
            raise ChainClientError(f"get_logs failed for {pair.address}: {e}") from e

        return [decode_swap_log(bytes(log["data"])) for log in logs]
