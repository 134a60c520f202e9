"""Chain client collaborator: protocol, calldata encoding and web3 backend."""

from nlswap.chain.client import ChainClient, ChainClientError
from nlswap.chain.encoding import encode_call_step
from nlswap.chain.web3_client import Web3ChainClient, decode_swap_log

__all__ = [
    "ChainClient",
    "ChainClientError",
    "Web3ChainClient",
    "decode_swap_log",
    "encode_call_step",
]
