"""Built-in token table for the local devnet deployment.

The frontend's evaluation prompts use these tickers; each "X" token is
paired with its "XX" counterpart by the deployment script. Override with a
JSON file via NLSWAP_TOKENS_FILE for any other network.
"""

DEFAULT_TOKENS: tuple[tuple[str, str], ...] = (
    ("A", "0x5fbdb2315678afecb367f032d93f642f64180aa3"),
    ("AX", "0xe7f1725e7734ce288f8367e1bb143e90bb3f0512"),
    ("B", "0x9fe46736679d2d9a65f0992f2272de9f3c7fa6e0"),
    ("BX", "0xcf7ed3acca5a467e9e704c703e8d87f634fb0fc9"),
    ("D", "0xdc64a140aa3e981100a9beca4e685f962f0cf6c9"),
    ("DX", "0x5fc8d32690cc91d4c39d9d3abcbd16989f875707"),
    ("E", "0xa513e6e4b8f2a923d98304ec87f64353c4d5c853"),
    ("EX", "0x2279b7a0a67db372996a5fab50d91eaa73d2ebe6"),
    ("G", "0x8a791620dd6260079bf849dc5567adc3f2fdc318"),
    ("GX", "0x610178da211fef7d417bc0e6fed39f05609ad788"),
    ("Z", "0xb7f8bc63bbcad18155201308c8f3540b07f84f5e"),
    ("ZX", "0xa51c1fc2f0d1a1b8494ed1fe312d7c3a78ed91c0"),
)
