"""
Chain - On-chain interaction layer.

Provides the JSON-RPC client, artifact/ABI handling, event decoding and
transaction utilities used by the commands.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
