"""
JSON-RPC Client.

Thin client over httpx for the handful of eth_* methods the commands need.
ABI encoding is delegated to chain.abi; the endpoint and chain ID come from
the RPC_URL / CHAIN_ID environment set by config.networks.activate().
"""

from __future__ import annotations

import os
import time
from typing import Any, Optional

import httpx

from ..errors import RpcError
from ..utils import hex_to_int
from .abi import decode_result, encode_call, load_abi

# Default RPC endpoint (local Hardhat / Anvil node)
DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_CHAIN_ID = 31337

RPC_TIMEOUT = 30


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("RPC_URL", DEFAULT_RPC_URL)


def get_chain_id() -> int:
    """Get the configured chain ID from environment or default."""
    return int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID)))


def _rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: On transport failure or an error payload
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    try:
        with httpx.Client(timeout=RPC_TIMEOUT) as client:
            response = client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise RpcError(f"{method} failed against {url}: {exc}") from exc

    if "error" in data:
        error = data["error"]
        message = error.get("message", error) if isinstance(error, dict) else error
        raise RpcError(f"RPC error in {method}: {message}")

    return data.get("result")


def fetch_chain_id(rpc_url: Optional[str] = None) -> int:
    """Ask the node which chain it serves."""
    return hex_to_int(_rpc_call("eth_chainId", [], rpc_url=rpc_url))


def get_block_number(rpc_url: Optional[str] = None) -> int:
    return hex_to_int(_rpc_call("eth_blockNumber", [], rpc_url=rpc_url))


def get_balance(address: str, rpc_url: Optional[str] = None) -> int:
    """
    Get native currency balance for an address.

    Returns:
        Balance in wei
    """
    result = _rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url)
    return hex_to_int(result)


def get_code(address: str, rpc_url: Optional[str] = None) -> str:
    """
    Get the runtime bytecode stored at an address.

    Returns:
        0x-prefixed hex string; "0x" for accounts without code
    """
    result = _rpc_call("eth_getCode", [address, "latest"], rpc_url=rpc_url)
    return result or "0x"


def get_nonce(address: str, rpc_url: Optional[str] = None) -> int:
    # "pending" so back-to-back sends from one script don't reuse a nonce
    result = _rpc_call(
        "eth_getTransactionCount", [address, "pending"], rpc_url=rpc_url
    )
    return hex_to_int(result)


def get_gas_price(rpc_url: Optional[str] = None) -> int:
    """
    Get current gas price.

    Returns:
        Gas price in wei
    """
    return hex_to_int(_rpc_call("eth_gasPrice", [], rpc_url=rpc_url))


def estimate_gas(tx: dict, rpc_url: Optional[str] = None) -> int:
    """Estimate gas for a call object (from/to/data/value)."""
    call = {k: v for k, v in tx.items() if k in ("from", "to", "data", "value")}
    if isinstance(call.get("value"), int):
        call["value"] = hex(call["value"])
    return hex_to_int(_rpc_call("eth_estimateGas", [call], rpc_url=rpc_url))


def call(to: str, data: str, rpc_url: Optional[str] = None) -> str:
    """Raw eth_call at the latest block."""
    return _rpc_call("eth_call", [{"to": to, "data": data}, "latest"], rpc_url=rpc_url)


def read_contract(
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    rpc_url: Optional[str] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments (default: [])
        contract_name: Name of contract for ABI loading from artifacts
        abi: Pre-loaded ABI (if not using contract_name)
        rpc_url: RPC endpoint URL

    Returns:
        Decoded return value(s); None for empty return data
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    calldata = encode_call(abi, function_name, args or [])
    result = call(contract_address, calldata, rpc_url=rpc_url)

    if result is None or result == "0x":
        return None

    return decode_result(abi, function_name, result)


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None) -> str:
    """
    Send a signed raw transaction.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def get_logs(
    address: str,
    topics: Optional[list] = None,
    from_block: int | str = 0,
    to_block: int | str = "latest",
    rpc_url: Optional[str] = None,
) -> list[dict]:
    """Fetch raw logs for an address (eth_getLogs)."""
    query: dict[str, Any] = {
        "address": address,
        "fromBlock": hex(from_block) if isinstance(from_block, int) else from_block,
        "toBlock": hex(to_block) if isinstance(to_block, int) else to_block,
    }
    if topics:
        query["topics"] = topics
    return _rpc_call("eth_getLogs", [query], rpc_url=rpc_url) or []


def wait_for_receipt(
    tx_hash: str,
    timeout: int = 120,
    poll_interval: float = 2.0,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        tx_hash: Transaction hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        rpc_url: RPC endpoint URL

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.time()
    while time.time() - start < timeout:
        receipt = _rpc_call(
            "eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url
        )
        if receipt is not None:
            return receipt
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
