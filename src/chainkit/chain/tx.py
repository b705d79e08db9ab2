"""
Transaction Builder - Build, sign, and send transactions.

Uses eth-account for signing and the httpx JSON-RPC client for sending.
Transactions use legacy gas pricing, which every supported network accepts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from eth_utils import to_checksum_address

from ..errors import TransactionFailedError
from ..wallet.eth import get_account
from .abi import encode_call, encode_constructor_args, load_abi, load_bytecode
from .rpc import (
    estimate_gas,
    get_chain_id,
    get_gas_price,
    get_nonce,
    send_raw_transaction,
    wait_for_receipt,
)

# Headroom over eth_estimateGas; estimates are tight and state can move
GAS_ESTIMATE_MARGIN = 1.2


def _base_tx(sender: str, value: int, gas_limit: Optional[int], **fields: Any) -> dict:
    tx: dict[str, Any] = {
        "value": value,
        "nonce": get_nonce(sender),
        "gasPrice": get_gas_price(),
        "chainId": get_chain_id(),
        **fields,
    }
    if gas_limit is None:
        estimate = estimate_gas({"from": sender, **tx})
        gas_limit = int(estimate * GAS_ESTIMATE_MARGIN)
    tx["gas"] = gas_limit
    return tx


def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi: Optional[list] = None,
    contract_name: Optional[str] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
) -> dict:
    """
    Build a contract call transaction (unsigned).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments
        abi: Pre-loaded ABI
        contract_name: For ABI loading from artifacts
        value: Native value in wei (default: 0)
        gas_limit: Gas limit (default: estimate)
        private_key: Signer key, for nonce lookup

    Returns:
        Unsigned transaction dict
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    calldata = encode_call(abi, function_name, args)
    account = get_account(private_key)

    return _base_tx(
        account.address,
        value,
        gas_limit,
        to=to_checksum_address(contract_address),
        data=calldata,
    )


def sign_and_send(
    tx: dict,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 120,
) -> dict:
    """
    Sign a transaction and send it.

    Returns:
        Dict with tx_hash and, when waiting, receipt and status
    """
    account = get_account(private_key)
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + signed.raw_transaction.hex().removeprefix("0x")

    tx_hash = send_raw_transaction(raw_tx)
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = wait_for_receipt(tx_hash, timeout=timeout)
        result["receipt"] = receipt
        result["status"] = int(receipt.get("status", "0x0"), 16)
        result["block_number"] = int(receipt.get("blockNumber", "0x0"), 16)
        result["gas_used"] = int(receipt.get("gasUsed", "0x0"), 16)

    return result


def ensure_success(result: dict, action: str = "Transaction") -> dict:
    """Raise TransactionFailedError when a mined transaction reverted."""
    if result.get("status") == 0:
        raise TransactionFailedError(
            f"{action} reverted (tx {result.get('tx_hash')})",
            tx_hash=result.get("tx_hash"),
        )
    return result


def send_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi: Optional[list] = None,
    contract_name: Optional[str] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
) -> dict:
    """
    Build, sign, and send a contract call transaction.

    Returns:
        Dict with tx_hash, receipt, status
    """
    tx = build_contract_tx(
        contract_address=contract_address,
        function_name=function_name,
        args=args,
        abi=abi,
        contract_name=contract_name,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
    )
    return sign_and_send(tx, private_key=private_key, wait=wait)


def send_value(
    to: str,
    value: int,
    gas_limit: Optional[int] = 21_000,
    private_key: Optional[str] = None,
    wait: bool = True,
) -> dict:
    """Send native currency to an address."""
    account = get_account(private_key)
    tx = _base_tx(account.address, value, gas_limit, to=to_checksum_address(to))
    return sign_and_send(tx, private_key=private_key, wait=wait)


def deploy_contract(
    contract_name: str,
    constructor_args: Optional[list] = None,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    artifacts_dir: Optional[Path] = None,
    wait: bool = True,
    timeout: int = 180,
) -> dict:
    """
    Deploy a contract from its compilation artifact.

    Builds a creation transaction (no ``to``), signs, sends, and extracts
    the deployed contract address from the receipt.

    Returns:
        Dict with tx_hash, status, contract_address, receipt
    """
    deploy_data = load_bytecode(contract_name, artifacts_dir)

    if constructor_args:
        abi = load_abi(contract_name, artifacts_dir)
        deploy_data += encode_constructor_args(abi, constructor_args)

    account = get_account(private_key)
    tx = _base_tx(account.address, 0, gas_limit, data=deploy_data)

    result = sign_and_send(tx, private_key=private_key, wait=wait, timeout=timeout)

    if wait and result.get("receipt"):
        contract_address = result["receipt"].get("contractAddress")
        if contract_address:
            result["contract_address"] = to_checksum_address(contract_address)

    return result
