"""
Block explorer helpers.

Links and the verification hint for the Etherscan family of explorers,
plus a read-only status query through the Etherscan multichain API
(one API key serves every supported chain).  Submitting sources for
verification stays with the compiler toolchain (``npx hardhat verify``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from ..config.networks import Network
from ..errors import ExplorerError

ETHERSCAN_V2_API = "https://api.etherscan.io/v2/api"


@dataclass(frozen=True)
class VerificationStatus:
    address: str
    verified: bool
    contract_name: Optional[str] = None
    compiler_version: Optional[str] = None
    optimization_used: Optional[bool] = None
    runs: Optional[int] = None


def address_url(network: Network, address: str) -> Optional[str]:
    if not network.explorer_url:
        return None
    return f"{network.explorer_url}/address/{address}"


def code_url(network: Network, address: str) -> Optional[str]:
    url = address_url(network, address)
    return f"{url}#code" if url else None


def tx_url(network: Network, tx_hash: str) -> Optional[str]:
    if not network.explorer_url:
        return None
    return f"{network.explorer_url}/tx/{tx_hash}"


def verify_command(
    network: Network, address: str, constructor_args: Optional[list] = None
) -> str:
    """The toolchain command that submits a contract for verification."""
    parts = ["npx", "hardhat", "verify", "--network", network.name, address]
    parts.extend(str(arg) for arg in constructor_args or [])
    return " ".join(parts)


def fetch_verification_status(
    network: Network,
    address: str,
    api_key: Optional[str] = None,
    api_url: str = ETHERSCAN_V2_API,
    timeout: float = 30,
) -> VerificationStatus:
    """
    Ask the explorer whether source code is published for an address.

    Args:
        network: Target network (its chain ID selects the explorer)
        address: Contract address
        api_key: Explorer API key (default: the network's key variable)

    Raises:
        ExplorerError: On local networks, missing key, HTTP or API errors
    """
    if network.is_local:
        raise ExplorerError(f"Network '{network.name}' has no block explorer")

    api_key = api_key or network.explorer_api_key
    if not api_key:
        raise ExplorerError(
            f"Explorer API key missing. Set {network.explorer_api_key_env} in .env.local."
        )

    params = {
        "chainid": network.chain_id,
        "module": "contract",
        "action": "getsourcecode",
        "address": address,
        "apikey": api_key,
    }

    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.get(api_url, params=params)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise ExplorerError(f"Explorer request failed: {exc}") from exc

    result = data.get("result")
    if str(data.get("status")) != "1" or not isinstance(result, list) or not result:
        raise ExplorerError(f"Explorer API error: {data.get('message')} {result}")

    entry = result[0]
    source = entry.get("SourceCode") or ""
    if not source:
        return VerificationStatus(address=address, verified=False)

    runs = entry.get("Runs")
    return VerificationStatus(
        address=address,
        verified=True,
        contract_name=entry.get("ContractName") or None,
        compiler_version=entry.get("CompilerVersion") or None,
        optimization_used=entry.get("OptimizationUsed") == "1",
        runs=int(runs) if runs and str(runs).isdigit() else None,
    )
