"""
Network registry.

Each supported chain is described by a frozen ``Network``.  RPC URLs and
signer keys come from per-network environment variables so the same
commands work against a local node and public testnets.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..errors import NetworkConfigError


@dataclass(frozen=True)
class Network:
    name: str
    chain_id: int
    default_rpc_url: Optional[str]
    rpc_env: Optional[str] = None
    key_env: Optional[str] = None
    native_symbol: str = "ETH"
    explorer_url: Optional[str] = None
    explorer_api_key_env: Optional[str] = None
    faucet_url: Optional[str] = None
    testnet: bool = True

    @property
    def rpc_url(self) -> str:
        """Resolve the RPC URL: environment first, then the built-in default."""
        if self.rpc_env:
            value = os.environ.get(self.rpc_env)
            if value:
                return value
        if self.default_rpc_url:
            return self.default_rpc_url
        raise NetworkConfigError(
            f"No RPC URL for network '{self.name}'. Set {self.rpc_env} in .env.local."
        )

    @property
    def explorer_api_key(self) -> Optional[str]:
        if not self.explorer_api_key_env:
            return None
        return os.environ.get(self.explorer_api_key_env) or None

    @property
    def is_local(self) -> bool:
        return self.explorer_url is None


NETWORKS: dict[str, Network] = {
    "localhost": Network(
        name="localhost",
        chain_id=31337,
        default_rpc_url="http://127.0.0.1:8545",
        rpc_env="LOCALHOST_RPC_URL",
        key_env="LOCALHOST_PRIVATE_KEY",
        testnet=False,
    ),
    "sepolia": Network(
        name="sepolia",
        chain_id=11155111,
        default_rpc_url="https://ethereum-sepolia-rpc.publicnode.com",
        rpc_env="SEPOLIA_RPC_URL",
        key_env="SEPOLIA_PRIVATE_KEY",
        native_symbol="ETH",
        explorer_url="https://sepolia.etherscan.io",
        explorer_api_key_env="ETHERSCAN_API_KEY",
        faucet_url="https://sepoliafaucet.com",
    ),
    "bscTestnet": Network(
        name="bscTestnet",
        chain_id=97,
        default_rpc_url="https://data-seed-prebsc-1-s1.bnbchain.org:8545",
        rpc_env="BSC_TESTNET_RPC_URL",
        key_env="BSC_TESTNET_PRIVATE_KEY",
        native_symbol="BNB",
        explorer_url="https://testnet.bscscan.com",
        explorer_api_key_env="BSCSCAN_API_KEY",
        faucet_url="https://testnet.bnbchain.org/faucet-smart",
    ),
    "baseSepolia": Network(
        name="baseSepolia",
        chain_id=84532,
        default_rpc_url="https://sepolia.base.org",
        rpc_env="BASE_SEPOLIA_RPC_URL",
        key_env="BASE_SEPOLIA_PRIVATE_KEY",
        native_symbol="ETH",
        explorer_url="https://sepolia.basescan.org",
        explorer_api_key_env="BASE_API_KEY",
        faucet_url="https://www.alchemy.com/faucets/base-sepolia",
    ),
}

DEFAULT_NETWORK = "localhost"


def get_network(name: str) -> Network:
    """Look up a network by name (case-insensitive)."""
    for key, network in NETWORKS.items():
        if key.lower() == name.lower():
            return network
    known = ", ".join(sorted(NETWORKS))
    raise NetworkConfigError(f"Unknown network '{name}'. Known networks: {known}")


def activate(network: Network, rpc_url: Optional[str] = None) -> str:
    """
    Point the RPC and transaction layer at a network.

    Exports RPC_URL and CHAIN_ID, which chain.rpc reads.

    Returns:
        The RPC URL in effect
    """
    url = rpc_url or network.rpc_url
    os.environ["RPC_URL"] = url
    os.environ["CHAIN_ID"] = str(network.chain_id)
    return url
