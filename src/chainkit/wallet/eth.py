"""
Signer key management.

Each network reads its deployer key from its own environment variable
(e.g. BSC_TESTNET_PRIVATE_KEY, normally kept in .env.local), falling back
to PRIVATE_KEY.  The local development node uses the first well-known
Hardhat/Anvil account unless a key is configured.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config.networks import Network
from ..errors import WalletError

# Hardhat / Anvil account #0 (public test mnemonic; never fund it on a real chain)
DEV_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

FALLBACK_KEY_ENV = "PRIVATE_KEY"


def key_source(network: Optional[Network] = None) -> str:
    """Name the place the signer key is read from, for display."""
    if network is not None and network.key_env and os.environ.get(network.key_env):
        return network.key_env
    if os.environ.get(FALLBACK_KEY_ENV):
        return FALLBACK_KEY_ENV
    if network is not None and network.is_local:
        return "built-in development account"
    return "(not configured)"


def load_private_key(network: Optional[Network] = None) -> str:
    """
    Load the signer private key for a network.

    Args:
        network: Network whose key variable is checked first

    Returns:
        0x-prefixed hex private key

    Raises:
        WalletError: If no key is configured
    """
    private_key = None
    if network is not None and network.key_env:
        private_key = os.environ.get(network.key_env)
    if not private_key:
        private_key = os.environ.get(FALLBACK_KEY_ENV)
    if not private_key and network is not None and network.is_local:
        private_key = DEV_PRIVATE_KEY

    if not private_key:
        hint = network.key_env if network is not None and network.key_env else FALLBACK_KEY_ENV
        raise WalletError(f"Private key not found. Set {hint} in .env.local.")

    private_key = private_key.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads PRIVATE_KEY from the environment.

    Raises:
        WalletError: If the key is missing or malformed
    """
    if private_key is None:
        private_key = load_private_key()
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError) as exc:
        raise WalletError(f"Invalid private key: {exc}") from exc


def get_address(private_key: Optional[str] = None) -> str:
    """
    Get the checksummed address for a private key.
    """
    return get_account(private_key).address
