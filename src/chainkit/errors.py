"""
Error types for chainkit.

Every error carries an ``exit_code`` so CLI commands can terminate with a
stable status.  Library code raises these and leaves reporting to the
command layer.
"""

from __future__ import annotations


class ChainkitError(RuntimeError):
    exit_code: int = 1


class NetworkConfigError(ChainkitError):
    exit_code = 2


class WalletError(ChainkitError):
    exit_code = 3


class ArtifactError(ChainkitError):
    exit_code = 4


class RpcError(ChainkitError):
    exit_code = 5


class TransactionFailedError(ChainkitError):
    exit_code = 6

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class ExplorerError(ChainkitError):
    exit_code = 7
