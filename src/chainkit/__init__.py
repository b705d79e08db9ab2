__all__ = [
    # Bytecode verification
    "METADATA_HEX_LENGTH",
    "BytecodeComparison",
    "MatchKind",
    "compare",
    "has_code",
    "normalize_hex",
    # Explorer
    "VerificationStatus",
    "fetch_verification_status",
    "verify_command",
    # Networks
    "NETWORKS",
    "Network",
    "activate",
    "get_network",
    "load_env",
    # Errors
    "ChainkitError",
    "NetworkConfigError",
    "WalletError",
    "ArtifactError",
    "RpcError",
    "TransactionFailedError",
    "ExplorerError",
]

from .config import NETWORKS, Network, activate, get_network, load_env
from .errors import (
    ArtifactError,
    ChainkitError,
    ExplorerError,
    NetworkConfigError,
    RpcError,
    TransactionFailedError,
    WalletError,
)
from .verification.bytecode import (
    METADATA_HEX_LENGTH,
    BytecodeComparison,
    MatchKind,
    compare,
    has_code,
    normalize_hex,
)
from .verification.explorer import VerificationStatus, fetch_verification_status, verify_command
