"""
ABI Loader and codec helpers.

Artifacts come from the compiler toolchain, never from this package:
- Hardhat: artifacts/contracts/<Name>.sol/<Name>.json
  (``bytecode`` / ``deployedBytecode`` are plain hex strings)
- Foundry: out/<Name>.sol/<Name>.json
  (``bytecode`` / ``deployedBytecode`` are objects with an ``object`` key)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_hash.auto import keccak
from eth_utils import to_checksum_address

from ..errors import ArtifactError

# Searched in order, relative to each ancestor of the working directory
ARTIFACT_ROOTS = (Path("artifacts") / "contracts", Path("out"))


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

def find_artifacts_dir(start: Optional[Path] = None) -> Path:
    """
    Locate the compilation output directory.

    CHAINKIT_ARTIFACTS wins; otherwise search from ``start`` (default: cwd)
    upward for a Hardhat or Foundry output directory.
    """
    configured = os.environ.get("CHAINKIT_ARTIFACTS")
    if configured:
        path = Path(configured).expanduser()
        if not path.is_dir():
            raise ArtifactError(f"CHAINKIT_ARTIFACTS is not a directory: {path}")
        return path

    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        for root in ARTIFACT_ROOTS:
            candidate = parent / root
            if candidate.is_dir():
                return candidate
    raise ArtifactError(
        "Cannot find compilation artifacts. Run 'npx hardhat compile' or "
        "'forge build', or pass --artifacts."
    )


def artifact_path(contract_name: str, artifacts_dir: Optional[Path] = None) -> Path:
    out_dir = artifacts_dir or find_artifacts_dir()
    direct = out_dir / f"{contract_name}.sol" / f"{contract_name}.json"
    if direct.exists():
        return direct

    # Contracts in subdirectories (contracts/tokens/Foo.sol)
    matches = sorted(out_dir.rglob(f"{contract_name}.sol/{contract_name}.json"))
    if matches:
        return matches[0]

    raise ArtifactError(
        f"Artifact not found for {contract_name} under {out_dir}. "
        f"Compile the contracts first."
    )


def load_artifact(
    contract_name: str, artifacts_dir: Optional[Path] = None
) -> dict[str, Any]:
    """
    Load the compilation artifact of a contract.

    Raises:
        ArtifactError: If the artifact is missing or not valid JSON
    """
    path = artifact_path(contract_name, artifacts_dir)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Invalid artifact JSON {path}: {exc}") from exc


def _bytecode_field(artifact: dict[str, Any], key: str) -> str:
    value = artifact.get(key, "")
    if isinstance(value, dict):
        value = value.get("object", "")
    if not value:
        return ""
    return value if value.startswith("0x") else "0x" + value


def load_abi(
    contract_name: str, artifacts_dir: Optional[Path] = None
) -> list[dict[str, Any]]:
    """Load the ABI of a contract from its artifact."""
    return load_artifact(contract_name, artifacts_dir)["abi"]


def load_bytecode(contract_name: str, artifacts_dir: Optional[Path] = None) -> str:
    """
    Load creation bytecode (what a deployment transaction carries).

    Returns:
        Hex-encoded bytecode string (0x-prefixed)
    """
    bytecode = _bytecode_field(load_artifact(contract_name, artifacts_dir), "bytecode")
    if bytecode in ("", "0x"):
        raise ArtifactError(f"No bytecode in artifact for {contract_name}")
    return bytecode


def load_deployed_bytecode(
    contract_name: str, artifacts_dir: Optional[Path] = None
) -> str:
    """Load runtime bytecode (what eth_getCode returns after deployment)."""
    bytecode = _bytecode_field(
        load_artifact(contract_name, artifacts_dir), "deployedBytecode"
    )
    if bytecode in ("", "0x"):
        raise ArtifactError(f"No deployedBytecode in artifact for {contract_name}")
    return bytecode


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

def function_entry(abi: list, function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def input_types(entry: dict[str, Any]) -> list[str]:
    return [inp["type"] for inp in entry.get("inputs", [])]


def function_signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(input_types(entry))})"


def selector(signature: str) -> bytes:
    """First 4 bytes of keccak256 of a canonical signature."""
    return keccak256(signature.encode("utf-8"))[:4]


def encode_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    entry = function_entry(abi, function_name)
    types = input_types(entry)
    if len(args) != len(types):
        raise ValueError(
            f"{function_signature(entry)} expects {len(types)} args, got {len(args)}"
        )
    encoded_args = encode(types, args) if args else b""
    return "0x" + selector(function_signature(entry)).hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Single value for one output, tuple for several, None for none
    """
    entry = function_entry(abi, function_name)
    output_types = [out["type"] for out in entry.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = [
        checksum_value(abi_type, value)
        for abi_type, value in zip(output_types, decode(output_types, raw))
    ]

    if len(decoded) == 1:
        return decoded[0]
    return tuple(decoded)


def checksum_value(abi_type: str, value: Any) -> Any:
    """EIP-55 case for decoded addresses (eth-abi returns them lowercase)."""
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type == "address[]":
        return [to_checksum_address(item) for item in value]
    return value


def encode_constructor_args(abi: list, args: list) -> str:
    """ABI-encode constructor arguments as bare hex (no 0x)."""
    constructor = next((e for e in abi if e.get("type") == "constructor"), None)
    if constructor is None:
        raise ValueError("Constructor not found in ABI, but constructor args were provided.")
    return encode(input_types(constructor), args).hex()
