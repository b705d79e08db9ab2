"""
Shared fixtures.

Nothing here touches a real node: ``node`` replaces the JSON-RPC transport
with an in-memory fake that answers per method, and eth_call per selector.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable
from unittest.mock import patch

import httpx
import pytest
from eth_abi import encode

from chainkit.chain.abi import function_entry, function_signature, selector

# Variables that would leak a developer's real configuration into tests
ENV_VARS = (
    "RPC_URL",
    "CHAIN_ID",
    "PRIVATE_KEY",
    "CHAINKIT_NETWORK",
    "CHAINKIT_ARTIFACTS",
    "LOCALHOST_RPC_URL",
    "LOCALHOST_PRIVATE_KEY",
    "SEPOLIA_RPC_URL",
    "SEPOLIA_PRIVATE_KEY",
    "BSC_TESTNET_RPC_URL",
    "BSC_TESTNET_PRIVATE_KEY",
    "BASE_SEPOLIA_RPC_URL",
    "BASE_SEPOLIA_PRIVATE_KEY",
    "ETHERSCAN_API_KEY",
    "BSCSCAN_API_KEY",
    "BASE_API_KEY",
    "COUNTER_ADDRESS",
    "TOKEN_ADDRESS",
    "FEE_TOKEN_ADDRESS",
    "FEE_RECIPIENT_ADDRESS",
    "RECIPIENT_ADDRESS",
    "SMOKE_RECIPIENT_ADDRESS",
)


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path):
    """Isolate os.environ and point .env lookup at an empty directory."""
    env_dir = tmp_path / "env"
    env_dir.mkdir()
    with patch.dict(os.environ):
        for name in ENV_VARS:
            os.environ.pop(name, None)
        os.environ["CHAINKIT_ENV_DIR"] = str(env_dir)
        yield env_dir


class FakeNode:
    """Stand-in for _rpc_call that records every request."""

    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.call_results: dict[str, Any] = {}
        self.calls: list[tuple[str, list]] = []
        self.handlers["eth_call"] = self._eth_call

    def on(self, method: str, result: Any) -> None:
        """Answer ``method`` with a fixed value or ``result(params)``."""
        self.handlers[method] = result

    def on_call(self, abi: list, function_name: str, value: Any) -> None:
        """Answer eth_call for a function with an ABI-encoded value."""
        entry = function_entry(abi, function_name)
        key = "0x" + selector(function_signature(entry)).hex()
        types = [out["type"] for out in entry.get("outputs", [])]
        values = list(value) if len(types) > 1 else [value]
        self.call_results[key] = "0x" + encode(types, values).hex()

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_of(self, method: str) -> list[list]:
        return [params for name, params in self.calls if name == method]

    def _eth_call(self, params: list) -> str:
        key = params[0]["data"][:10]
        if key not in self.call_results:
            raise AssertionError(f"Unexpected eth_call selector {key}")
        return self.call_results[key]

    def __call__(self, method: str, params: list, rpc_url: str | None = None) -> Any:
        self.calls.append((method, params))
        if method not in self.handlers:
            raise AssertionError(f"Unexpected RPC call {method}")
        handler = self.handlers[method]
        return handler(params) if callable(handler) else handler


@pytest.fixture()
def node() -> FakeNode:
    fake = FakeNode()
    with patch("chainkit.chain.rpc._rpc_call", fake):
        yield fake


@pytest.fixture()
def write_artifact(tmp_path: Path) -> Callable[..., Path]:
    """Write a Hardhat-style artifact and return the artifacts root."""
    root = tmp_path / "artifacts" / "contracts"

    def _write(
        name: str,
        deployed_bytecode: str = "0x",
        bytecode: str = "0x6080604052",
        abi: list | None = None,
    ) -> Path:
        target = root / f"{name}.sol"
        target.mkdir(parents=True, exist_ok=True)
        artifact = {
            "contractName": name,
            "abi": abi or [],
            "bytecode": bytecode,
            "deployedBytecode": deployed_bytecode,
        }
        (target / f"{name}.json").write_text(json.dumps(artifact), encoding="utf-8")
        return root

    return _write


@pytest.fixture()
def mock_http():
    """Route every httpx.Client through a MockTransport handler."""
    real_client = httpx.Client
    requests: list[httpx.Request] = []

    def _install(handler: Callable[[httpx.Request], httpx.Response]):
        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(_record)
        patcher = patch(
            "httpx.Client",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        )
        patcher.start()
        return requests

    yield _install
    patch.stopall()
