"""Tests for artifact loading and the ABI codec."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from chainkit.chain.abi import (
    decode_result,
    encode_call,
    encode_constructor_args,
    find_artifacts_dir,
    keccak256,
    load_abi,
    load_bytecode,
    load_deployed_bytecode,
    selector,
)
from chainkit.chain.interfaces import COUNTER_ABI, ERC20_ABI, MINTABLE_ERC20_ABI
from chainkit.errors import ArtifactError

RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class TestCodec:
    """Selectors and calldata for well-known signatures."""

    def test_keccak_is_not_sha3(self) -> None:
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_erc20_selectors(self) -> None:
        assert selector("transfer(address,uint256)").hex() == "a9059cbb"
        assert selector("balanceOf(address)").hex() == "70a08231"
        assert selector("approve(address,uint256)").hex() == "095ea7b3"

    def test_encode_transfer(self) -> None:
        data = encode_call(ERC20_ABI, "transfer", [RECIPIENT, 5])
        assert data.startswith("0xa9059cbb")
        assert data[10:74] == "0" * 24 + RECIPIENT[2:].lower()
        assert int(data[74:], 16) == 5

    def test_encode_without_args(self) -> None:
        assert encode_call(COUNTER_ABI, "inc", []) == "0x" + selector("inc()").hex()

    def test_wrong_arg_count(self) -> None:
        with pytest.raises(ValueError, match="expects 2 args"):
            encode_call(ERC20_ABI, "transfer", [RECIPIENT])

    def test_unknown_function(self) -> None:
        with pytest.raises(ValueError, match="not found"):
            encode_call(ERC20_ABI, "steal", [])

    def test_decode_uint(self) -> None:
        assert decode_result(ERC20_ABI, "decimals", "0x" + "0" * 62 + "12") == 18

    def test_decode_string(self) -> None:
        from eth_abi import encode

        data = "0x" + encode(["string"], ["Test Token"]).hex()
        assert decode_result(ERC20_ABI, "name", data) == "Test Token"

    def test_decode_address_is_checksummed(self) -> None:
        from eth_abi import encode

        data = "0x" + encode(["address"], [RECIPIENT]).hex()
        owner = decode_result(MINTABLE_ERC20_ABI, "owner", data)
        assert owner == RECIPIENT
        assert owner != RECIPIENT.lower()

    def test_constructor_args(self) -> None:
        abi = [{"type": "constructor", "inputs": [{"name": "x", "type": "uint256"}]}]
        assert encode_constructor_args(abi, [1]) == "0" * 63 + "1"

    def test_constructor_args_without_constructor(self) -> None:
        with pytest.raises(ValueError, match="Constructor not found"):
            encode_constructor_args([], [1])


class TestArtifacts:
    """Hardhat and Foundry artifact layouts."""

    def test_hardhat_artifact(self, write_artifact) -> None:
        root = write_artifact("Counter", deployed_bytecode="0x6080aa", abi=COUNTER_ABI)
        assert load_deployed_bytecode("Counter", root) == "0x6080aa"
        assert load_bytecode("Counter", root) == "0x6080604052"
        assert load_abi("Counter", root) == COUNTER_ABI

    def test_foundry_artifact(self, tmp_path: Path) -> None:
        root = tmp_path / "out"
        target = root / "Counter.sol"
        target.mkdir(parents=True)
        artifact = {
            "abi": [],
            "bytecode": {"object": "0x6080"},
            "deployedBytecode": {"object": "60aa"},
        }
        (target / "Counter.json").write_text(json.dumps(artifact), encoding="utf-8")

        assert load_bytecode("Counter", root) == "0x6080"
        assert load_deployed_bytecode("Counter", root) == "0x60aa"

    def test_nested_contract(self, tmp_path: Path) -> None:
        target = tmp_path / "artifacts" / "contracts" / "tokens" / "Coin.sol"
        target.mkdir(parents=True)
        (target / "Coin.json").write_text(
            json.dumps({"abi": [], "bytecode": "0x60", "deployedBytecode": "0x61"}),
            encoding="utf-8",
        )
        assert load_deployed_bytecode("Coin", tmp_path / "artifacts" / "contracts") == "0x61"

    def test_missing_artifact(self, write_artifact) -> None:
        root = write_artifact("Counter")
        with pytest.raises(ArtifactError, match="Artifact not found"):
            load_abi("Missing", root)

    def test_empty_deployed_bytecode(self, write_artifact) -> None:
        root = write_artifact("Iface", deployed_bytecode="0x")
        with pytest.raises(ArtifactError, match="No deployedBytecode"):
            load_deployed_bytecode("Iface", root)

    def test_invalid_json(self, tmp_path: Path) -> None:
        target = tmp_path / "Broken.sol"
        target.mkdir()
        (target / "Broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ArtifactError, match="Invalid artifact JSON"):
            load_abi("Broken", tmp_path)


class TestFindArtifactsDir:
    def test_env_override(self, tmp_path: Path) -> None:
        os.environ["CHAINKIT_ARTIFACTS"] = str(tmp_path)
        assert find_artifacts_dir() == tmp_path

    def test_env_override_must_exist(self, tmp_path: Path) -> None:
        os.environ["CHAINKIT_ARTIFACTS"] = str(tmp_path / "nope")
        with pytest.raises(ArtifactError, match="not a directory"):
            find_artifacts_dir()

    def test_searches_upward(self, tmp_path: Path) -> None:
        root = tmp_path / "artifacts" / "contracts"
        root.mkdir(parents=True)
        nested = tmp_path / "scripts" / "deep"
        nested.mkdir(parents=True)
        assert find_artifacts_dir(nested) == root.resolve()

    def test_foundry_out(self, tmp_path: Path) -> None:
        (tmp_path / "out").mkdir()
        assert find_artifacts_dir(tmp_path) == (tmp_path / "out").resolve()
