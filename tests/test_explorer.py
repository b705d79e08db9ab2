"""Tests for explorer links and verification status queries."""

from __future__ import annotations

import os

import httpx
import pytest

from chainkit.config.networks import NETWORKS
from chainkit.errors import ExplorerError
from chainkit.verification.explorer import (
    address_url,
    code_url,
    fetch_verification_status,
    tx_url,
    verify_command,
)

ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def _source_response(entry: dict, status: str = "1") -> httpx.Response:
    return httpx.Response(200, json={"status": status, "message": "OK", "result": [entry]})


class TestLinks:
    def test_bsc_links(self) -> None:
        network = NETWORKS["bscTestnet"]
        assert address_url(network, ADDRESS) == f"https://testnet.bscscan.com/address/{ADDRESS}"
        assert code_url(network, ADDRESS) == f"https://testnet.bscscan.com/address/{ADDRESS}#code"
        assert tx_url(network, "0xabc") == "https://testnet.bscscan.com/tx/0xabc"

    def test_local_has_no_links(self) -> None:
        network = NETWORKS["localhost"]
        assert address_url(network, ADDRESS) is None
        assert code_url(network, ADDRESS) is None
        assert tx_url(network, "0xabc") is None

    def test_verify_command(self) -> None:
        command = verify_command(NETWORKS["bscTestnet"], ADDRESS, ["Test Token", 18])
        assert command == f"npx hardhat verify --network bscTestnet {ADDRESS} Test Token 18"

    def test_verify_command_without_args(self) -> None:
        assert verify_command(NETWORKS["sepolia"], ADDRESS).endswith(f"sepolia {ADDRESS}")


class TestVerificationStatus:
    """getsourcecode against a mocked explorer."""

    def test_verified(self, mock_http) -> None:
        requests = mock_http(lambda request: _source_response({
            "SourceCode": "contract Counter {}",
            "ContractName": "Counter",
            "CompilerVersion": "v0.8.28+commit.7893614a",
            "OptimizationUsed": "1",
            "Runs": "200",
        }))

        status = fetch_verification_status(NETWORKS["bscTestnet"], ADDRESS, api_key="KEY")

        assert status.verified
        assert status.contract_name == "Counter"
        assert status.compiler_version == "v0.8.28+commit.7893614a"
        assert status.optimization_used is True
        assert status.runs == 200

        params = requests[0].url.params
        assert params["chainid"] == "97"
        assert params["action"] == "getsourcecode"
        assert params["address"] == ADDRESS
        assert params["apikey"] == "KEY"

    def test_unverified(self, mock_http) -> None:
        mock_http(lambda request: _source_response({"SourceCode": "", "ABI": "Contract source code not verified"}))
        status = fetch_verification_status(NETWORKS["sepolia"], ADDRESS, api_key="KEY")
        assert not status.verified
        assert status.contract_name is None

    def test_key_from_environment(self, mock_http) -> None:
        requests = mock_http(lambda request: _source_response({"SourceCode": ""}))
        os.environ["BASE_API_KEY"] = "BASEKEY"
        fetch_verification_status(NETWORKS["baseSepolia"], ADDRESS)
        assert requests[0].url.params["apikey"] == "BASEKEY"
        assert requests[0].url.params["chainid"] == "84532"

    def test_api_error(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(
            200, json={"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
        ))
        with pytest.raises(ExplorerError, match="Invalid API Key") as exc_info:
            fetch_verification_status(NETWORKS["sepolia"], ADDRESS, api_key="BAD")
        assert exc_info.value.exit_code == 7

    def test_http_error(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(503))
        with pytest.raises(ExplorerError, match="request failed"):
            fetch_verification_status(NETWORKS["sepolia"], ADDRESS, api_key="KEY")

    def test_missing_key(self) -> None:
        with pytest.raises(ExplorerError, match="ETHERSCAN_API_KEY"):
            fetch_verification_status(NETWORKS["sepolia"], ADDRESS)

    def test_local_network(self) -> None:
        with pytest.raises(ExplorerError, match="no block explorer"):
            fetch_verification_status(NETWORKS["localhost"], ADDRESS, api_key="KEY")
