"""Tests for the JSON-RPC client."""

from __future__ import annotations

import json
import os

import httpx
import pytest

from chainkit.chain import rpc
from chainkit.chain.interfaces import ERC20_ABI
from chainkit.errors import RpcError

TOKEN = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
HOLDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class TestTransport:
    """_rpc_call over a mocked HTTP transport."""

    def test_payload_and_result(self, mock_http) -> None:
        requests = mock_http(
            lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x7a69"})
        )
        os.environ["RPC_URL"] = "http://node.test:8545"

        assert rpc.fetch_chain_id() == 31337

        body = json.loads(requests[0].content)
        assert body["method"] == "eth_chainId"
        assert body["params"] == []
        assert requests[0].url.host == "node.test"
        assert requests[0].url.port == 8545

    def test_explicit_url_wins(self, mock_http) -> None:
        requests = mock_http(lambda request: httpx.Response(200, json={"result": "0x1"}))
        rpc.get_block_number(rpc_url="http://other.test")
        assert requests[0].url.host == "other.test"

    def test_error_payload(self, mock_http) -> None:
        mock_http(
            lambda request: httpx.Response(
                200, json={"error": {"code": -32000, "message": "nonce too low"}}
            )
        )
        with pytest.raises(RpcError, match="nonce too low") as exc_info:
            rpc.get_block_number()
        assert exc_info.value.exit_code == 5

    def test_http_error(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(502, text="bad gateway"))
        with pytest.raises(RpcError, match="eth_blockNumber failed"):
            rpc.get_block_number()

    def test_connection_error(self, mock_http) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        mock_http(refuse)
        with pytest.raises(RpcError, match="connection refused"):
            rpc.get_balance(HOLDER)


class TestDefaults:
    def test_defaults(self) -> None:
        assert rpc.get_rpc_url() == rpc.DEFAULT_RPC_URL
        assert rpc.get_chain_id() == 31337

    def test_from_environment(self) -> None:
        os.environ["RPC_URL"] = "http://x"
        os.environ["CHAIN_ID"] = "97"
        assert rpc.get_rpc_url() == "http://x"
        assert rpc.get_chain_id() == 97


class TestMethods:
    """Method wrappers against the fake node."""

    def test_get_code(self, node) -> None:
        node.on("eth_getCode", "0x6080")
        assert rpc.get_code(TOKEN) == "0x6080"
        assert node.params_of("eth_getCode") == [[TOKEN, "latest"]]

    def test_get_code_empty(self, node) -> None:
        node.on("eth_getCode", None)
        assert rpc.get_code(TOKEN) == "0x"

    def test_nonce_uses_pending(self, node) -> None:
        node.on("eth_getTransactionCount", "0x3")
        assert rpc.get_nonce(HOLDER) == 3
        assert node.params_of("eth_getTransactionCount") == [[HOLDER, "pending"]]

    def test_estimate_gas_filters_fields(self, node) -> None:
        node.on("eth_estimateGas", "0x5208")
        gas = rpc.estimate_gas({"from": HOLDER, "to": TOKEN, "value": 10, "nonce": 1, "gasPrice": 2})
        assert gas == 21000
        assert node.params_of("eth_estimateGas") == [[{"from": HOLDER, "to": TOKEN, "value": "0xa"}]]

    def test_read_contract(self, node) -> None:
        node.on_call(ERC20_ABI, "balanceOf", 1234)
        assert rpc.read_contract(TOKEN, "balanceOf", [HOLDER], abi=ERC20_ABI) == 1234
        call = node.params_of("eth_call")[0][0]
        assert call["to"] == TOKEN
        assert call["data"].startswith("0x70a08231")

    def test_read_contract_empty_result(self, node) -> None:
        node.on("eth_call", "0x")
        assert rpc.read_contract(TOKEN, "totalSupply", abi=ERC20_ABI) is None

    def test_read_contract_needs_abi(self) -> None:
        with pytest.raises(ValueError, match="abi or contract_name"):
            rpc.read_contract(TOKEN, "totalSupply")

    def test_wait_for_receipt(self, node) -> None:
        receipts = iter([None, {"status": "0x1"}])
        node.on("eth_getTransactionReceipt", lambda params: next(receipts))
        assert rpc.wait_for_receipt("0xabc", poll_interval=0) == {"status": "0x1"}
        assert node.methods().count("eth_getTransactionReceipt") == 2

    def test_wait_for_receipt_timeout(self, node) -> None:
        node.on("eth_getTransactionReceipt", None)
        with pytest.raises(TimeoutError, match="not confirmed"):
            rpc.wait_for_receipt("0xabc", timeout=0)
