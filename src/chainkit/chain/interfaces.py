"""
Minimal ABIs for the contracts this toolkit drives.

Only the members the commands touch are listed, so an address can be used
without a local artifact.
"""

from __future__ import annotations

from typing import Any


def _fn(name: str, inputs: list, outputs: list, mutability: str = "nonpayable") -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
        "stateMutability": mutability,
    }


def _event(name: str, inputs: list) -> dict:
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [
            {"name": n, "type": t, "indexed": indexed} for n, t, indexed in inputs
        ],
    }


COUNTER_ABI: list[dict[str, Any]] = [
    _fn("x", [], ["uint256"], "view"),
    _fn("inc", [], []),
    _fn("incBy", [("by", "uint256")], []),
    _event("Increment", [("by", "uint256", False)]),
]

ERC20_ABI: list[dict[str, Any]] = [
    _fn("name", [], ["string"], "view"),
    _fn("symbol", [], ["string"], "view"),
    _fn("decimals", [], ["uint8"], "view"),
    _fn("totalSupply", [], ["uint256"], "view"),
    _fn("balanceOf", [("account", "address")], ["uint256"], "view"),
    _fn("allowance", [("owner", "address"), ("spender", "address")], ["uint256"], "view"),
    _fn("transfer", [("to", "address"), ("amount", "uint256")], ["bool"]),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], ["bool"]),
    _fn(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("amount", "uint256")],
        ["bool"],
    ),
    _event("Transfer", [("from", "address", True), ("to", "address", True), ("value", "uint256", False)]),
    _event("Approval", [("owner", "address", True), ("spender", "address", True), ("value", "uint256", False)]),
]

MINTABLE_ERC20_ABI: list[dict[str, Any]] = ERC20_ABI + [
    _fn("owner", [], ["address"], "view"),
    _fn("mint", [("to", "address"), ("amount", "uint256")], ["bool"]),
    _fn("burn", [("amount", "uint256")], []),
    _event("Mint", [("to", "address", True), ("amount", "uint256", False)]),
]

# transfer / transferFrom are payable: the fee is paid in native currency
NATIVE_FEE_ERC20_ABI: list[dict[str, Any]] = [
    e for e in ERC20_ABI if e["name"] not in ("transfer", "transferFrom")
] + [
    _fn("transfer", [("to", "address"), ("amount", "uint256")], ["bool"], "payable"),
    _fn(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("amount", "uint256")],
        ["bool"],
        "payable",
    ),
    _fn("nativeFeeAmount", [], ["uint256"], "view"),
    _fn("getRequiredFee", [("from", "address"), ("to", "address")], ["uint256"], "view"),
    _fn("feeExempt", [("account", "address")], ["bool"], "view"),
    _fn("feeRecipient", [], ["address"], "view"),
    _event(
        "NativeFeeCollected",
        [("from", "address", True), ("to", "address", True), ("feeAmount", "uint256", False)],
    ),
]
