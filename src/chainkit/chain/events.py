"""
Event log queries and decoding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from eth_abi import decode

from ..utils import hex_to_int, strip_0x
from .abi import checksum_value, keccak256
from .rpc import get_logs


@dataclass(frozen=True)
class DecodedEvent:
    name: str
    args: dict[str, Any] = field(default_factory=dict)
    block_number: int = 0
    transaction_hash: Optional[str] = None
    log_index: int = 0


def event_entry(abi: list, event_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == event_name:
            return entry
    raise ValueError(f"Event {event_name} not found in ABI")


def event_signature(entry: dict[str, Any]) -> str:
    types = ",".join(inp["type"] for inp in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def event_topic(entry: dict[str, Any]) -> str:
    """topic0 of an event: keccak256 of its canonical signature."""
    return "0x" + keccak256(event_signature(entry).encode("utf-8")).hex()


def decode_log(entry: dict[str, Any], log: dict[str, Any]) -> DecodedEvent:
    """
    Decode a raw log against an event ABI entry.

    Indexed parameters are read from topics[1:], the rest from data.
    Indexed dynamic types (string, bytes, arrays) are left as the raw topic
    hash since the value itself is not recoverable.
    """
    inputs = entry.get("inputs", [])
    topics = log.get("topics", [])[1:]
    indexed = [inp for inp in inputs if inp.get("indexed")]
    plain = [inp for inp in inputs if not inp.get("indexed")]

    if len(topics) != len(indexed):
        raise ValueError(
            f"Log has {len(topics)} indexed topics, {entry['name']} expects {len(indexed)}"
        )

    args: dict[str, Any] = {}
    for inp, topic in zip(indexed, topics):
        if inp["type"] in ("string", "bytes") or inp["type"].endswith("]"):
            args[inp["name"]] = topic
        else:
            value = decode([inp["type"]], bytes.fromhex(strip_0x(topic)))[0]
            args[inp["name"]] = checksum_value(inp["type"], value)

    data = bytes.fromhex(strip_0x(log.get("data") or "0x"))
    if plain:
        values = decode([inp["type"] for inp in plain], data)
        for inp, value in zip(plain, values):
            args[inp["name"]] = checksum_value(inp["type"], value)

    return DecodedEvent(
        name=entry["name"],
        args=args,
        block_number=hex_to_int(log.get("blockNumber")),
        transaction_hash=log.get("transactionHash"),
        log_index=hex_to_int(log.get("logIndex")),
    )


def get_contract_events(
    address: str,
    abi: list,
    event_name: str,
    from_block: int | str = 0,
    to_block: int | str = "latest",
    rpc_url: Optional[str] = None,
) -> list[DecodedEvent]:
    """
    Query and decode the events of one type emitted by a contract.

    Returns:
        Events ordered by block number and log index
    """
    entry = event_entry(abi, event_name)
    logs = get_logs(
        address,
        topics=[event_topic(entry)],
        from_block=from_block,
        to_block=to_block,
        rpc_url=rpc_url,
    )
    events = [decode_log(entry, log) for log in logs]
    return sorted(events, key=lambda e: (e.block_number, e.log_index))
