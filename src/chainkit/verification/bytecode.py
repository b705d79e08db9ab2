"""
Bytecode Matcher - Decide whether deployed and locally compiled bytecode agree.

The Solidity compiler appends a CBOR-encoded metadata section (IPFS/Swarm
source hash, compiler version) to every contract.  Two builds of identical
source can differ only in that suffix, so a strict comparison is followed
by a comparison that ignores a fixed trailing window.

Everything here is pure string processing: no I/O, no retained state,
and no exceptions for malformed input.  Malformed input simply fails to
match.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# Conventional maximum size of the embedded metadata section: 53 bytes,
# i.e. 106 hex characters.  This is a compiler convention, not a format
# guarantee, so MATCH_EXCLUDING_METADATA is best-effort only.
METADATA_BYTE_LENGTH = 53
METADATA_HEX_LENGTH = METADATA_BYTE_LENGTH * 2

HEX_PREFIX = "0x"


class MatchKind(str, Enum):
    EXACT_MATCH = "exact_match"
    MATCH_EXCLUDING_METADATA = "match_excluding_metadata"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class BytecodeComparison:
    """
    Outcome of comparing two bytecode blobs.

    Attributes:
        kind: Classification of the comparison
        deployed: Normalized deployed bytecode (0x-prefixed, lowercase)
        local: Normalized local bytecode (0x-prefixed, lowercase)
        first_difference: Index of the first differing hex character,
            counted without the 0x prefix.  Only set for MISMATCH, and
            None when one body is a prefix of the other.
    """
    kind: MatchKind
    deployed: str
    local: str
    first_difference: Optional[int] = None

    @property
    def matches(self) -> bool:
        return self.kind is not MatchKind.MISMATCH

    @property
    def exact(self) -> bool:
        return self.kind is MatchKind.EXACT_MATCH


def normalize_hex(value: Optional[str]) -> str:
    """
    Normalize a hex string to lowercase with a single 0x prefix.

    ``None`` and ``""`` both normalize to ``"0x"``.  Idempotent.
    """
    if not value:
        return HEX_PREFIX
    text = value.strip()
    if text[:2].lower() == HEX_PREFIX:
        text = text[2:]
    return HEX_PREFIX + text.lower()


def has_code(value: Optional[str]) -> bool:
    """Return True if the value holds at least one byte of code."""
    return normalize_hex(value) != HEX_PREFIX


def strip_metadata(value: str) -> str:
    """
    Drop the trailing metadata window from a normalized hex string.

    Inputs shorter than the window collapse to an empty string, which
    mirrors slicing semantics rather than raising.
    """
    return value[:-METADATA_HEX_LENGTH]


def first_difference(left: str, right: str) -> Optional[int]:
    """Index of the first differing character, bounded by the shorter string."""
    for index, (a, b) in enumerate(zip(left, right)):
        if a != b:
            return index
    return None


def compare(deployed: Optional[str], local: Optional[str]) -> BytecodeComparison:
    """
    Classify deployed bytecode against locally compiled bytecode.

    Args:
        deployed: Code read from the chain (eth_getCode)
        local: deployedBytecode from a compilation artifact

    Returns:
        BytecodeComparison with EXACT_MATCH, MATCH_EXCLUDING_METADATA
        or MISMATCH.  Callers that need to distinguish "no contract at
        this address" should check has_code() first.
    """
    norm_deployed = normalize_hex(deployed)
    norm_local = normalize_hex(local)

    if norm_deployed == norm_local:
        return BytecodeComparison(MatchKind.EXACT_MATCH, norm_deployed, norm_local)

    if strip_metadata(norm_deployed) == strip_metadata(norm_local):
        return BytecodeComparison(
            MatchKind.MATCH_EXCLUDING_METADATA, norm_deployed, norm_local
        )

    index = first_difference(
        norm_deployed[len(HEX_PREFIX):], norm_local[len(HEX_PREFIX):]
    )
    return BytecodeComparison(MatchKind.MISMATCH, norm_deployed, norm_local, index)


def diff_context(
    comparison: BytecodeComparison, radius: int = 20
) -> tuple[str, str]:
    """
    Return the windows of both bodies around the first difference.

    Returns empty strings when there is no difference index.
    """
    index = comparison.first_difference
    if index is None:
        return "", ""
    start = max(0, index - radius)
    end = index + radius
    deployed_body = comparison.deployed[len(HEX_PREFIX):]
    local_body = comparison.local[len(HEX_PREFIX):]
    return deployed_body[start:end], local_body[start:end]
