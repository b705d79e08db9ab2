"""
Verification - Compare deployed code with local builds and query
block-explorer verification status.
"""

from .bytecode import (
    METADATA_HEX_LENGTH,
    BytecodeComparison,
    MatchKind,
    compare,
    has_code,
    normalize_hex,
)

__all__ = [
    "METADATA_HEX_LENGTH",
    "BytecodeComparison",
    "MatchKind",
    "compare",
    "has_code",
    "normalize_hex",
]
