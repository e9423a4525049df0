"""Hashing primitive and address helpers.

Commitments and proof hashes use Keccak-256, the hash the credential
ledger itself uses, so a commitment computed here matches one computed
by any other ledger client over the same framed bytes.

Every hashed message is a sequence of frames.  A frame is a 4-byte
big-endian length followed by that many bytes, so no choice of field
values can make two different field lists encode to the same message.
"""

from __future__ import annotations

import re
import struct

from web3 import Web3

HASH_SIZE = 32
ZERO_HASH = "0x" + "00" * HASH_SIZE

_HEX32_RE = re.compile(r"0x[0-9a-fA-F]{64}")


def keccak256(data: bytes) -> bytes:
    return bytes(Web3.keccak(primitive=data))


def frame(value: str | int | bytes) -> bytes:
    """Length-prefix a single field.  Ints are framed as decimal text."""
    if isinstance(value, bool):
        raise TypeError("booleans are not framable field values")
    if isinstance(value, int):
        raw = str(value).encode("utf-8")
    elif isinstance(value, str):
        raw = value.encode("utf-8")
    else:
        raw = bytes(value)
    return struct.pack(">I", len(raw)) + raw


def hash_fields(*fields: str | int | bytes) -> str:
    """Keccak-256 over the framed fields, as 0x-prefixed lowercase hex."""
    message = b"".join(frame(f) for f in fields)
    return Web3.to_hex(keccak256(message))


def is_hash_hex(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX32_RE.fullmatch(value))


def normalize_hash_hex(value: str) -> str:
    """Validate a 32-byte 0x hex string and return it lowercased.

    Raises ValueError when the value is not 32 bytes of hex.
    """
    if not is_hash_hex(value):
        raise ValueError(f"expected 0x-prefixed 32-byte hex, got {value!r}")
    return value.lower()


def is_zero_hash(value: str | None) -> bool:
    return value is None or value.lower() == ZERO_HASH


def normalize_address(value: str) -> str:
    """Return the EIP-55 checksummed form of an address.

    Accepts all-lowercase, all-uppercase or correctly checksummed input.
    Raises ValueError for anything else (wrong length, non-hex, or a
    mixed-case string whose checksum does not match).
    """
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValueError(f"not a valid address: {value!r}")
    return Web3.to_checksum_address(value)
