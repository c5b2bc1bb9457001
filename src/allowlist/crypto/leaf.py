"""
Honorary Allow-List - Leaf Encoding

Parses ``address:id`` entries and derives the Keccak-256 leaf committed to
by the Merkle tree.

The leaf is ``keccak256(abi.encodePacked(address, uint256 id))``: the 20 raw
address bytes followed by the 32-byte big-endian id, with no padding or
length prefixes. This must match the on-chain verifier byte for byte.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from eth_abi.packed import encode_packed
from eth_utils import (
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex_address,
    keccak,
    remove_0x_prefix,
    to_canonical_address,
    to_checksum_address,
)

from allowlist.crypto.errors import (
    InvalidAddressError,
    InvalidIdError,
    MalformedPairStringError,
)

PAIR_SEPARATOR = ":"
ADDRESS_SIZE = 20
UINT256_MAX = 2**256 - 1
UINT256_MAX_DECIMAL_DIGITS = 78
UINT256_MAX_HEX_DIGITS = 64

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")


def _abbreviate(value: str, limit: int = 80) -> str:
    if len(value) <= limit:
        return value
    return f"{value[:limit]}... ({len(value)} chars)"


def parse_address(value: str, token: str | None = None) -> bytes:
    """
    Parse a hex address into its 20 raw bytes.

    Accepts 40 hex digits with or without a ``0x`` prefix. Mixed-case
    input is treated as EIP-55 checksummed and must carry a valid checksum.

    Raises:
        InvalidAddressError: If the address is malformed
    """
    token = value if token is None else token

    if not is_hex_address(value):
        raise InvalidAddressError(token, f"invalid address {value!r}")

    prefixed = "0x" + remove_0x_prefix(value)
    if is_checksum_formatted_address(prefixed) and not is_checksum_address(prefixed):
        raise InvalidAddressError(token, f"bad address checksum {value!r}")

    return to_canonical_address(prefixed)


def parse_id(value: str, token: str | None = None) -> int:
    """
    Parse a token id as an unsigned 256-bit integer.

    Decimal digits or a ``0x``-prefixed hex literal. Signs, whitespace and
    digit separators are rejected.

    Raises:
        InvalidIdError: If the id is malformed or out of range
    """
    token = value if token is None else token

    if _DECIMAL_RE.fullmatch(value):
        digits, base, max_digits = value.lstrip("0"), 10, UINT256_MAX_DECIMAL_DIGITS
    elif _HEX_RE.fullmatch(value):
        digits, base, max_digits = value[2:].lstrip("0"), 16, UINT256_MAX_HEX_DIGITS
    else:
        raise InvalidIdError(token, f"invalid token id {value!r}")

    # Length check first: int() refuses very long decimal strings
    if len(digits) > max_digits:
        raise InvalidIdError(token, f"token id {_abbreviate(value)!r} exceeds 256 bits")

    result = int(digits or "0", base)
    if result > UINT256_MAX:
        raise InvalidIdError(token, f"token id {value!r} exceeds 256 bits")

    return result


@dataclass(frozen=True)
class Pair:
    """
    Single allow-list entry.

    Attributes:
        address: 20-byte account address
        id: Token id, 0 <= id < 2**256
    """

    address: bytes
    id: int

    def __post_init__(self) -> None:
        if len(self.address) != ADDRESS_SIZE:
            raise InvalidAddressError(
                self.address.hex(), f"address must be {ADDRESS_SIZE} bytes"
            )
        if not 0 <= self.id <= UINT256_MAX:
            raise InvalidIdError(str(self.id), "token id out of uint256 range")

    @classmethod
    def parse(cls, text: str) -> "Pair":
        """
        Parse an ``address:id`` entry.

        Raises:
            MalformedPairStringError: If the separator is missing or repeated
            InvalidAddressError: If the address part is invalid
            InvalidIdError: If the id part is invalid
        """
        parts = text.split(PAIR_SEPARATOR)
        if len(parts) != 2:
            raise MalformedPairStringError(text)

        address, token_id = parts
        return cls(
            address=parse_address(address, token=text),
            id=parse_id(token_id, token=text),
        )

    @property
    def checksum_address(self) -> str:
        """EIP-55 checksummed address."""
        return to_checksum_address(self.address)

    def leaf(self) -> bytes:
        return leaf_hash(self)

    def __str__(self) -> str:
        return f"{self.checksum_address}{PAIR_SEPARATOR}{self.id}"


def parse_pairs(entries: Iterable[str]) -> list[Pair]:
    """
    Parse a list of entries, failing on the first malformed one.

    Args:
        entries: ``address:id`` strings in input order

    Returns:
        Parsed pairs in input order
    """
    return [Pair.parse(entry) for entry in entries]


def encode_pair(address: bytes, token_id: int) -> bytes:
    """
    Tightly pack an address and id (Solidity ``abi.encodePacked``).

    Returns:
        52-byte buffer: 20 address bytes then 32-byte big-endian uint256
    """
    return encode_packed(["address", "uint256"], [address, token_id])


def leaf_hash(pair: Pair) -> bytes:
    """Compute the 32-byte Keccak-256 leaf for a pair."""
    return keccak(encode_pair(pair.address, pair.id))
