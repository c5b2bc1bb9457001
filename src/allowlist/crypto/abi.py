"""
Honorary Allow-List - Proof ABI Encoding

Serializes a proof as the single contract-ABI argument ``bytes32[]``:
an offset word (0x20), a length word, then the 32-byte elements.
The output is bit-exact with ethers' ``defaultAbiCoder.encode(["bytes32[]"], [proof])``.
"""

from collections.abc import Iterable

from eth_abi import encode
from eth_utils import encode_hex

from allowlist.crypto.merkle import HASH_SIZE, MerkleProof

PROOF_ABI_TYPE = "bytes32[]"


def _siblings(proof: MerkleProof | Iterable[bytes]) -> list[bytes]:
    if isinstance(proof, MerkleProof):
        return list(proof.siblings)
    return list(proof)


def encode_proof(proof: MerkleProof | Iterable[bytes]) -> bytes:
    """
    ABI-encode a proof as ``bytes32[]``.

    Args:
        proof: MerkleProof or sequence of 32-byte sibling hashes

    Returns:
        Encoded byte buffer

    Raises:
        ValueError: If an element is not 32 bytes
    """
    siblings = _siblings(proof)
    for sibling in siblings:
        if len(sibling) != HASH_SIZE:
            raise ValueError(f"Proof element must be {HASH_SIZE} bytes, got {len(sibling)}")

    return encode([PROOF_ABI_TYPE], [siblings])


def encode_proof_hex(proof: MerkleProof | Iterable[bytes]) -> str:
    """ABI-encode a proof and render it as 0x-prefixed hex."""
    return encode_hex(encode_proof(proof))
