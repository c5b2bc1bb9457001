"""
Honorary Allow-List - Cryptographic Utilities

Provides leaf encoding, Merkle tree construction, proof generation,
verification and proof ABI encoding.
"""

from allowlist.crypto.abi import encode_proof, encode_proof_hex
from allowlist.crypto.errors import (
    AllowListError,
    EmptyInputError,
    InvalidAddressError,
    InvalidIdError,
    LeafNotFoundError,
    MalformedPairStringError,
)
from allowlist.crypto.leaf import Pair, encode_pair, leaf_hash, parse_pairs
from allowlist.crypto.merkle import (
    ZERO_HASH,
    MerkleProof,
    MerkleTree,
    compute_root_from_proof,
    hash_pair,
    verify_proof,
)

__all__ = [
    "AllowListError",
    "EmptyInputError",
    "InvalidAddressError",
    "InvalidIdError",
    "LeafNotFoundError",
    "MalformedPairStringError",
    "MerkleProof",
    "MerkleTree",
    "Pair",
    "ZERO_HASH",
    "compute_root_from_proof",
    "encode_pair",
    "encode_proof",
    "encode_proof_hex",
    "hash_pair",
    "leaf_hash",
    "parse_pairs",
    "verify_proof",
]
