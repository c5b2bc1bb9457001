"""
Honorary Allow-List - Merkle allow-list builder

Builds Keccak-256 Merkle trees over (address, token id) pairs and produces
roots and ABI-encoded proofs compatible with on-chain sorted-pair verifiers.
"""

__version__ = "1.0.0"
