"""
Honorary Allow-List - Merkle Tree Implementation

Provides deterministic Merkle tree construction with Keccak-256 hashing,
inclusion proof generation, and verification.

The implementation follows the sorted-pair convention used by on-chain
verifiers (OpenZeppelin ``MerkleProof``):
- Leaves are used as given (already hashed, no domain prefix)
- Siblings are ordered by value before hashing, so proofs carry no
  left/right position information

For odd numbers of nodes, the last node is carried forward unchanged
(not duplicated) and contributes no proof element at that level.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from eth_utils import decode_hex, encode_hex, keccak

from allowlist.crypto.errors import LeafNotFoundError
from allowlist.crypto.leaf import Pair, leaf_hash

HASH_SIZE = 32

# Root of a tree with no leaves
ZERO_HASH = b"\x00" * HASH_SIZE


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Combine two sibling hashes into their parent.

    Equal-length byte strings compare like big-endian unsigned integers,
    so the smaller value always goes first and the result is commutative.
    """
    if a <= b:
        return keccak(a + b)
    return keccak(b + a)


@dataclass
class MerkleProof:
    """
    Merkle inclusion proof for a leaf.

    Attributes:
        leaf: Leaf hash being proven
        leaf_index: Position of the leaf in the tree's bottom level
        siblings: Sibling hashes from the leaf towards the root
        root: Expected Merkle root
        tree_size: Total number of leaves in the tree
    """

    leaf: bytes
    leaf_index: int
    siblings: list[bytes]
    root: bytes
    tree_size: int

    def __len__(self) -> int:
        return len(self.siblings)

    def to_hex(self) -> list[str]:
        """Sibling hashes as 0x-prefixed hex strings."""
        return [encode_hex(sibling) for sibling in self.siblings]

    def to_dict(self) -> dict[str, Any]:
        """Serialize proof to dictionary."""
        return {
            "leaf": encode_hex(self.leaf),
            "leaf_index": self.leaf_index,
            "siblings": self.to_hex(),
            "root": encode_hex(self.root),
            "tree_size": self.tree_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """Deserialize proof from dictionary."""
        return cls(
            leaf=decode_hex(data["leaf"]),
            leaf_index=data["leaf_index"],
            siblings=[decode_hex(s) for s in data["siblings"]],
            root=decode_hex(data["root"]),
            tree_size=data["tree_size"],
        )

    def verify(self) -> bool:
        """Check the proof against its own root."""
        return verify_proof(self.root, self.leaf, self.siblings)


class MerkleTree:
    """
    Sorted-pair Keccak-256 Merkle tree.

    Features:
    - Deterministic construction, independent of input order by default
    - Commutative parent hashing (no proof directions)
    - Odd nodes carried forward unchanged
    - Immutable after construction

    Example:
        >>> tree = MerkleTree.from_leaves([keccak(b"a"), keccak(b"b")])
        >>> proof = tree.get_proof(keccak(b"a"))
        >>> verify_proof(tree.root, keccak(b"a"), proof.siblings)
        True
    """

    def __init__(self, levels: list[list[bytes]]) -> None:
        """
        Initialize Merkle tree (internal use).

        Use from_leaves() or from_pairs() to construct trees.
        """
        self._levels = levels
        self._positions: dict[bytes, int] = {}
        for i, leaf in enumerate(levels[0]):
            self._positions.setdefault(leaf, i)

    @classmethod
    def from_leaves(
        cls,
        leaves: Iterable[bytes],
        sort_leaves: bool = True,
    ) -> "MerkleTree":
        """
        Construct a Merkle tree from leaf hashes.

        Args:
            leaves: 32-byte leaf hashes; duplicates are kept
            sort_leaves: Order leaves by value before pairing so the root
                does not depend on input order

        Returns:
            Constructed MerkleTree

        Raises:
            ValueError: If a leaf is not 32 bytes
        """
        level = list(leaves)
        for leaf in level:
            if len(leaf) != HASH_SIZE:
                raise ValueError(f"Leaf must be {HASH_SIZE} bytes, got {len(leaf)}")

        if sort_leaves:
            level.sort()

        return cls(cls._build_levels(level))

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Pair],
        sort_leaves: bool = True,
    ) -> "MerkleTree":
        """Construct a Merkle tree from parsed allow-list pairs."""
        return cls.from_leaves((leaf_hash(p) for p in pairs), sort_leaves=sort_leaves)

    @staticmethod
    def _build_levels(leaves: list[bytes]) -> list[list[bytes]]:
        """Build all levels bottom-up."""
        levels = [leaves]
        current_level = leaves

        while len(current_level) > 1:
            next_level = []

            for i in range(0, len(current_level), 2):
                if i + 1 < len(current_level):
                    next_level.append(hash_pair(current_level[i], current_level[i + 1]))
                else:
                    # Odd case: carry the last node forward
                    next_level.append(current_level[i])

            levels.append(next_level)
            current_level = next_level

        return levels

    @property
    def root(self) -> bytes:
        """Get the root hash (ZERO_HASH for an empty tree)."""
        top = self._levels[-1]
        if not top:
            return ZERO_HASH
        return top[0]

    @property
    def hex_root(self) -> str:
        return encode_hex(self.root)

    @property
    def leaves(self) -> list[bytes]:
        """Get leaves in tree order."""
        return list(self._levels[0])

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        """Number of hashing levels above the leaves."""
        return len(self._levels) - 1

    def index_of(self, leaf: bytes) -> int:
        """
        Find the first position of a leaf in the bottom level.

        Raises:
            LeafNotFoundError: If the leaf is absent
        """
        try:
            return self._positions[leaf]
        except KeyError:
            raise LeafNotFoundError(leaf) from None

    def get_proof(self, leaf: bytes) -> MerkleProof:
        """
        Generate inclusion proof for a leaf hash.

        For duplicated leaves the proof of the first occurrence is returned.

        Raises:
            LeafNotFoundError: If the leaf is not in the tree
        """
        return self.get_proof_by_index(self.index_of(leaf))

    def get_proof_by_index(self, leaf_index: int) -> MerkleProof:
        """
        Generate inclusion proof for the leaf at a tree position.

        Raises:
            IndexError: If leaf_index out of bounds
        """
        if leaf_index < 0 or leaf_index >= self.leaf_count:
            raise IndexError(f"Leaf index {leaf_index} out of bounds")

        siblings = []
        index = leaf_index

        for level in self._levels[:-1]:
            sibling_index = index ^ 1
            # A carried-forward node has no sibling at this level
            if sibling_index < len(level):
                siblings.append(level[sibling_index])
            index //= 2

        return MerkleProof(
            leaf=self._levels[0][leaf_index],
            leaf_index=leaf_index,
            siblings=siblings,
            root=self.root,
            tree_size=self.leaf_count,
        )

    def get_all_proofs(self) -> list[MerkleProof]:
        """
        Generate proofs for all leaves.

        Returns:
            List of MerkleProof in tree order
        """
        return [self.get_proof_by_index(i) for i in range(self.leaf_count)]


def compute_root_from_proof(leaf: bytes, proof: Iterable[bytes]) -> bytes:
    """
    Compute the root hash from a leaf and its sibling hashes.

    Args:
        leaf: Leaf hash
        proof: Sibling hashes, leaf-most first

    Returns:
        Computed root hash
    """
    current_hash = leaf

    for sibling in proof:
        current_hash = hash_pair(current_hash, sibling)

    return current_hash


def verify_proof(root: bytes, leaf: bytes, proof: Iterable[bytes]) -> bool:
    """
    Verify a Merkle inclusion proof.

    Reconstructs the root hash from the leaf and proof,
    then compares with the expected root.

    Returns:
        True if proof is valid
    """
    return compute_root_from_proof(leaf, proof) == root
