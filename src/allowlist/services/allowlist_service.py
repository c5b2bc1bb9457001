"""
Honorary Allow-List - Allow-List Service

Runs the full pipeline over raw ``address:id`` entries:
parse → leaf hashes → Merkle tree → root / proof → ABI encoding.
Used by the CLI and by deployment tooling that embeds roots and submits proofs.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog
from eth_utils import encode_hex

from allowlist.core.config import settings
from allowlist.crypto.abi import encode_proof, encode_proof_hex
from allowlist.crypto.errors import (
    EmptyInputError,
    LeafNotFoundError,
    MalformedPairStringError,
)
from allowlist.crypto.leaf import Pair, leaf_hash, parse_pairs
from allowlist.crypto.merkle import MerkleProof, MerkleTree, verify_proof
from allowlist.metrics import AllowListMetrics, get_allowlist_metrics

logger = structlog.get_logger(__name__)


@dataclass
class AllowList:
    """Parsed entries together with the tree built over them."""

    pairs: list[Pair]
    tree: MerkleTree

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def hex_root(self) -> str:
        return self.tree.hex_root

    def proof_for(self, pair: Pair) -> MerkleProof:
        """
        Get the proof for a pair.

        Raises:
            LeafNotFoundError: If the pair is not in the allow-list
        """
        return self.tree.get_proof(leaf_hash(pair))

    def to_distribution(self) -> dict[str, Any]:
        """
        Serialize root and per-entry proofs, in input order.

        Duplicate entries are listed once.
        """
        entries = []
        seen = set()
        for pair in self.pairs:
            if pair in seen:
                continue
            seen.add(pair)

            proof = self.proof_for(pair)
            entries.append({
                "address": pair.checksum_address,
                "id": str(pair.id),
                "leaf": encode_hex(proof.leaf),
                "proof": proof.to_hex(),
                "encoded_proof": encode_proof_hex(proof),
            })

        return {
            "root": self.hex_root,
            "leaf_count": self.tree.leaf_count,
            "entries": entries,
        }


class AllowListService:
    """
    Allow-list service.

    Orchestrates:
    - Fail-closed parsing of entries
    - Tree construction
    - Root and proof extraction
    - Proof verification
    """

    def __init__(
        self,
        sort_leaves: bool | None = None,
        require_entries: bool | None = None,
        metrics: AllowListMetrics | None = None,
    ) -> None:
        """
        Initialize allow-list service.

        Args:
            sort_leaves: Sort leaves before pairing (defaults to settings)
            require_entries: Reject empty allow-lists (defaults to settings)
            metrics: Metrics sink (defaults to the global instance when enabled)
        """
        self._sort_leaves = (
            settings.ALLOWLIST_SORT_LEAVES if sort_leaves is None else sort_leaves
        )
        self._require_entries = (
            settings.ALLOWLIST_REQUIRE_ENTRIES if require_entries is None else require_entries
        )
        if metrics is None and settings.METRICS_ENABLED:
            metrics = get_allowlist_metrics()
        self._metrics = metrics

    @property
    def sort_leaves(self) -> bool:
        return self._sort_leaves

    def parse(self, entries: Iterable[str]) -> list[Pair]:
        """
        Parse entries, aborting on the first malformed one.

        Raises:
            MalformedPairStringError: Or a subclass, naming the bad entry
        """
        try:
            return parse_pairs(entries)
        except MalformedPairStringError as e:
            logger.warning("Rejected allow-list entry", token=e.token, error=e.reason)
            if self._metrics:
                self._metrics.record_input_rejected(type(e).__name__)
            raise

    def parse_target(self, entry: str) -> Pair:
        return self.parse([entry])[0]

    def build(self, entries: Iterable[str]) -> AllowList:
        """
        Parse entries and build the allow-list tree.

        Raises:
            MalformedPairStringError: If any entry is malformed
            EmptyInputError: If empty lists are disallowed and none were given
        """
        pairs = self.parse(entries)

        if not pairs and self._require_entries:
            raise EmptyInputError("Allow-list requires at least one entry")

        start = time.perf_counter()
        tree = MerkleTree.from_pairs(pairs, sort_leaves=self._sort_leaves)
        duration = time.perf_counter() - start

        if self._metrics:
            self._metrics.record_merkle_build(duration, tree.leaf_count)

        logger.info(
            "Built allow-list tree",
            leaf_count=tree.leaf_count,
            depth=tree.depth,
            root=tree.hex_root,
            sorted_leaves=self._sort_leaves,
        )

        return AllowList(pairs=pairs, tree=tree)

    def root(self, entries: Iterable[str]) -> bytes:
        """Compute the allow-list root."""
        return self.build(entries).root

    def proof(self, entries: Iterable[str], target: str) -> MerkleProof:
        """
        Compute the proof for a target entry.

        The target is parsed before the list is built, and need not
        appear verbatim in entries, only as the same (address, id).

        Raises:
            LeafNotFoundError: If the target is not in the allow-list
        """
        pair = self.parse_target(target)
        allow_list = self.build(entries)

        start = time.perf_counter()
        try:
            proof = allow_list.proof_for(pair)
        except LeafNotFoundError as e:
            logger.warning("Proof requested for unknown entry", target=target, error=str(e))
            raise
        duration = time.perf_counter() - start

        if self._metrics:
            self._metrics.record_proof(duration, len(proof))

        logger.debug(
            "Generated proof",
            target=str(pair),
            leaf_index=proof.leaf_index,
            proof_length=len(proof),
        )

        return proof

    def encoded_proof(self, entries: Iterable[str], target: str) -> bytes:
        """Compute the ``bytes32[]`` ABI-encoded proof for a target entry."""
        return encode_proof(self.proof(entries, target))

    def distribution(self, entries: Iterable[str]) -> dict[str, Any]:
        """Build the allow-list and serialize every entry's proof."""
        return self.build(entries).to_distribution()

    def leaf(self, entry: str) -> bytes:
        """Compute the leaf hash of a single entry."""
        return leaf_hash(self.parse_target(entry))

    def verify(self, root: bytes, entry: str, proof: Iterable[bytes]) -> bool:
        """
        Verify that an entry is committed to by a root.

        Returns:
            True if the proof reconstructs the root
        """
        leaf = self.leaf(entry)
        valid = verify_proof(root, leaf, proof)

        if self._metrics:
            self._metrics.record_merkle_verification(valid)

        logger.info("Verified allow-list proof", entry=entry, valid=valid)
        return valid
