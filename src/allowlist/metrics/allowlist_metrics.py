"""
Honorary Allow-List - Metrics

Prometheus collectors for allow-list tree operations. Collectors live in
the default registry; exporting them is left to the embedding process.

Metrics Categories:
- Merkle tree building
- Proof generation
- Proof verification
"""

from prometheus_client import Counter, Histogram

import structlog

logger = structlog.get_logger(__name__)


class AllowListMetrics:
    """
    Centralized metrics for allow-list operations.

    Provides visibility into:
    - Tree build times and sizes
    - Proof generation times and lengths
    - Verification outcomes
    """

    def __init__(self) -> None:
        """Initialize all allow-list metrics."""
        self._init_merkle_metrics()
        self._init_proof_metrics()

    def _init_merkle_metrics(self) -> None:
        """Initialize Merkle tree metrics."""
        self.merkle_build_duration = Histogram(
            "allowlist_merkle_build_duration_seconds",
            "Merkle tree build time",
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
        )

        self.merkle_tree_size = Histogram(
            "allowlist_merkle_tree_size",
            "Number of leaves in Merkle tree",
            buckets=[1, 10, 50, 100, 500, 1000, 5000, 10000, 50000],
        )

        self.input_rejected = Counter(
            "allowlist_input_rejected_total",
            "Allow-list inputs rejected before hashing",
            ["reason"],
        )

    def _init_proof_metrics(self) -> None:
        """Initialize proof metrics."""
        self.proof_generation = Histogram(
            "allowlist_merkle_proof_duration_seconds",
            "Merkle proof generation time",
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01],
        )

        self.proof_length = Histogram(
            "allowlist_merkle_proof_length",
            "Number of sibling hashes in generated proofs",
            buckets=[0, 1, 2, 4, 8, 12, 16, 24, 32],
        )

        self.merkle_verifications = Counter(
            "allowlist_merkle_verifications_total",
            "Merkle proof verifications",
            ["result"],
        )

    # Convenience methods

    def record_merkle_build(
        self,
        duration: float,
        tree_size: int,
    ) -> None:
        """Record Merkle tree build."""
        self.merkle_build_duration.observe(duration)
        self.merkle_tree_size.observe(tree_size)

    def record_input_rejected(self, reason: str) -> None:
        """Record rejected input."""
        self.input_rejected.labels(reason=reason).inc()

    def record_proof(self, duration: float, length: int) -> None:
        """Record proof generation."""
        self.proof_generation.observe(duration)
        self.proof_length.observe(length)

    def record_merkle_verification(self, valid: bool) -> None:
        """Record Merkle proof verification."""
        result = "valid" if valid else "invalid"
        self.merkle_verifications.labels(result=result).inc()


# Singleton instance
_allowlist_metrics: AllowListMetrics | None = None


def get_allowlist_metrics() -> AllowListMetrics:
    """Get global allow-list metrics instance."""
    global _allowlist_metrics
    if _allowlist_metrics is None:
        _allowlist_metrics = AllowListMetrics()
    return _allowlist_metrics
