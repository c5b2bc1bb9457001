"""
Honorary Allow-List - Metrics Module

Prometheus metrics for allow-list tree operations.

Exports:
- Merkle tree build times and sizes
- Proof generation times and lengths
- Verification outcomes
"""

from allowlist.metrics.allowlist_metrics import (
    AllowListMetrics,
    get_allowlist_metrics,
)

__all__ = [
    "AllowListMetrics",
    "get_allowlist_metrics",
]
