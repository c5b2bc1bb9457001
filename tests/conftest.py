"""
Pytest configuration and shared fixtures for allow-list tests.
"""

from unittest.mock import MagicMock

import pytest
from eth_utils import keccak

from allowlist.crypto.leaf import Pair
from allowlist.metrics import AllowListMetrics
from allowlist.services import AllowListService

ADDRESS_1 = "0x1111111111111111111111111111111111111111"
ADDRESS_2 = "0x2222222222222222222222222222222222222222"
ADDRESS_3 = "0x3333333333333333333333333333333333333333"


def packed_leaf(address: str, token_id: int) -> bytes:
    """Leaf computed independently of the codec under test."""
    return keccak(bytes.fromhex(address[2:]) + token_id.to_bytes(32, "big"))


def sorted_hash(a: bytes, b: bytes) -> bytes:
    """Sorted-pair parent computed independently of the engine under test."""
    low, high = sorted([a, b], key=lambda h: int.from_bytes(h, "big"))
    return keccak(low + high)


@pytest.fixture
def two_entries() -> list[str]:
    """The two-entry allow-list scenario."""
    return [f"{ADDRESS_1}:1", f"{ADDRESS_2}:2"]


@pytest.fixture
def three_entries() -> list[str]:
    """An odd-sized allow-list."""
    return [f"{ADDRESS_1}:1", f"{ADDRESS_2}:2", f"{ADDRESS_3}:3"]


@pytest.fixture
def many_entries() -> list[str]:
    """A larger allow-list with distinct addresses and ids."""
    return [f"0x{i:040x}:{i * 7}" for i in range(1, 38)]


@pytest.fixture
def sample_pair() -> Pair:
    """Create a sample pair."""
    return Pair.parse(f"{ADDRESS_1}:1")


@pytest.fixture
def mock_metrics() -> MagicMock:
    """Create a mock metrics sink."""
    return MagicMock(spec=AllowListMetrics)


@pytest.fixture
def allowlist_service(mock_metrics: MagicMock) -> AllowListService:
    """Create an allow-list service for testing."""
    return AllowListService(sort_leaves=True, require_entries=False, metrics=mock_metrics)
