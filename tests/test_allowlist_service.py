"""
Unit tests for the Allow-List Service.
"""

from unittest.mock import MagicMock

import pytest
from eth_abi import decode

from allowlist.crypto.errors import (
    EmptyInputError,
    InvalidAddressError,
    InvalidIdError,
    LeafNotFoundError,
    MalformedPairStringError,
)
from allowlist.crypto.merkle import ZERO_HASH, verify_proof
from allowlist.services import AllowListService
from tests.conftest import ADDRESS_1, ADDRESS_2, ADDRESS_3, packed_leaf, sorted_hash


class TestBuild:
    """Tests for tree building from entries."""

    def test_root_two_entries(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test root of the two-entry allow-list."""
        root = allowlist_service.root(two_entries)

        assert root == sorted_hash(packed_leaf(ADDRESS_1, 1), packed_leaf(ADDRESS_2, 2))

    def test_root_permutation_invariant(
        self, allowlist_service: AllowListService, many_entries: list[str]
    ) -> None:
        """Test that reordering entries keeps the root."""
        shuffled = many_entries[1::2] + many_entries[::2]

        assert allowlist_service.root(many_entries) == allowlist_service.root(shuffled)

    def test_root_empty(self, allowlist_service: AllowListService) -> None:
        """Test that an empty list yields the zero root."""
        assert allowlist_service.root([]) == ZERO_HASH

    def test_require_entries(self, mock_metrics: MagicMock) -> None:
        """Test that empty lists can be disallowed."""
        service = AllowListService(require_entries=True, metrics=mock_metrics)

        with pytest.raises(EmptyInputError):
            service.root([])

    def test_unsorted_leaves(self, mock_metrics: MagicMock, three_entries: list[str]) -> None:
        """Test legacy input-order pairing."""
        service = AllowListService(sort_leaves=False, metrics=mock_metrics)
        l1 = packed_leaf(ADDRESS_1, 1)
        l2 = packed_leaf(ADDRESS_2, 2)
        l3 = packed_leaf(ADDRESS_3, 3)

        assert not service.sort_leaves
        assert service.root(three_entries) == sorted_hash(sorted_hash(l1, l2), l3)

    def test_malformed_entry_aborts(
        self, allowlist_service: AllowListService, mock_metrics: MagicMock
    ) -> None:
        """Test that one bad entry fails the whole build."""
        with pytest.raises(MalformedPairStringError) as exc_info:
            allowlist_service.build([f"{ADDRESS_1}:1", "nonsense", f"{ADDRESS_2}:2"])

        assert exc_info.value.token == "nonsense"
        mock_metrics.record_input_rejected.assert_called_once_with("MalformedPairStringError")
        mock_metrics.record_merkle_build.assert_not_called()

    def test_invalid_address(self, allowlist_service: AllowListService) -> None:
        """Test invalid address reporting."""
        with pytest.raises(InvalidAddressError):
            allowlist_service.build(["0xzz:1"])

    def test_invalid_id(self, allowlist_service: AllowListService) -> None:
        """Test invalid id reporting."""
        with pytest.raises(InvalidIdError):
            allowlist_service.build([f"{ADDRESS_1}:one"])

    def test_records_build_metrics(
        self,
        allowlist_service: AllowListService,
        mock_metrics: MagicMock,
        three_entries: list[str],
    ) -> None:
        """Test that builds are recorded."""
        allowlist_service.build(three_entries)

        mock_metrics.record_merkle_build.assert_called_once()
        _, tree_size = mock_metrics.record_merkle_build.call_args.args
        assert tree_size == 3


class TestProof:
    """Tests for proof extraction."""

    def test_proof_two_entries(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test that the first entry's proof is the second entry's leaf."""
        proof = allowlist_service.proof(two_entries, two_entries[0])

        assert proof.siblings == [packed_leaf(ADDRESS_2, 2)]

    def test_proof_target_spelling(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test that the target matches by value, not by string."""
        target = f"{ADDRESS_1.upper().replace('0X', '0x')}:0x01"

        proof = allowlist_service.proof(two_entries, target)

        assert proof.leaf == packed_leaf(ADDRESS_1, 1)

    def test_proof_not_found(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test proof for an absent entry."""
        with pytest.raises(LeafNotFoundError):
            allowlist_service.proof(two_entries, f"{ADDRESS_3}:3")

    def test_proof_empty_list(self, allowlist_service: AllowListService) -> None:
        """Test that any proof request on an empty list fails."""
        with pytest.raises(LeafNotFoundError):
            allowlist_service.proof([], f"{ADDRESS_1}:1")

    def test_bad_target_rejected_first(self, allowlist_service: AllowListService) -> None:
        """Test that a malformed target is reported."""
        with pytest.raises(MalformedPairStringError):
            allowlist_service.proof([f"{ADDRESS_1}:1"], "bad")

    def test_every_entry_verifies(
        self, allowlist_service: AllowListService, many_entries: list[str]
    ) -> None:
        """Test that every entry's proof reconstructs the root."""
        root = allowlist_service.root(many_entries)

        for entry in many_entries:
            proof = allowlist_service.proof(many_entries, entry)
            assert verify_proof(root, proof.leaf, proof.siblings)

    def test_encoded_proof(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test the ABI-encoded proof for submission."""
        encoded = allowlist_service.encoded_proof(two_entries, two_entries[0])

        (decoded,) = decode(["bytes32[]"], encoded)
        assert list(decoded) == [packed_leaf(ADDRESS_2, 2)]

    def test_records_proof_metrics(
        self,
        allowlist_service: AllowListService,
        mock_metrics: MagicMock,
        two_entries: list[str],
    ) -> None:
        """Test that proof generation is recorded."""
        allowlist_service.proof(two_entries, two_entries[1])

        mock_metrics.record_proof.assert_called_once()
        _, length = mock_metrics.record_proof.call_args.args
        assert length == 1


class TestDistribution:
    """Tests for the distribution document."""

    def test_distribution(
        self, allowlist_service: AllowListService, three_entries: list[str]
    ) -> None:
        """Test root and per-entry proofs."""
        data = allowlist_service.distribution(three_entries)
        root = bytes.fromhex(data["root"][2:])

        assert data["leaf_count"] == 3
        assert [e["id"] for e in data["entries"]] == ["1", "2", "3"]
        for entry in data["entries"]:
            leaf = bytes.fromhex(entry["leaf"][2:])
            siblings = [bytes.fromhex(s[2:]) for s in entry["proof"]]
            assert verify_proof(root, leaf, siblings)
            assert entry["encoded_proof"].startswith("0x")

    def test_distribution_deduplicates(
        self, allowlist_service: AllowListService, two_entries: list[str]
    ) -> None:
        """Test that duplicate entries appear once."""
        data = allowlist_service.distribution(two_entries + [two_entries[0]])

        assert data["leaf_count"] == 3
        assert len(data["entries"]) == 2

    def test_distribution_large_list(self, allowlist_service: AllowListService) -> None:
        """Test that a few thousand entries all get verifying proofs."""
        entries = [f"0x{i:040x}:{i}" for i in range(1, 3001)]
        data = allowlist_service.distribution(entries)
        root = bytes.fromhex(data["root"][2:])

        assert len(data["entries"]) == 3000
        for entry in data["entries"]:
            leaf = bytes.fromhex(entry["leaf"][2:])
            siblings = [bytes.fromhex(s[2:]) for s in entry["proof"]]
            assert len(siblings) <= 12
            assert verify_proof(root, leaf, siblings)


class TestVerify:
    """Tests for entry verification."""

    def test_verify_valid(
        self,
        allowlist_service: AllowListService,
        mock_metrics: MagicMock,
        two_entries: list[str],
    ) -> None:
        """Test a valid proof."""
        root = allowlist_service.root(two_entries)
        proof = allowlist_service.proof(two_entries, two_entries[0])

        assert allowlist_service.verify(root, two_entries[0], proof.siblings)
        mock_metrics.record_merkle_verification.assert_called_with(True)

    def test_verify_wrong_entry(
        self,
        allowlist_service: AllowListService,
        mock_metrics: MagicMock,
        two_entries: list[str],
    ) -> None:
        """Test a proof presented for another entry."""
        root = allowlist_service.root(two_entries)
        proof = allowlist_service.proof(two_entries, two_entries[0])

        assert not allowlist_service.verify(root, f"{ADDRESS_1}:2", proof.siblings)
        mock_metrics.record_merkle_verification.assert_called_with(False)

    def test_leaf(self, allowlist_service: AllowListService) -> None:
        """Test single-entry leaf hash."""
        assert allowlist_service.leaf(f"{ADDRESS_3}:3") == packed_leaf(ADDRESS_3, 3)
