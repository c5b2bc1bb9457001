"""
Honorary Allow-List - Error Types

All failures are raised synchronously at input validation or lookup time.
Nothing is skipped: a single bad entry aborts the whole computation.
"""


class AllowListError(Exception):
    """Base exception for allow-list errors."""

    pass


class MalformedPairStringError(AllowListError):
    """Entry is not of the form ``address:id``."""

    def __init__(self, token: str, reason: str = "expected '<address>:<id>'") -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"Malformed allow-list entry {token!r}: {reason}")


class InvalidAddressError(MalformedPairStringError):
    """Address is not a well-formed 20-byte hex value."""

    pass


class InvalidIdError(MalformedPairStringError):
    """Token id is not a non-negative integer below 2**256."""

    pass


class EmptyInputError(AllowListError):
    """Operation requires at least one allow-list entry."""

    pass


class LeafNotFoundError(AllowListError):
    """Proof requested for a leaf that is not in the tree."""

    def __init__(self, leaf: bytes) -> None:
        self.leaf = leaf
        super().__init__(f"Leaf 0x{leaf.hex()} not found in tree")
