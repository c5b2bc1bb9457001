"""
Honorary Allow-List - Services Package

Provides the end-to-end allow-list service used by the CLI.
"""

from allowlist.services.allowlist_service import AllowList, AllowListService

__all__ = [
    "AllowList",
    "AllowListService",
]
