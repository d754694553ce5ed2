"""
Storage backends for notice state.

A notice keeps one site-wide option (its scheduled time) and one user meta
flag per viewer (its dismissal). Capability checks are a third collaborator.
"""

from .base import CapabilityChecker, SiteOptionStore, StorageError, UserMetaStore
from .memory import MemorySiteOptions, MemoryUserMeta, StaticCapabilities
from .sqlite import SqliteSiteOptions, SqliteUserMeta

__all__ = [
    "CapabilityChecker",
    "SiteOptionStore",
    "StorageError",
    "UserMetaStore",
    "MemorySiteOptions",
    "MemoryUserMeta",
    "StaticCapabilities",
    "SqliteSiteOptions",
    "SqliteUserMeta",
]
