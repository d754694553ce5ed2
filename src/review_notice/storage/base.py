"""
Collaborator interfaces consumed by the notice engine.
"""

from typing import Any, Optional, Protocol


class StorageError(Exception):
    """Raised by a storage backend when it cannot read or write a value."""


class SiteOptionStore(Protocol):
    """Site-wide key-value storage (one value per key for the whole site)."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...


class UserMetaStore(Protocol):
    """Per-viewer key-value storage."""

    def get(self, viewer_id: str, key: str) -> Optional[Any]:
        """Return the value stored for this viewer, or None if absent."""
        ...

    def set(self, viewer_id: str, key: str, value: Any) -> None:
        """Store value under key for this viewer."""
        ...


class CapabilityChecker(Protocol):
    """Authorization check supplied by the host."""

    def has_capability(self, viewer_id: str, capability: str) -> bool:
        """Return True if the viewer holds the capability."""
        ...
