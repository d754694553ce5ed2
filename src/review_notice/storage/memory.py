"""
In-memory storage backends.

Useful for tests and for hosts that keep notice state elsewhere and only
need a scratch store for a single process.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set, Tuple

import yaml

logger = logging.getLogger(__name__)


class MemorySiteOptions:
    """Site options kept in a dict."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._options: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._options.get(key)

    def set(self, key: str, value: Any) -> None:
        self._options[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._options


class MemoryUserMeta:
    """User meta kept in a dict keyed by (viewer_id, key)."""

    def __init__(self):
        self._meta: Dict[Tuple[str, str], Any] = {}

    def get(self, viewer_id: str, key: str) -> Optional[Any]:
        return self._meta.get((viewer_id, key))

    def set(self, viewer_id: str, key: str, value: Any) -> None:
        self._meta[(viewer_id, key)] = value


class StaticCapabilities:
    """
    Capability checker backed by a static grant table.

    Roles are named capability sets; granting a role to a viewer grants
    every capability in it.
    """

    def __init__(
        self,
        grants: Optional[Dict[str, Iterable[str]]] = None,
        roles: Optional[Dict[str, Iterable[str]]] = None,
    ):
        """
        Initialize capability table.

        Args:
            grants: Viewer ID -> capabilities held directly
            roles: Role name -> capabilities included in the role
        """
        self._grants: Dict[str, Set[str]] = {
            viewer_id: set(caps) for viewer_id, caps in (grants or {}).items()
        }
        self._roles: Dict[str, Set[str]] = {
            role: set(caps) for role, caps in (roles or {}).items()
        }

    @classmethod
    def load_from_file(cls, filepath: Path) -> "StaticCapabilities":
        """
        Build a capability table from a YAML file.

        Example YAML format:
            roles:
              administrator: [manage_options, activate_plugins]
            viewers:
              "1":
                roles: [administrator]
              "42":
                capabilities: [manage_options]

        Other top-level keys are ignored, so roles and viewers can live in
        the same file as notice definitions.

        Args:
            filepath: Path to capability definitions

        Returns:
            Capability checker with the file's grants applied
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Capability file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{filepath}: expected a mapping")

        roles = data.get("roles") or {}
        viewers = data.get("viewers") or {}
        if not isinstance(roles, dict) or not isinstance(viewers, dict):
            raise ValueError(f"{filepath}: 'roles' and 'viewers' must be mappings")

        capabilities = cls(roles={str(role): caps or [] for role, caps in roles.items()})
        for viewer_id, entry in viewers.items():
            viewer_id = str(viewer_id)
            if not isinstance(entry, dict):
                logger.error(f"{filepath}: viewers[{viewer_id}] must be a mapping, skipped")
                continue
            for role in entry.get("roles") or []:
                capabilities.assign_role(viewer_id, str(role))
            capabilities.grant(viewer_id, *(str(c) for c in entry.get("capabilities") or []))

        logger.info(
            f"Loaded {len(roles)} roles and {len(viewers)} viewers from {filepath}"
        )
        return capabilities

    def grant(self, viewer_id: str, *capabilities: str) -> None:
        """Grant capabilities directly to a viewer."""
        self._grants.setdefault(viewer_id, set()).update(capabilities)

    def assign_role(self, viewer_id: str, role: str) -> None:
        """Grant every capability of a role to a viewer."""
        if role not in self._roles:
            logger.warning(f"Unknown role '{role}' for viewer {viewer_id}")
            return
        self.grant(viewer_id, *self._roles[role])

    def has_capability(self, viewer_id: str, capability: str) -> bool:
        return capability in self._grants.get(viewer_id, ())
