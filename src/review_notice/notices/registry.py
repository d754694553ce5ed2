"""
Registry holding one notice per plugin slug.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import yaml
from pydantic import ValidationError

from .models import Notice

logger = logging.getLogger(__name__)


class NoticeRegistry:
    """
    One notice instance per slug, created on first registration.

    Registering a slug again returns the existing notice unchanged, so a
    plugin registering its notice from two code paths cannot end up with
    two diverging configurations.
    """

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            defaults: Options applied to notices that do not set them
        """
        self.defaults: Dict[str, Any] = dict(defaults or {})
        self._notices: Dict[str, Notice] = {}
        self._lock = threading.Lock()

    def register(
        self, slug: str, name: str, options: Optional[Dict[str, Any]] = None
    ) -> Notice:
        """
        Register a notice, or return the one already registered for slug.

        Invalid input never raises: a slug or name that is not a string is
        treated as empty, invalid options register the notice disabled, and
        the problem is logged.

        Args:
            slug: Plugin slug (wp.org plugin directory name)
            name: Plugin name shown in the message
            options: Notice options (days, screens, cap, classes, message,
                action_labels, domain, prefix, enabled)

        Returns:
            The registered notice
        """
        if not isinstance(slug, str) or not isinstance(name, str):
            logger.error(f"Notice slug and name must be strings, got {slug!r} and {name!r}")
            slug = slug if isinstance(slug, str) else ""
            name = name if isinstance(name, str) else ""

        with self._lock:
            existing = self._notices.get(slug)
            if existing is not None:
                return existing

            notice = self._build(slug, name, options or {})
            self._notices[slug] = notice

        if notice.is_active:
            logger.info(f"Registered notice '{slug}' ({name}), shown after {notice.days} days")
        else:
            logger.info(f"Registered inactive notice '{slug}'")
        return notice

    def get(self, slug: str) -> Optional[Notice]:
        return self._notices.get(slug)

    def slugs(self) -> List[str]:
        return list(self._notices)

    def __contains__(self, slug: str) -> bool:
        return slug in self._notices

    def __len__(self) -> int:
        return len(self._notices)

    def __iter__(self) -> Iterator[Notice]:
        return iter(list(self._notices.values()))

    def load_from_file(self, filepath: Path) -> List[Notice]:
        """
        Register notices from a YAML file.

        Example YAML format:
            notices:
              - slug: demo-plugin
                name: Demo Plugin
                days: 7
                screens: [plugins]
                cap: manage_options

        Args:
            filepath: Path to notice definitions

        Returns:
            Notices registered (or already registered) for the file's entries
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Notice file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not data:
            logger.warning(f"No notices found in {filepath}")
            return []

        if not isinstance(data, dict) or not isinstance(data.get("notices", []), list):
            raise ValueError(f"{filepath}: expected a 'notices' list")

        notices = []
        for i, entry in enumerate(data.get("notices") or []):
            if not isinstance(entry, dict) or not entry.get("slug"):
                logger.error(f"{filepath}: notices[{i}] has no slug, skipped")
                continue

            options = dict(entry)
            slug = str(options.pop("slug"))
            name = options.pop("name", None)
            name = "" if name is None else str(name)
            notices.append(self.register(slug, name, options))

        logger.info(f"Loaded {len(notices)} notices from {filepath}")
        return notices

    def _build(self, slug: str, name: str, options: Dict[str, Any]) -> Notice:
        try:
            merged = {**self.defaults, **options}
            return Notice(slug=slug, name=name, **merged)
        except (ValidationError, TypeError) as e:
            logger.error(f"Invalid options for notice '{slug}', notice disabled: {e}")
            return Notice(slug=slug, name=name, enabled=False)
