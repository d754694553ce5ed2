"""
Screen and capability filters for notices.
"""

from typing import Optional

from ..storage.base import CapabilityChecker
from .models import Notice


class ScopeFilter:
    """Restricts a notice to its configured screens."""

    def in_scope(self, notice: Notice, screen_id: Optional[str]) -> bool:
        """
        Check if the current screen is allowed.

        A notice without screens is allowed everywhere. An unknown screen
        never matches a restricted notice.
        """
        if not notice.screens:
            return True

        return bool(screen_id) and screen_id in notice.screens


class AuthFilter:
    """Restricts a notice to viewers holding its capability."""

    def __init__(self, capabilities: CapabilityChecker):
        self.capabilities = capabilities

    def is_authorized(self, viewer_id: str, notice: Notice) -> bool:
        return bool(self.capabilities.has_capability(viewer_id, notice.cap))
