"""
Per-viewer permanent dismissal of notices.
"""

import logging

from ..storage.base import UserMetaStore
from .keys import DISMISSED_FIELD
from .models import Notice

logger = logging.getLogger(__name__)


class DismissalStore:
    """Tracks which viewers have dismissed a notice for good."""

    def __init__(self, meta: UserMetaStore):
        self.meta = meta

    def is_dismissed(self, notice: Notice, viewer_id: str) -> bool:
        return bool(self.meta.get(viewer_id, notice.key(DISMISSED_FIELD)))

    def dismiss(self, notice: Notice, viewer_id: str) -> None:
        self.meta.set(viewer_id, notice.key(DISMISSED_FIELD), True)
        logger.info(f"Viewer {viewer_id} dismissed notice '{notice.slug}'")
