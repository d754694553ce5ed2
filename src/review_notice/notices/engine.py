"""
Notice engine for deciding visibility and applying viewer responses.
"""

import logging
import time
from typing import Callable, Optional, Union

from ..storage.base import (
    CapabilityChecker,
    SiteOptionStore,
    StorageError,
    UserMetaStore,
)
from .clock import ClockGate
from .dismissal import DismissalStore
from .filters import AuthFilter, ScopeFilter
from .models import HiddenReason, Notice, NoticeAction, NoticeDecision

logger = logging.getLogger(__name__)


class NoticeEngine:
    """
    Engine for evaluating notices against the current viewer and screen.

    A notice is visible only if, in this order:
    1. The current screen is one of the notice's screens (or it has none)
    2. The viewer holds the notice's capability
    3. The notice's scheduled time has been reached
    4. The viewer has not dismissed the notice

    Checks stop at the first failure. The scheduled time is initialized by
    check 3, so the waiting period only starts once a capable viewer sees an
    allowed screen.
    """

    def __init__(
        self,
        options: SiteOptionStore,
        meta: UserMetaStore,
        capabilities: CapabilityChecker,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the notice engine.

        Args:
            options: Site-wide storage for scheduled times
            meta: Per-viewer storage for dismissal flags
            capabilities: Authorization check for viewers
            clock: Returns the current time in epoch seconds
        """
        self.scope = ScopeFilter()
        self.auth = AuthFilter(capabilities)
        self.clock_gate = ClockGate(options, clock)
        self.dismissals = DismissalStore(meta)

    def evaluate(
        self, notice: Notice, viewer_id: str, screen_id: Optional[str] = None
    ) -> NoticeDecision:
        """
        Evaluate a notice for a viewer.

        May write the notice's scheduled time on its first evaluation.

        Args:
            notice: The notice to evaluate
            viewer_id: The current viewer
            screen_id: The current screen, if known

        Returns:
            Decision with the first failing check as the hidden reason
        """
        try:
            reason = self._hidden_reason(notice, viewer_id, screen_id)
        except StorageError as e:
            logger.error(
                f"Storage failure evaluating notice '{notice.slug}': {e}", exc_info=True
            )
            reason = HiddenReason.STORAGE_ERROR

        if reason is not None:
            logger.debug(
                f"Notice '{notice.slug}' hidden for viewer {viewer_id}: {reason.value}"
            )

        return NoticeDecision(
            slug=notice.slug,
            viewer_id=viewer_id,
            visible=reason is None,
            reason=reason,
        )

    def can_show(
        self, notice: Notice, viewer_id: str, screen_id: Optional[str] = None
    ) -> bool:
        """Return True if the notice should be shown to the viewer."""
        return self.evaluate(notice, viewer_id, screen_id).visible

    def dispatch_action(
        self,
        notice: Notice,
        viewer_id: str,
        action: Union[NoticeAction, str, None],
        screen_id: Optional[str] = None,
    ) -> None:
        """
        Apply a viewer's response to a notice.

        Later: show again after twice the snooze interval.
        Dismiss: never show to this viewer again.

        Requests from viewers who could not see the notice on this screen,
        and unknown actions, are ignored.

        Args:
            notice: The notice being answered
            viewer_id: The current viewer
            action: The requested action value
            screen_id: The current screen, if known
        """
        if not notice.is_active:
            return

        if not self.scope.in_scope(notice, screen_id):
            logger.debug(f"Ignoring action for '{notice.slug}' outside its screens")
            return

        if not self.auth.is_authorized(viewer_id, notice):
            logger.debug(
                f"Ignoring action for '{notice.slug}' from unauthorized viewer {viewer_id}"
            )
            return

        try:
            requested = NoticeAction(action)
        except ValueError:
            logger.debug(f"Ignoring unknown action {action!r} for '{notice.slug}'")
            return

        try:
            if requested == NoticeAction.LATER:
                self.clock_gate.snooze(notice)
            elif requested == NoticeAction.DISMISS:
                self.dismissals.dismiss(notice, viewer_id)
        except StorageError as e:
            logger.error(
                f"Storage failure applying '{requested.value}' to '{notice.slug}': {e}",
                exc_info=True,
            )

    def _hidden_reason(
        self, notice: Notice, viewer_id: str, screen_id: Optional[str]
    ) -> Optional[HiddenReason]:
        if not notice.is_active:
            return HiddenReason.INACTIVE

        if not self.scope.in_scope(notice, screen_id):
            return HiddenReason.OUT_OF_SCOPE

        if not self.auth.is_authorized(viewer_id, notice):
            return HiddenReason.UNAUTHORIZED

        if not self.clock_gate.is_time(notice):
            return HiddenReason.NOT_YET

        if self.dismissals.is_dismissed(notice, viewer_id):
            return HiddenReason.DISMISSED

        return None
