"""
Scheduled time tracking for notices.

Each notice keeps one site-wide timestamp; the notice may be shown once the
timestamp is reached.
"""

import logging
import time
from typing import Callable, Optional

from ..storage.base import SiteOptionStore
from .keys import TIME_FIELD
from .models import Notice

logger = logging.getLogger(__name__)


class ClockGate:
    """
    Decides whether a notice's waiting period is over.

    Note that is_time() writes: the first evaluation for a notice schedules it
    one snooze interval ahead and reports "not yet". Use scheduled_time() for
    a read without side effects.
    """

    def __init__(
        self,
        options: SiteOptionStore,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize clock gate.

        Args:
            options: Site-wide option storage holding scheduled times
            clock: Returns the current time in epoch seconds
        """
        self.options = options
        self.clock = clock

    def now(self) -> int:
        return int(self.clock())

    def scheduled_time(self, notice: Notice) -> Optional[int]:
        """
        Stored threshold for the notice, or None if not scheduled yet.

        An unreadable stored value counts as not scheduled.
        """
        value = self.options.get(notice.key(TIME_FIELD))
        if not value:
            return None

        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(
                f"Ignoring invalid scheduled time {value!r} for notice '{notice.slug}'"
            )
            return None

    def is_time(self, notice: Notice) -> bool:
        """
        Check if the notice's scheduled time has been reached.

        Args:
            notice: Notice to check

        Returns:
            True if the scheduled time is now or in the past
        """
        now = self.now()
        scheduled = self.scheduled_time(notice)

        if scheduled is None:
            scheduled = now + notice.snooze_seconds
            self.options.set(notice.key(TIME_FIELD), scheduled)
            logger.info(f"Scheduled notice '{notice.slug}' for {scheduled}")
            return False

        return scheduled <= now

    def snooze(self, notice: Notice) -> None:
        """
        Push the notice back by twice its snooze interval.

        The delay counts from now, not from the previous scheduled time.
        """
        scheduled = self.now() + 2 * notice.snooze_seconds
        self.options.set(notice.key(TIME_FIELD), scheduled)
        logger.info(f"Snoozed notice '{notice.slug}' until {scheduled}")
