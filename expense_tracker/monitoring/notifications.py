"""
Notification Center

Holds at most ONE visible notification. Showing a notification replaces
the previous one and its pending auto-dismiss; dismiss() clears it early.

The auto-dismiss "timer" is a deadline rather than a background thread:
current(now) stops returning the notification once now >= dismiss_at.
That keeps everything on the single control thread and lets the
clock be injected in tests.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

from expense_tracker.config import get_settings
from expense_tracker.models.budget import BudgetAlert, Notification, NotificationSeverity


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationCenter:
    """Single-slot notification holder with auto-dismiss deadlines."""

    def __init__(
        self,
        default_timeout: Optional[timedelta] = None,
        alert_timeout: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        settings = get_settings().notifications
        self._default_timeout = default_timeout or timedelta(seconds=settings.default_timeout_seconds)
        self._alert_timeout = alert_timeout or timedelta(seconds=settings.alert_timeout_seconds)
        self._clock = clock
        self._current: Optional[Notification] = None

    def timeout_for(self, severity: NotificationSeverity) -> timedelta:
        return self._alert_timeout if severity.is_alert else self._default_timeout

    def show(
        self,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> Notification:
        """Display a notification, superseding whatever was showing."""
        now = self._clock()
        self._current = Notification(
            message=message,
            severity=severity,
            shown_at=now,
            dismiss_at=now + self.timeout_for(severity),
        )
        return self._current

    def show_alert(self, alert: BudgetAlert) -> Optional[Notification]:
        """Display a budget alert; normal-band alerts show nothing."""
        if not alert.should_notify:
            return None
        return self.show(alert.message, alert.severity)

    def dismiss(self) -> bool:
        """Manually dismiss. Returns False if nothing was visible."""
        visible = self.current() is not None
        self._current = None
        return visible

    def current(self, now: Optional[datetime] = None) -> Optional[Notification]:
        """The visible notification, or None once it has been dismissed or has expired."""
        if self._current is None:
            return None
        if not self._current.is_visible(now or self._clock()):
            self._current = None
            return None
        return self._current
