"""Request-time gate: maintenance mode and working hours."""

import logging

from django.utils import timezone

from .exceptions import MaintenanceModeError, OutsideWorkingHoursError

logger = logging.getLogger(__name__)


def _is_privileged(user):
    return bool(user is not None and getattr(user, "is_admin_role", False))


class PolicyGate:
    """
    Evaluated once per booking request.

    `provider` exposes `is_maintenance_mode()` and
    `get_working_hours_config(now)`; `clock` returns the current aware
    datetime. Each check fails open: if reading the configuration raises,
    the failure is logged and the request is let through.
    """

    def __init__(self, provider=None, clock=None):
        if provider is None:
            from src.system.providers import DatabaseSettingsProvider
            provider = DatabaseSettingsProvider()
        self.provider = provider
        self.clock = clock or timezone.now

    def check(self, user):
        self.check_maintenance()
        if not _is_privileged(user):
            self.check_working_hours()

    def check_maintenance(self):
        try:
            enabled = self.provider.is_maintenance_mode()
        except Exception:
            logger.exception("maintenance mode check failed; allowing request")
            return
        if enabled:
            raise MaintenanceModeError()

    def check_working_hours(self):
        try:
            config = self.provider.get_working_hours_config(self.clock())
        except Exception:
            logger.exception("working hours check failed; allowing request")
            return
        if not config.within_hours:
            raise OutsideWorkingHoursError(config.message, start=config.start, end=config.end)
