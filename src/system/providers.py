"""Read side of the runtime configuration stored in SystemSetting rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import SystemSetting

TRUE_VALUES = ("true", "1", "yes", "on")


def parse_hhmm(value: str) -> time:
    """'08:30' -> time(8, 30); raises ValueError on anything else."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def is_within_window(moment: time, start: time, end: time) -> bool:
    """
    Half-open [start, end) check on a wall clock; windows may wrap midnight.
    start == end means open around the clock.
    """
    if start == end:
        return True
    if start < end:
        return start <= moment < end
    return moment >= start or moment < end


@dataclass(frozen=True)
class WorkingHoursConfig:
    start: str
    end: str
    within_hours: bool
    message: Optional[str] = None

    def as_dict(self):
        return {
            "start": self.start,
            "end": self.end,
            "within_hours": self.within_hours,
            "message": self.message,
        }


class DatabaseSettingsProvider:
    """
    Settings provider backed by the `system_systemsetting` table.

    Every call queries the database, so changes made by a super admin apply
    to the next request without any cache invalidation.
    """

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = SystemSetting.objects.filter(key=key).values_list("value", flat=True).first()
        return default if value is None else value

    def is_maintenance_mode(self) -> bool:
        value = self.get(SystemSetting.MAINTENANCE_MODE, "false")
        return value.strip().lower() in TRUE_VALUES

    def get_working_hours(self) -> tuple[str, str]:
        rows = dict(
            SystemSetting.objects
            .filter(key__in=(SystemSetting.WORKING_HOURS_START, SystemSetting.WORKING_HOURS_END))
            .values_list("key", "value")
        )
        start = rows.get(SystemSetting.WORKING_HOURS_START) or settings.BOOKING_WORKING_HOURS_START
        end = rows.get(SystemSetting.WORKING_HOURS_END) or settings.BOOKING_WORKING_HOURS_END
        return start, end

    def get_working_hours_config(self, now: Optional[datetime] = None) -> WorkingHoursConfig:
        start, end = self.get_working_hours()
        moment = timezone.localtime(now) if now is not None else timezone.localtime()
        within = is_within_window(moment.time(), parse_hhmm(start), parse_hhmm(end))
        message = None
        if not within:
            message = (
                f"System is only available from {start} to {end}. "
                "Please contact support if you need emergency access."
            )
        return WorkingHoursConfig(start=start, end=end, within_hours=within, message=message)

    @transaction.atomic
    def set_many(self, items: Iterable[dict], updated_by=None) -> list[SystemSetting]:
        """Upsert all `{"key", "value"}` items; all rows commit together or none do."""
        saved = []
        for item in items:
            obj, _ = SystemSetting.objects.update_or_create(
                key=item["key"],
                defaults={"value": str(item["value"]), "updated_by": updated_by},
            )
            saved.append(obj)
        return saved
