from src.system.providers import WorkingHoursConfig


class StaticProvider:
    """Settings provider with fixed answers."""

    def __init__(self, maintenance=False, within_hours=True, start="08:00", end="18:00"):
        self.maintenance = maintenance
        self.within_hours = within_hours
        self.start, self.end = start, end

    def is_maintenance_mode(self):
        return self.maintenance

    def get_working_hours_config(self, now=None):
        message = None if self.within_hours else f"System is only available from {self.start} to {self.end}."
        return WorkingHoursConfig(self.start, self.end, self.within_hours, message)
