from rest_framework.settings import api_settings
from rest_framework.throttling import ScopedRateThrottle


class ScopedRateThrottleIsolated(ScopedRateThrottle):
    """
    Read rates from the live DRF settings and include the resolved rate in
    the cache key, so tests or environments that override
    DEFAULT_THROTTLE_RATES neither hit stale rates nor share history.
    """
    def get_rate(self):
        self.THROTTLE_RATES = api_settings.DEFAULT_THROTTLE_RATES
        return super().get_rate()

    def get_cache_key(self, request, view):
        key = super().get_cache_key(request, view)
        if key is None:
            return None
        return f"{key}:{self.get_rate() or 'none'}"
