"""Capacity-bounded, newest-first log of triggered alerts."""
import logging

logger = logging.getLogger("biogasmonitor.alerts.log")

CAPACITY = 50


class TriggeredAlertLog:
    def __init__(self, alerts=None, on_change=None):
        self._alerts = list(alerts or [])[:CAPACITY]
        self._on_change = on_change

    def append(self, alerts):
        """Prepend alerts (already newest-first) and drop whatever falls past CAPACITY.

        Truncation is by log position, not timestamp.
        """
        alerts = list(alerts)
        if not alerts:
            return
        combined = alerts + self._alerts
        dropped = max(0, len(combined) - CAPACITY)
        self._alerts = combined[:CAPACITY]
        if dropped:
            logger.debug(f"Evicted {dropped} oldest alert(s) past capacity {CAPACITY}")
        if self._on_change:
            self._on_change()

    def list(self):
        return list(self._alerts)

    def __len__(self):
        return len(self._alerts)
