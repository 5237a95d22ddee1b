"""PlantMonitor - refresh cycle and alarm history view."""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from alerts.aggregator import AlarmAggregator
from utils.http_client import APIError
from utils.sorting import SortableFilterable, DESCENDING

logger = logging.getLogger("biogasmonitor.monitor")

ALARM_SORT_KEYS = ("timestamp", "alarm_type", "severity")


def alarm_sorter(key="timestamp", direction=DESCENDING):
    """Sorter for alarm views; severity sorts by rank rather than by name."""
    return SortableFilterable(key, direction, accessors={"severity": lambda a: a.severity.rank})


@dataclass
class AlarmHistory:
    items: List = field(default_factory=list)
    total: int = 0
    error: Optional[str] = None


class PlantMonitor:
    def __init__(self, api, custom_alerts, config=None):
        self.api = api
        self.custom_alerts = custom_alerts
        self.config = config or {}
        fetch_limit = self.config.get("alerts", {}).get("system_alarm_limit", 100)
        self.aggregator = AlarmAggregator(api, fetch_limit=fetch_limit)
        self._refresh_lock = threading.Lock()
        self.last_snapshot = None

    def refresh(self):
        """Fetch a fresh KPI snapshot and evaluate rules against it.

        Cycles are serialized so two overlapping refreshes cannot interleave
        their updates of the triggered-alert log.
        """
        with self._refresh_lock:
            snapshot = self.api.fetch_kpi_snapshot()
            self.last_snapshot = snapshot
            triggered = self.custom_alerts.evaluate(snapshot)
            summary = " | ".join(f"{k}: {v if v is not None else 'N/A'}" for k, v in snapshot.items())
            logger.info(f"Refreshed KPIs ({summary}), {len(triggered)} alert(s) triggered")
            return snapshot, triggered

    def get_current_snapshot(self):
        if self.last_snapshot is None:
            return self.api.fetch_kpi_snapshot()
        return self.last_snapshot

    def get_alarm_history(self, severity="all", status="all", sort_key="timestamp",
                          direction=DESCENDING, search=None):
        """Merged, filtered and sorted alarm view.

        If system alarms cannot be fetched the custom alerts are still
        returned, with the failure message in `error`.
        """
        triggered = self.custom_alerts.triggered_alerts()
        error = None
        try:
            items = self.aggregator.collect(triggered)
        except APIError as e:
            logger.error(f"System alarm fetch failed: {e}")
            error = str(e)
            items = self.aggregator.merge([], triggered)

        filtered = self.aggregator.filter_alarms(items, severity=severity, status=status)
        view = alarm_sorter(sort_key, direction).apply(
            filtered, filter_field="description" if search else None, filter_text=search,
        )
        return AlarmHistory(items=view, total=len(items), error=error)
