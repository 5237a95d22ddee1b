"""Merge system alarms and custom triggered alerts into one display collection."""
import logging

from models.alerts import AlarmDisplayItem
from models.enums import Severity
from utils.formatters import parse_timestamp

logger = logging.getLogger("biogasmonitor.alerts.aggregator")

SYSTEM_ALARM_TYPE = "Sistema"
CUSTOM_ALARM_TYPE = "Personalizada"


def _severity(value):
    if not value:
        return Severity.INFO
    try:
        return Severity(value)
    except ValueError:
        logger.warning(f"Unknown alarm severity {value!r}, treating as info")
        return Severity.INFO


def normalize_system_alarm(alarm):
    return AlarmDisplayItem(
        id=alarm.id,
        timestamp=parse_timestamp(alarm.activated_at),
        description=alarm.description,
        alarm_type=alarm.alarm_type or SYSTEM_ALARM_TYPE,
        severity=_severity(alarm.severity),
        is_resolved=bool(alarm.resolved),
        is_custom=False,
        equipment_ref=alarm.equipment_id,
    )


def normalize_triggered_alert(alert):
    return AlarmDisplayItem(
        id=alert.id,
        timestamp=parse_timestamp(alert.timestamp),
        description=alert.description,
        alarm_type=CUSTOM_ALARM_TYPE,
        severity=alert.severity,
        is_resolved=False,
        is_custom=True,
    )


class AlarmAggregator:
    def __init__(self, alarm_source=None, fetch_limit=100):
        self.alarm_source = alarm_source
        self.fetch_limit = fetch_limit

    @staticmethod
    def merge(system_alarms, triggered):
        """System alarms first, then custom alerts. No dedupe, no sorting."""
        items = [normalize_system_alarm(a) for a in system_alarms]
        items.extend(normalize_triggered_alert(a) for a in triggered)
        return items

    def collect(self, triggered):
        """Fetch system alarms and merge. Fetch errors propagate to the caller."""
        system_alarms = self.alarm_source.fetch_system_alarms(limit=self.fetch_limit)
        logger.debug(f"Merging {len(system_alarms)} system alarms with {len(triggered)} custom alerts")
        return self.merge(system_alarms, triggered)

    @staticmethod
    def filter_alarms(items, severity="all", status="all"):
        """Severity is a level name or 'all'; status is 'resolved', 'pending' or 'all'."""
        result = items
        if severity != "all":
            result = [a for a in result if a.severity == Severity(severity)]
        if status != "all":
            want_resolved = status == "resolved"
            result = [a for a in result if a.is_resolved == want_resolved]
        return result
