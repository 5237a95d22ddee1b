"""Serialize custom alert state to the key-value store."""
import logging
import sqlite3

from models.alerts import AlertRule, TriggeredAlert

logger = logging.getLogger("biogasmonitor.alerts.persistence")

STORAGE_KEY = "custom-alerts-storage"


class AlertStatePersister:
    """Reads and writes `{rules, triggeredAlerts}` under a single key.

    Writes are best-effort: a failing store is logged and the caller's
    in-memory state stays authoritative.
    """

    def __init__(self, store, key=STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self):
        """Return (rules, triggered_alerts), or None when nothing usable is stored."""
        try:
            data = self.store.get(self.key)
        except (sqlite3.Error, OSError, ValueError) as e:
            logger.warning(f"Could not read {self.key}, using defaults: {e}")
            return None
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Unexpected {self.key} payload ({type(data).__name__}), using defaults")
            return None

        rules = self._parse_entries(data.get("rules", []), AlertRule)
        alerts = self._parse_entries(data.get("triggeredAlerts", []), TriggeredAlert)
        logger.info(f"Loaded {len(rules)} rules, {len(alerts)} triggered alerts")
        return rules, alerts

    def _parse_entries(self, raw_entries, cls):
        entries = []
        if not isinstance(raw_entries, list):
            return entries
        for raw in raw_entries:
            try:
                entries.append(cls.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed {cls.__name__} entry {raw!r}: {e}")
        return entries

    def save(self, rules, triggered_alerts):
        payload = {
            "rules": [r.to_dict() for r in rules],
            "triggeredAlerts": [a.to_dict() for a in triggered_alerts],
        }
        try:
            self.store.set(self.key, payload)
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to persist {self.key}: {e}")
