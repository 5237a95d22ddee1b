"""Custom alerts service: rules, triggered-alert log and their persistence."""
import logging

from alerts.alert_log import TriggeredAlertLog
from alerts.engine import AlertEvaluator
from alerts.persistence import AlertStatePersister, STORAGE_KEY
from alerts.rules_store import RuleStore
from models.alerts import AlertRule
from models.enums import Condition, Severity

logger = logging.getLogger("biogasmonitor.alerts")

DEFAULT_RULES = [
    AlertRule(id="1", parameter="fosTac", condition=Condition.GREATER_THAN,
              threshold=0.4, severity=Severity.CRITICAL),
]


class CustomAlerts:
    """Built once at startup and handed to whatever needs the alert state.

    Loads persisted state (or the default rule set on a fresh store) and
    writes the full state back after every mutation of rules or log.
    """

    def __init__(self, store, storage_key=STORAGE_KEY, evaluator=None):
        self.persister = AlertStatePersister(store, key=storage_key)
        self.evaluator = evaluator or AlertEvaluator()

        loaded = self.persister.load()
        if loaded is None:
            rules, alerts = list(DEFAULT_RULES), []
        else:
            rules, alerts = loaded

        self.rules = RuleStore(rules, on_change=self._persist)
        self.log = TriggeredAlertLog(alerts, on_change=self._persist)

    def _persist(self):
        self.persister.save(self.rules.list_rules(), self.log.list())

    def list_rules(self):
        return self.rules.list_rules()

    def add_rule(self, rule):
        self.rules.add_rule(rule)

    def remove_rule(self, rule_id):
        self.rules.remove_rule(rule_id)

    def triggered_alerts(self):
        return self.log.list()

    def evaluate(self, snapshot):
        """Evaluate current rules against a fresh snapshot and log what fired."""
        triggered = self.evaluator.evaluate(self.rules.list_rules(), snapshot)
        self.log.append(triggered)
        return triggered
