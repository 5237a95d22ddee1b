"""Custom alerting: rules, evaluation, triggered-alert log and alarm merging."""
from alerts.engine import AlertEvaluator
from alerts.rules_store import RuleStore
from alerts.alert_log import TriggeredAlertLog
from alerts.aggregator import AlarmAggregator
from alerts.context import CustomAlerts
