"""Alert evaluation engine."""
import math
import time
import uuid
import logging
from datetime import datetime, timezone
from numbers import Real

from models.alerts import TriggeredAlert
from models.enums import Condition, parameter_label

logger = logging.getLogger("biogasmonitor.alerts.engine")

# equalTo is exact float equality; no tolerance.
OPERATOR_MAP = {
    Condition.GREATER_THAN: lambda v, t: v > t,
    Condition.LESS_THAN: lambda v, t: v < t,
    Condition.EQUAL_TO: lambda v, t: v == t,
}


def kpi_value(snapshot, parameter):
    """Numeric KPI value from a snapshot, or None if missing, NaN or non-numeric."""
    value = (snapshot or {}).get(parameter)
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if math.isnan(value):
        return None
    return value


def format_threshold(threshold):
    threshold = float(threshold)
    if threshold.is_integer():
        return str(int(threshold))
    return repr(threshold)


def _new_alert_id():
    return f"triggered-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class AlertEvaluator:
    """Checks rules against the latest KPI snapshot.

    Stateless: the same snapshot evaluated twice triggers twice.
    """

    def _evaluate_condition(self, value, condition, threshold):
        func = OPERATOR_MAP.get(condition)
        if func is None:
            return False
        return func(value, threshold)

    def describe(self, rule, value):
        return (
            f"Alerta: {parameter_label(rule.parameter)} ({value:.2f}) "
            f"es {rule.condition.symbol} {format_threshold(rule.threshold)}."
        )

    def evaluate(self, rules, snapshot):
        """Return a TriggeredAlert for every rule whose condition holds, in rule order."""
        now = datetime.now(timezone.utc).isoformat()
        triggered = []

        for rule in rules:
            value = kpi_value(snapshot, rule.parameter)
            if value is None:
                continue
            if not self._evaluate_condition(value, rule.condition, rule.threshold):
                continue

            triggered.append(TriggeredAlert(
                id=_new_alert_id(),
                rule_id=rule.id,
                timestamp=now,
                description=self.describe(rule, value),
                severity=rule.severity,
            ))

        if triggered:
            logger.info(f"{len(triggered)} of {len(rules)} rule(s) triggered")
        return triggered

    def preview(self, rules, snapshot):
        """Report every rule's current value and whether it would fire, without side effects."""
        results = []
        for rule in rules:
            value = kpi_value(snapshot, rule.parameter)
            would_fire = value is not None and self._evaluate_condition(value, rule.condition, rule.threshold)
            results.append({
                "rule_id": rule.id,
                "parameter": rule.parameter,
                "condition": rule.condition.symbol,
                "threshold": rule.threshold,
                "current_value": value,
                "would_fire": would_fire,
                "severity": rule.severity.value,
            })
        return results

    def format_alert_summary(self, alerts):
        if not alerts:
            return "All clear - no alerts triggered."
        lines = []
        for a in alerts:
            sev = a.severity.value
            icon = {"critical": "!!!", "warning": "!!", "info": "i"}.get(sev, "?")
            lines.append(f"[{icon}] [{sev.upper()}] {a.description}")
        return "\n".join(lines)
