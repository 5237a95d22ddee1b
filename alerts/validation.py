"""Validation for user-entered alert rules."""
import math
import time

from models.alerts import AlertRule
from models.enums import Condition, KpiParameter, Severity


class RuleValidationError(ValueError):
    """Rule input rejected before it reaches the rule store."""


def build_rule(parameter, condition, threshold, severity, rule_id=None, allowed_parameters=None):
    """Validate raw form input and return a new AlertRule.

    `allowed_parameters` defaults to the known KPI set.
    """
    allowed = set(allowed_parameters or (p.value for p in KpiParameter))
    if parameter not in allowed:
        raise RuleValidationError(f"Unknown parameter: {parameter!r}")

    try:
        condition = Condition.parse(condition)
    except ValueError:
        raise RuleValidationError(f"Unknown condition: {condition!r}")

    try:
        severity = Severity(severity)
    except ValueError:
        raise RuleValidationError(f"Unknown severity: {severity!r}")

    try:
        threshold = float(threshold)
    except (TypeError, ValueError):
        raise RuleValidationError(f"Threshold must be a number, got {threshold!r}")
    if not math.isfinite(threshold) or threshold <= 0:
        raise RuleValidationError("Threshold must be a positive number")

    return AlertRule(
        id=rule_id or str(int(time.time() * 1000)),
        parameter=parameter,
        condition=condition,
        threshold=threshold,
        severity=severity,
    )
