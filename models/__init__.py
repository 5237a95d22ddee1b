"""Data models."""
from models.enums import KpiParameter, Condition, Severity, parameter_label
from models.alerts import AlertRule, TriggeredAlert, SystemAlarmRecord, AlarmDisplayItem
