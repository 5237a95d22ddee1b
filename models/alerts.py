"""Dataclasses for alert rules, triggered alerts and alarm display rows."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from models.enums import Condition, Severity


@dataclass(frozen=True)
class AlertRule:
    id: str = ""
    parameter: str = "fosTac"
    condition: Condition = Condition.GREATER_THAN
    threshold: float = 0.0
    severity: Severity = Severity.INFO

    def to_dict(self):
        return {
            "id": self.id,
            "parameter": self.parameter,
            "condition": self.condition.value,
            "threshold": self.threshold,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, d):
        """Rebuild from persisted JSON. Older entries store the threshold as `value`."""
        threshold = d["threshold"] if "threshold" in d else d["value"]
        return cls(
            id=str(d["id"]),
            parameter=str(d["parameter"]),
            condition=Condition.parse(d["condition"]),
            threshold=float(threshold),
            severity=Severity(d.get("severity") or "info"),
        )


@dataclass(frozen=True)
class TriggeredAlert:
    id: str = ""
    rule_id: str = ""
    timestamp: str = ""
    description: str = ""
    severity: Severity = Severity.INFO

    def to_dict(self):
        return {
            "id": self.id,
            "ruleId": self.rule_id,
            "timestamp": self.timestamp,
            "description": self.description,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=str(d["id"]),
            rule_id=str(d.get("ruleId", "")),
            timestamp=str(d["timestamp"]),
            description=d.get("description", ""),
            severity=Severity(d.get("severity") or "info"),
        )


@dataclass
class SystemAlarmRecord:
    """Backend alarm row as delivered by the system alarm source."""
    id: Union[int, str] = 0
    activated_at: str = ""
    description: Optional[str] = None
    alarm_type: Optional[str] = None
    severity: Optional[str] = None
    resolved: Optional[bool] = None
    equipment_id: Optional[int] = None

    @classmethod
    def from_row(cls, row):
        """Map an `alarmas` row with its joined `tipos_alarma` label."""
        alarm_type = row.get("tipos_alarma") or {}
        return cls(
            id=row["id"],
            activated_at=row["fecha_hora_activacion"],
            description=row.get("descripcion_alarma_ocurrida"),
            alarm_type=alarm_type.get("nombre_alarma"),
            severity=row.get("severidad"),
            resolved=row.get("resuelta"),
            equipment_id=row.get("equipo_id"),
        )


@dataclass
class AlarmDisplayItem:
    id: Union[int, str]
    timestamp: Optional[datetime]
    description: Optional[str]
    alarm_type: str
    severity: Severity
    is_resolved: bool
    is_custom: bool
    equipment_ref: Optional[int] = None
