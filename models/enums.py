"""Enums for KPI parameters, rule conditions and severity."""
from enum import Enum


class KpiParameter(str, Enum):
    FOS_TAC = "fosTac"
    CH4 = "ch4"


PARAMETER_LABELS = {
    "fosTac": "FOS/TAC",
    "ch4": "Calidad de Gas (CH4)",
}


def parameter_label(parameter):
    """Display label for a KPI name, falling back to the raw name."""
    return PARAMETER_LABELS.get(str(parameter), str(parameter))


class Condition(str, Enum):
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    EQUAL_TO = "equalTo"

    @property
    def symbol(self):
        return CONDITION_SYMBOLS[self]

    @classmethod
    def parse(cls, value):
        """Accept enum values, long names or the short gt/lt/eq codes."""
        if isinstance(value, cls):
            return value
        value = str(value)
        if value in LEGACY_CONDITIONS:
            return LEGACY_CONDITIONS[value]
        return cls(value)


CONDITION_SYMBOLS = {
    Condition.GREATER_THAN: ">",
    Condition.LESS_THAN: "<",
    Condition.EQUAL_TO: "=",
}

LEGACY_CONDITIONS = {
    "gt": Condition.GREATER_THAN,
    "lt": Condition.LESS_THAN,
    "eq": Condition.EQUAL_TO,
}


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self):
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.CRITICAL: 3,
}
