"""Shared test fixtures."""
import os
import sys
import pytest
import tempfile

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.database import Database
from models.alerts import AlertRule, SystemAlarmRecord, TriggeredAlert
from models.enums import Condition, Severity


class MemoryStore:
    """In-memory stand-in for the key-value store that records writes."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes.append(key)
        self.data[key] = value


class FailingStore:
    """Store whose every read and write fails."""

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    db = Database(db_path)
    db.connect()
    yield db
    db.close()
    os.unlink(db_path)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def fos_tac_rule():
    return AlertRule(id="r1", parameter="fosTac", condition=Condition.GREATER_THAN,
                     threshold=0.4, severity=Severity.CRITICAL)


@pytest.fixture
def sample_snapshot():
    return {"fosTac": 0.45, "ch4": 53.0}


def make_alert(n, severity=Severity.WARNING):
    return TriggeredAlert(
        id=f"a{n}", rule_id="r1",
        timestamp=f"2024-05-01T10:{n % 60:02d}:00+00:00",
        description=f"alert {n}", severity=severity,
    )


@pytest.fixture
def sample_system_alarms():
    return [
        SystemAlarmRecord(id=11, activated_at="2024-05-01T08:00:00+00:00",
                          description="Agitator motor overload", alarm_type="Motor",
                          severity="critical", resolved=True, equipment_id=4),
        SystemAlarmRecord(id=12, activated_at="2024-05-01T09:30:00+00:00",
                          description="Gas flare ignition failure", alarm_type=None,
                          severity=None, resolved=None, equipment_id=None),
    ]
