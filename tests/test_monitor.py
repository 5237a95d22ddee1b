"""Tests for the plant API client, refresh cycle and alarm history view."""
import threading
from unittest.mock import MagicMock, patch

import pytest

from alerts.context import CustomAlerts
from monitor.api import PlantAPI
from monitor.monitor import PlantMonitor
from monitor.scheduler import MonitorScheduler
from models.enums import Severity
from utils.http_client import APIError, HTTPClient
from utils.sorting import ASCENDING


ALARM_ROWS = [
    {"id": 7, "fecha_hora_activacion": "2024-05-01T12:00:00+00:00",
     "descripcion_alarma_ocurrida": "High digester temperature", "equipo_id": 2,
     "resuelta": False, "severidad": "warning", "tipos_alarma": {"nombre_alarma": "Temperatura"}},
    {"id": 8, "fecha_hora_activacion": "2024-04-30T06:00:00Z",
     "descripcion_alarma_ocurrida": None, "equipo_id": None,
     "resuelta": None, "severidad": None, "tipos_alarma": None},
]


def _client(kpi_rows=None, alarm_rows=None, alarm_error=None):
    kpi_rows = kpi_rows or {}

    def get(path, params=None):
        if path == "alarmas":
            if alarm_error:
                raise alarm_error
            return alarm_rows or []
        result = kpi_rows.get(path)
        if isinstance(result, Exception):
            raise result
        return result or []

    client = MagicMock()
    client.get.side_effect = get
    return client


# ── PlantAPI ────────────────────────────────────────────

def test_fetch_kpi_snapshot():
    api = PlantAPI(client=_client({
        "analisis_fos_tac": [{"relacion_fos_tac": 0.45}],
        "lecturas_gas": [{"ch4_porcentaje": "53.2"}],
    }))
    assert api.fetch_kpi_snapshot() == {"fosTac": 0.45, "ch4": 53.2}


def test_fetch_kpi_snapshot_queries_latest_row():
    client = _client({"analisis_fos_tac": [{"relacion_fos_tac": 0.3}]})
    PlantAPI(client=client).fetch_kpi_snapshot()
    client.get.assert_any_call("analisis_fos_tac", params={
        "select": "relacion_fos_tac", "order": "fecha_hora.desc", "limit": 1,
    })


def test_fetch_kpi_snapshot_missing_fields_are_none():
    api = PlantAPI(client=_client({
        "analisis_fos_tac": APIError("HTTP 503", status_code=503),
        "lecturas_gas": [],
    }))
    assert api.fetch_kpi_snapshot() == {"fosTac": None, "ch4": None}


def test_extra_kpis_from_config():
    config = {"api": {"extra_kpis": {"h2s": {"table": "lecturas_gas", "column": "h2s_ppm"}}}}
    api = PlantAPI(config, client=_client({"lecturas_gas": [{"h2s_ppm": 180, "ch4_porcentaje": 52}]}))
    assert api.kpi_sources["h2s"] == ("lecturas_gas", "h2s_ppm", "fecha_hora")
    assert api.fetch_kpi_snapshot()["h2s"] == 180.0


def test_fetch_system_alarms():
    alarms = PlantAPI(client=_client(alarm_rows=ALARM_ROWS)).fetch_system_alarms()
    assert [a.id for a in alarms] == [7, 8]
    assert alarms[0].alarm_type == "Temperatura"
    assert alarms[0].equipment_id == 2
    assert alarms[1].alarm_type is None


def test_fetch_system_alarms_error_propagates():
    api = PlantAPI(client=_client(alarm_error=APIError("HTTP 401", status_code=401)))
    with pytest.raises(APIError):
        api.fetch_system_alarms()


@pytest.mark.parametrize("rows", [
    [{"descripcion_alarma_ocurrida": "no id"}],
    [{"id": 1, "fecha_hora_activacion": "2024-05-01T00:00:00Z", "tipos_alarma": "Motor"}],
    ["not a row"],
])
def test_fetch_system_alarms_malformed_rows(rows):
    api = PlantAPI(client=_client(alarm_rows=rows))
    with pytest.raises(APIError):
        api.fetch_system_alarms()


# ── PlantMonitor ────────────────────────────────────────

@pytest.fixture
def plant(memory_store):
    client = _client({
        "analisis_fos_tac": [{"relacion_fos_tac": 0.45}],
        "lecturas_gas": [{"ch4_porcentaje": 53}],
    }, alarm_rows=ALARM_ROWS)
    custom_alerts = CustomAlerts(memory_store)
    return PlantMonitor(PlantAPI(client=client), custom_alerts), custom_alerts


def test_refresh_evaluates_and_logs(plant):
    monitor, custom_alerts = plant
    snapshot, triggered = monitor.refresh()
    assert snapshot == {"fosTac": 0.45, "ch4": 53.0}
    assert len(triggered) == 1
    assert triggered[0].severity == Severity.CRITICAL
    assert custom_alerts.triggered_alerts() == triggered
    assert monitor.get_current_snapshot() == snapshot


def test_refresh_cycles_are_serialized(plant):
    monitor, custom_alerts = plant
    threads = [threading.Thread(target=monitor.refresh) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(custom_alerts.triggered_alerts()) == 8


def test_alarm_history_default_newest_first(plant):
    monitor, _ = plant
    monitor.refresh()
    history = monitor.get_alarm_history()
    assert history.error is None
    assert history.total == 3
    assert history.items[0].is_custom is True
    assert [i.id for i in history.items[1:]] == [7, 8]


def test_alarm_history_severity_sort_and_filters(plant):
    monitor, _ = plant
    monitor.refresh()
    by_severity = monitor.get_alarm_history(sort_key="severity", direction=ASCENDING)
    assert [i.severity for i in by_severity.items] == [Severity.INFO, Severity.WARNING, Severity.CRITICAL]

    found = monitor.get_alarm_history(search="TEMPERATURE")
    assert [i.id for i in found.items] == [7]
    assert found.total == 3


def test_alarm_history_partial_failure(memory_store):
    client = _client({"analisis_fos_tac": [{"relacion_fos_tac": 0.9}]},
                     alarm_error=APIError("HTTP 500", status_code=500))
    custom_alerts = CustomAlerts(memory_store)
    monitor = PlantMonitor(PlantAPI(client=client), custom_alerts)
    monitor.refresh()

    history = monitor.get_alarm_history()
    assert history.error == "HTTP 500"
    assert len(history.items) == 1
    assert history.items[0].is_custom is True


def test_alarm_history_survives_http_date_retry_after(memory_store):
    http = HTTPClient("https://plant.example", max_retries=0)
    resp = MagicMock(status_code=503, text="",
                     headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
    custom_alerts = CustomAlerts(memory_store)
    custom_alerts.evaluate({"fosTac": 0.9})
    monitor = PlantMonitor(PlantAPI(client=http), custom_alerts)

    with patch.object(http.session, "request", return_value=resp):
        history = monitor.get_alarm_history()
    assert "HTTP 503" in history.error
    assert [i.is_custom for i in history.items] == [True]


def test_alarm_history_malformed_rows_reported(memory_store):
    client = _client(alarm_rows=[{"descripcion_alarma_ocurrida": "no id"}])
    custom_alerts = CustomAlerts(memory_store)
    custom_alerts.evaluate({"fosTac": 0.9})
    history = PlantMonitor(PlantAPI(client=client), custom_alerts).get_alarm_history()
    assert "Malformed alarm row" in history.error
    assert len(history.items) == 1


# ── Scheduler ───────────────────────────────────────────

def test_scheduler_job_runs_callbacks():
    monitor = MagicMock()
    monitor.refresh.return_value = ({"fosTac": 0.5}, ["alert"])
    scheduler = MonitorScheduler(monitor, interval_seconds=60)
    seen = []
    scheduler.on_refresh(lambda snapshot, triggered: seen.append(triggered))
    scheduler._refresh_job()
    assert seen == [["alert"]]


def test_scheduler_job_counts_failures():
    monitor = MagicMock()
    monitor.refresh.side_effect = APIError("down")
    scheduler = MonitorScheduler(monitor, interval_seconds=60)
    scheduler._refresh_job()
    scheduler._refresh_job()
    assert scheduler._consecutive_failures == 2
