"""Read-only client for the plant backend (PostgREST tables)."""
import logging

from models.alerts import SystemAlarmRecord
from utils.http_client import HTTPClient, APIError

logger = logging.getLogger("biogasmonitor.api")

# KPI name -> (table, column, order column)
KPI_SOURCES = {
    "fosTac": ("analisis_fos_tac", "relacion_fos_tac", "fecha_hora"),
    "ch4": ("lecturas_gas", "ch4_porcentaje", "fecha_hora"),
}


class PlantAPI:
    def __init__(self, config=None, client=None):
        cfg = (config or {}).get("api", {})
        self.client = client or HTTPClient(
            cfg.get("base_url", "http://localhost:54321/rest/v1"),
            api_key=cfg.get("api_key"),
            timeout=cfg.get("timeout", 30),
            max_retries=cfg.get("max_retries", 3),
        )
        self.kpi_sources = dict(KPI_SOURCES)
        for name, source in (cfg.get("extra_kpis") or {}).items():
            self.kpi_sources[name] = (source["table"], source["column"], source.get("order_by", "fecha_hora"))

    def _latest_value(self, table, column, order_column):
        rows = self.client.get(table, params={
            "select": column,
            "order": f"{order_column}.desc",
            "limit": 1,
        })
        if not rows:
            return None
        value = rows[0].get(column)
        return float(value) if value is not None else None

    def fetch_kpi_snapshot(self):
        """Latest value of every tracked KPI. Fields that fail or have no rows are None."""
        snapshot = {}
        for name, (table, column, order_column) in self.kpi_sources.items():
            try:
                snapshot[name] = self._latest_value(table, column, order_column)
            except (APIError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"KPI {name} unavailable: {e}")
                snapshot[name] = None
        return snapshot

    def fetch_system_alarms(self, limit=100):
        """Newest system alarms with their type label. Raises APIError on failure."""
        rows = self.client.get("alarmas", params={
            "select": "*,tipos_alarma(nombre_alarma)",
            "order": "fecha_hora_activacion.desc",
            "limit": limit,
        })
        if not isinstance(rows, list):
            raise APIError("Unexpected alarm payload", response_body=rows, source="alarmas")
        try:
            return [SystemAlarmRecord.from_row(r) for r in rows]
        except (KeyError, TypeError, AttributeError) as e:
            raise APIError(f"Malformed alarm row: {e!r}", response_body=rows, source="alarmas")
