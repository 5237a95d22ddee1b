"""KPI card visibility for the home dashboard, persisted per installation."""
import logging
import sqlite3
from dataclasses import dataclass

logger = logging.getLogger("biogasmonitor.dashboard.layout")

STORAGE_KEY = "dashboard-config-storage"


@dataclass
class KpiCard:
    id: str
    title: str
    is_visible: bool = True


DEFAULT_KPIS = [
    ("generacion", "Generación Eléctrica", True),
    ("biogas", "Producción Biogás", True),
    ("consumoChp", "Consumo Específico CHP", True),
    ("fosTac", "Relación FOS/TAC", True),
    ("ch4", "Calidad Gas (CH4)", True),
    ("fos", "FOS", False),
    ("tac", "TAC", False),
    ("ph", "pH Digestor", False),
    ("temperatura", "Temp. Digestor", False),
    ("h2s", "H₂S Biogás", False),
]


class DashboardLayout:
    def __init__(self, store, storage_key=STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key
        self.kpis = [KpiCard(*k) for k in DEFAULT_KPIS]
        self._load()

    def _load(self):
        try:
            data = self.store.get(self.storage_key)
        except (sqlite3.Error, OSError, ValueError) as e:
            logger.warning(f"Could not read {self.storage_key}, using defaults: {e}")
            return
        if not isinstance(data, dict):
            return
        visibility = {
            k.get("id"): bool(k.get("isVisible"))
            for k in data.get("kpis", []) if isinstance(k, dict)
        }
        for card in self.kpis:
            if card.id in visibility:
                card.is_visible = visibility[card.id]

    def _save(self):
        payload = {"kpis": [{"id": k.id, "title": k.title, "isVisible": k.is_visible} for k in self.kpis]}
        try:
            self.store.set(self.storage_key, payload)
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to persist {self.storage_key}: {e}")

    def toggle_kpi(self, kpi_id):
        """Flip a card's visibility. Returns the card, or None for an unknown id."""
        for card in self.kpis:
            if card.id == kpi_id:
                card.is_visible = not card.is_visible
                self._save()
                return card
        return None

    def visible_kpis(self):
        return [k for k in self.kpis if k.is_visible]
