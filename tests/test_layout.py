"""Tests for dashboard KPI card visibility."""
from dashboard.layout import DashboardLayout, STORAGE_KEY
from conftest import MemoryStore, FailingStore


def test_defaults():
    layout = DashboardLayout(MemoryStore())
    assert [k.id for k in layout.visible_kpis()] == ["generacion", "biogas", "consumoChp", "fosTac", "ch4"]
    assert len(layout.kpis) == 10


def test_toggle_persists_and_reloads(temp_db):
    layout = DashboardLayout(temp_db)
    card = layout.toggle_kpi("h2s")
    assert card.is_visible is True
    layout.toggle_kpi("biogas")

    reloaded = DashboardLayout(temp_db)
    visible = {k.id for k in reloaded.visible_kpis()}
    assert "h2s" in visible
    assert "biogas" not in visible


def test_toggle_unknown_kpi():
    store = MemoryStore()
    assert DashboardLayout(store).toggle_kpi("nope") is None
    assert store.writes == []


def test_toggle_twice_restores():
    store = MemoryStore()
    layout = DashboardLayout(store)
    layout.toggle_kpi("ph")
    layout.toggle_kpi("ph")
    assert not next(k for k in layout.kpis if k.id == "ph").is_visible
    assert store.writes == [STORAGE_KEY, STORAGE_KEY]


def test_corrupt_storage_uses_defaults():
    layout = DashboardLayout(MemoryStore({STORAGE_KEY: ["unexpected"]}))
    assert len(layout.visible_kpis()) == 5


def test_failing_store_is_non_fatal():
    layout = DashboardLayout(FailingStore())
    assert layout.toggle_kpi("ph").is_visible is True
