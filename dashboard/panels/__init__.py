"""Dashboard panels."""
from dashboard.panels.alerts_panel import AlertsPanel
