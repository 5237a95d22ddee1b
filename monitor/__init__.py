"""KPI refresh and alarm sources."""
