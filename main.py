#!/usr/bin/env python3
"""Biogas Plant Monitor - CLI Entry Point."""
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from __version__ import __version__

console = Console()


def _init_components(config_path=None, verbose=False):
    """Lazy initialization of all components."""
    from utils.logger import setup_logging
    from config import load_config
    from models.database import Database
    from monitor.api import PlantAPI
    from monitor.monitor import PlantMonitor
    from alerts.context import CustomAlerts
    from dashboard.layout import DashboardLayout

    config = load_config(config_path)
    level = "DEBUG" if verbose else config["logging"].get("level", "INFO")
    setup_logging(level, config["logging"].get("file"))

    db = Database(config["database"]["path"])
    db.connect()

    custom_alerts = CustomAlerts(
        db,
        storage_key=config["alerts"].get("storage_key", "custom-alerts-storage"),
    )
    api = PlantAPI(config)
    monitor = PlantMonitor(api, custom_alerts, config)
    layout = DashboardLayout(db, config.get("dashboard", {}).get("storage_key", "dashboard-config-storage"))

    return {
        "config": config, "db": db, "api": api, "monitor": monitor,
        "custom_alerts": custom_alerts, "layout": layout,
    }


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="biogasmonitor")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Biogas Plant Monitor - KPI threshold alerts and alarm history."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _get_components(ctx):
    if "_components" not in ctx.obj:
        ctx.obj["_components"] = _init_components(ctx.obj.get("config_path"), ctx.obj.get("verbose"))
    return ctx.obj["_components"]


# ──────────────────────────────────────────────────────
# ALERTS
# ──────────────────────────────────────────────────────
@cli.group()
def alerts():
    """Custom alert rules and alarm history."""
    pass


@alerts.command("rules")
@click.pass_context
def alerts_rules(ctx):
    """List all custom alert rules."""
    from dashboard.panels.alerts_panel import AlertsPanel
    c = _get_components(ctx)
    console.print(AlertsPanel.render_rules(c["custom_alerts"].list_rules()))


@alerts.command("add")
@click.option("--parameter", required=True, help="KPI name (fosTac, ch4)")
@click.option("--condition", required=True,
              type=click.Choice(["greaterThan", "lessThan", "equalTo", "gt", "lt", "eq"]))
@click.option("--threshold", required=True, type=float, help="Positive threshold value")
@click.option("--severity", default="warning", type=click.Choice(["info", "warning", "critical"]))
@click.pass_context
def alerts_add(ctx, parameter, condition, threshold, severity):
    """Add a custom alert rule."""
    from alerts.validation import build_rule, RuleValidationError
    from monitor.api import KPI_SOURCES
    c = _get_components(ctx)
    allowed = set(KPI_SOURCES) | set(c["config"]["api"].get("extra_kpis") or {})
    try:
        rule = build_rule(parameter, condition, threshold, severity, allowed_parameters=allowed)
    except RuleValidationError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)
    c["custom_alerts"].add_rule(rule)
    console.print(f"[green]✓[/green] Rule {rule.id} saved: {rule.parameter} {rule.condition.symbol} {rule.threshold} ({rule.severity.value})")


@alerts.command("remove")
@click.argument("rule_id")
@click.pass_context
def alerts_remove(ctx, rule_id):
    """Remove a custom alert rule by ID."""
    c = _get_components(ctx)
    existed = c["custom_alerts"].rules.get_rule(rule_id) is not None
    c["custom_alerts"].remove_rule(rule_id)
    if existed:
        console.print(f"[green]✓[/green] Rule {rule_id} removed")
    else:
        console.print(f"[dim]No rule with ID {rule_id}[/dim]")


@alerts.command("check")
@click.pass_context
def alerts_check(ctx):
    """Fetch the latest KPIs and evaluate all rules."""
    c = _get_components(ctx)
    _, triggered = c["monitor"].refresh()
    summary = escape(c["custom_alerts"].evaluator.format_alert_summary(triggered))
    if triggered:
        console.print(f"[bold yellow]{len(triggered)} alert(s) triggered:[/bold yellow]")
        console.print(summary)
    else:
        console.print(f"[green]{summary}[/green]")


@alerts.command("test")
@click.pass_context
def alerts_test(ctx):
    """Show which rules would fire against the latest KPIs, without logging."""
    from utils.formatters import format_kpi
    c = _get_components(ctx)
    snapshot = c["monitor"].get_current_snapshot()
    results = c["custom_alerts"].evaluator.preview(c["custom_alerts"].list_rules(), snapshot)

    table = Table(title="Alert Rules Test", show_header=True)
    table.add_column("Rule")
    table.add_column("Parameter")
    table.add_column("Condition")
    table.add_column("Current")
    table.add_column("Would Fire")

    for r in results:
        fire_str = "[green]YES[/green]" if r["would_fire"] else "[dim]no[/dim]"
        val = format_kpi(r["current_value"])
        table.add_row(r["rule_id"], r["parameter"], f"{r['condition']} {r['threshold']}", val, fire_str)
    console.print(table)


@alerts.command("log")
@click.option("--limit", default=20, type=int, help="Number of entries to show")
@click.pass_context
def alerts_log(ctx, limit):
    """Show the triggered-alert log, newest first."""
    from utils.formatters import format_timestamp, time_ago
    c = _get_components(ctx)
    entries = c["custom_alerts"].triggered_alerts()
    if not entries:
        console.print("[dim]No triggered alerts[/dim]")
        return
    table = Table(title=f"Triggered Alerts ({len(entries)})", show_header=True)
    table.add_column("Time", style="dim")
    table.add_column("Age", style="dim")
    table.add_column("Severity")
    table.add_column("Rule")
    table.add_column("Description")
    for a in entries[:limit]:
        table.add_row(format_timestamp(a.timestamp), time_ago(a.timestamp), a.severity.value,
                      a.rule_id, escape(a.description))
    console.print(table)


@alerts.command("history")
@click.option("--severity", default="all", type=click.Choice(["all", "info", "warning", "critical"]))
@click.option("--status", default="all", type=click.Choice(["all", "resolved", "pending"]))
@click.option("--sort", "sort_key", default="timestamp", type=click.Choice(["timestamp", "alarm_type", "severity"]))
@click.option("--desc/--asc", "descending", default=True, help="Sort direction")
@click.option("--search", default=None, help="Filter descriptions containing this text")
@click.pass_context
def alerts_history(ctx, severity, status, sort_key, descending, search):
    """Show system alarms and custom alerts together."""
    from dashboard.panels.alerts_panel import AlertsPanel
    from utils.sorting import ASCENDING, DESCENDING
    c = _get_components(ctx)
    history = c["monitor"].get_alarm_history(
        severity=severity, status=status, sort_key=sort_key,
        direction=DESCENDING if descending else ASCENDING, search=search,
    )
    console.print(AlertsPanel.render_history(history))


# ──────────────────────────────────────────────────────
# KPI CARDS
# ──────────────────────────────────────────────────────
@cli.group()
def kpis():
    """Dashboard KPI card visibility."""
    pass


@kpis.command("show")
@click.pass_context
def kpis_show(ctx):
    """List KPI cards and whether they are shown."""
    c = _get_components(ctx)
    table = Table(title="Dashboard KPIs", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Visible")
    for k in c["layout"].kpis:
        table.add_row(k.id, k.title, "[green]✓[/green]" if k.is_visible else "[red]✗[/red]")
    console.print(table)
    visible = c["layout"].visible_kpis()
    console.print(f"{len(visible)} of {len(c['layout'].kpis)} cards visible: {', '.join(k.id for k in visible)}")


@kpis.command("toggle")
@click.argument("kpi_id")
@click.pass_context
def kpis_toggle(ctx, kpi_id):
    """Show or hide a KPI card."""
    c = _get_components(ctx)
    card = c["layout"].toggle_kpi(kpi_id)
    if card is None:
        console.print(f"[red]✗[/red] Unknown KPI: {escape(kpi_id)}")
        sys.exit(1)
    state = "visible" if card.is_visible else "hidden"
    console.print(f"[green]✓[/green] {card.title} is now {state}")


# ──────────────────────────────────────────────────────
# WATCH
# ──────────────────────────────────────────────────────
@cli.command()
@click.option("--interval", default=None, type=int, help="Refresh interval in seconds")
@click.pass_context
def watch(ctx, interval):
    """Refresh KPIs periodically and report triggered alerts."""
    from monitor.scheduler import MonitorScheduler
    c = _get_components(ctx)
    interval = interval or c["config"]["monitor"]["refresh_interval"]
    scheduler = MonitorScheduler(c["monitor"], interval_seconds=interval)

    def report(snapshot, triggered):
        for a in triggered:
            console.print(f"[bold yellow]{a.severity.value.upper()}[/bold yellow] {escape(a.description)}")

    scheduler.on_refresh(report)
    scheduler.start()
    console.print(f"Watching every {interval}s. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        scheduler.stop()
        console.print("\n[dim]Stopped[/dim]")


if __name__ == "__main__":
    cli()
