"""Alarm history and custom rule panels."""
from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from models.enums import parameter_label
from utils.formatters import format_timestamp

SEVERITY_COLORS = {"critical": "red", "warning": "yellow", "info": "blue"}


class AlertsPanel:
    @staticmethod
    def render_history(history):
        table = Table(show_header=True, box=None, padding=(0, 1))
        table.add_column("Time", style="dim")
        table.add_column("Type")
        table.add_column("Severity")
        table.add_column("Status")
        table.add_column("Description")

        for alarm in history.items:
            sev = alarm.severity.value
            c = SEVERITY_COLORS.get(sev, "white")
            status = "[green]Resolved[/green]" if alarm.is_resolved else "[yellow]Pending[/yellow]"
            table.add_row(
                format_timestamp(alarm.timestamp),
                escape(alarm.alarm_type),
                f"[{c}]{sev}[/{c}]",
                status,
                escape((alarm.description or "")[:60]),
            )

        if not history.items:
            message = "No alarms recorded." if history.total == 0 else "No alarms match the filters."
            table.add_row("", "", "", "", f"[dim]{message}[/dim]")

        body = table
        if history.error:
            # Custom alerts are still listed when the system alarm fetch failed
            error = Text(f"Error loading system alarms: {history.error}", style="bold red")
            body = Group(error, table)

        return Panel(body, title="[bold yellow]Alarm History[/bold yellow]", border_style="yellow")

    @staticmethod
    def render_rules(rules):
        table = Table(show_header=True, box=None, padding=(0, 1))
        table.add_column("ID", style="dim")
        table.add_column("Parameter")
        table.add_column("Condition")
        table.add_column("Severity")
        for r in rules:
            c = SEVERITY_COLORS.get(r.severity.value, "white")
            table.add_row(r.id, parameter_label(r.parameter),
                          f"{r.condition.symbol} {r.threshold}", f"[{c}]{r.severity.value}[/{c}]")
        if not rules:
            table.add_row("", "[dim]No custom rules.[/dim]", "", "")
        return Panel(table, title="[bold]Active Rules[/bold]", border_style="blue")
