"""Command-line interface for the athlete performance analytics tool."""

import json
import logging
import time
from datetime import timezone
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .config import config
from .db import get_db
from .db.repository import (
    get_athlete,
    load_sessions,
    save_athlete,
    save_sessions,
    session_from_dict,
    session_to_dict,
)
from .sample_data import generate_sample_sessions
from .analysis import (
    Athlete,
    InsightPriority,
    TrendDirection,
    analyze_trends,
    assess_injury_risk,
    evaluate_competition_readiness,
    run_analytics,
)
from .analysis.data_validation import SessionValidator
from .analysis.records import DisabilityType

console = Console()

TREND_STYLES = {
    TrendDirection.IMPROVING: "green",
    TrendDirection.DECLINING: "red",
    TrendDirection.STABLE: "blue",
    TrendDirection.FLUCTUATING: "yellow",
}

PRIORITY_STYLES = {
    InsightPriority.CRITICAL: "bold red",
    InsightPriority.HIGH: "red",
    InsightPriority.MEDIUM: "yellow",
    InsightPriority.LOW: "blue",
}


def get_risk_style(risk: float) -> str:
    """Color for an injury risk score."""
    if risk < 30:
        return "green"
    elif risk < 60:
        return "yellow"
    elif risk < 80:
        return "orange3"
    else:
        return "red"


def get_readiness_style(readiness: float) -> str:
    """Color for a readiness score."""
    if readiness >= 80:
        return "green"
    elif readiness >= 60:
        return "yellow"
    elif readiness >= 40:
        return "orange3"
    else:
        return "red"


def load_athlete_data(athlete_id: str):
    """Fetch the athlete profile and training log, or None when the athlete is unknown."""
    db = get_db()
    athlete = get_athlete(db, athlete_id)
    if athlete is None:
        console.print(f"[red]❌ Unknown athlete '{athlete_id}'. Run 'athlete-analytics add-athlete' first.[/red]")
        return None, []
    return athlete, load_sessions(db, athlete_id)


def print_trends(trends):
    table = Table(title="Performance Trends", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Trend")
    table.add_column("Change/week", justify="right")
    table.add_column("Predicted", justify="right")
    table.add_column("Confidence", justify="right")

    for trend in trends:
        style = TREND_STYLES[trend.trend]
        table.add_row(
            trend.metric.value,
            f"[{style}]{trend.trend.value}[/{style}]",
            f"{trend.change_rate_per_week:+.1f}%",
            f"{trend.predicted_value:.1f}",
            f"{trend.confidence:.0%}",
        )

    console.print(table)


def print_injury_risk(risk):
    style = get_risk_style(risk.overall)
    console.print(f"\n[bold]Injury risk:[/bold] [{style}]{risk.overall:.0f}%[/{style}]")

    table = Table(box=box.SIMPLE)
    table.add_column("Factor", style="cyan")
    table.add_column("Score", justify="right")
    table.add_row("Workload spike", f"{risk.factors.workload_spike:.0f}")
    table.add_row("Recovery deficit", f"{risk.factors.recovery_deficit:.0f}")
    table.add_row("Technique issues", f"{risk.factors.technique_issues:.0f}")
    table.add_row("Fatigue", f"{risk.factors.fatigue:.0f}")
    console.print(table)

    for recommendation in risk.recommendations:
        console.print(f"  • {recommendation}")


def print_readiness(readiness):
    style = get_readiness_style(readiness.overall)
    console.print(f"\n[bold]Competition readiness:[/bold] [{style}]{readiness.overall:.0f}%[/{style}]")

    table = Table(box=box.SIMPLE)
    table.add_column("Factor", style="cyan")
    table.add_column("Score", justify="right")
    for name, score in readiness.factors.items():
        table.add_row(name.capitalize(), f"{score:.0f}")
    console.print(table)

    for recommendation in readiness.recommendations:
        console.print(f"  • {recommendation}")

    if readiness.optimal_competition_date:
        console.print(f"\n📅 Predicted optimal competition date: "
                      f"[bold]{readiness.optimal_competition_date.strftime('%Y-%m-%d')}[/bold]")


def print_insights(insights):
    if not insights:
        console.print("[green]✅ No issues detected - keep up the current plan.[/green]")
        return

    for insight in insights:
        style = PRIORITY_STYLES[insight.priority]
        lines = [insight.description, "", f"[bold]Recommendation:[/bold] {insight.recommendation}"]
        lines.extend(f"  • {item}" for item in insight.action_items)
        console.print(Panel(
            "\n".join(lines),
            title=f"[{style}]{insight.priority.value.upper()}[/{style}] {insight.title}",
            subtitle=f"{insight.kind.value} · {insight.category.value} · confidence {insight.confidence:.0%}",
            box=box.ROUNDED,
        ))


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
def cli(log_level):
    """Athlete Performance Analytics Tool."""
    logging.basicConfig(
        level=(log_level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
@click.option("--name", help="Athlete name")
@click.option("--age", type=int, default=25, help="Athlete age")
@click.option("--disabled", is_flag=True, help="Athlete is a para-athlete")
@click.option("--disability-type", type=click.Choice(DisabilityType.ALL), help="Disability classification")
@click.option("--accommodation", multiple=True, help="Accommodation needed (repeatable)")
def add_athlete(athlete_id, name, age, disabled, disability_type, accommodation):
    """Create or update an athlete profile."""
    athlete = Athlete(
        id=athlete_id,
        name=name,
        age=age,
        is_disabled=disabled,
        disability_type=disability_type,
        accommodations_needed=tuple(accommodation),
    )
    try:
        save_athlete(get_db(), athlete)
        console.print(f"[green]✅ Saved athlete {athlete_id}[/green]")
    except Exception as e:
        console.print(f"[red]❌ Error saving athlete: {e}[/red]")


@cli.command()
@click.option("--file", "file_path", required=True, help="Path to a JSON file of training sessions")
@click.option("--athlete-id", help="Athlete the sessions belong to, when not set per session")
def import_sessions(file_path, athlete_id):
    """Import training sessions from a JSON file."""
    console.print(Panel.fit("📥 Importing Training Sessions", style="bold blue"))

    if not Path(file_path).exists():
        console.print(f"[red]❌ File not found: {file_path}[/red]")
        return

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        documents = payload.get("sessions", []) if isinstance(payload, dict) else payload

        sessions = []
        for document in documents:
            try:
                sessions.append(session_from_dict(document, athlete_id=athlete_id))
            except (KeyError, TypeError, ValueError) as e:
                console.print(f"[yellow]⚠️ Skipping malformed session {document.get('id', '?')}: {e}[/yellow]")

        valid, rejected = SessionValidator().partition(sessions)
        imported = save_sessions(get_db(), valid)

        console.print(f"[green]✅ Imported {imported} sessions[/green]")
        if len(valid) > imported:
            console.print(f"[yellow]ℹ️ Skipped {len(valid) - imported} duplicate sessions[/yellow]")
        if rejected:
            console.print(f"[yellow]⚠️ Rejected {len(rejected)} invalid sessions (see log)[/yellow]")

    except Exception as e:
        console.print(f"[red]❌ Error importing sessions: {e}[/red]")


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete the sessions belong to")
@click.option("--out", "out_path", required=True, help="Output JSON file")
@click.option("--weeks", default=8, help="Weeks of training to generate")
@click.option("--seed", default=42, help="Random seed")
def sample_data(athlete_id, out_path, weeks, seed):
    """Write a synthetic training log that can be imported with import-sessions."""
    sessions = generate_sample_sessions(athlete_id, weeks=weeks, seed=seed)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump({"sessions": [session_to_dict(s) for s in sessions]}, f, indent=2)
    console.print(f"[green]✅ Wrote {len(sessions)} sessions to {out_path}[/green]")


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
@click.option("--weeks", default=None, type=click.IntRange(min=1), help="Forecast horizon in weeks")
def trends(athlete_id, weeks):
    """Show per-metric performance trends."""
    athlete, sessions = load_athlete_data(athlete_id)
    if athlete is None:
        return
    print_trends(analyze_trends(sessions, weeks if weeks is not None else config.TREND_TIMEFRAME_WEEKS))


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
@click.option("--weeks", default=None, type=click.IntRange(min=1), help="Lookback window in weeks")
def risk(athlete_id, weeks):
    """Assess current injury risk."""
    athlete, sessions = load_athlete_data(athlete_id)
    if athlete is None:
        return
    print_injury_risk(assess_injury_risk(
        athlete, sessions, weeks if weeks is not None else config.INJURY_TIMEFRAME_WEEKS
    ))


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
@click.option("--competition-date", type=click.DateTime(formats=["%Y-%m-%d"]), help="Upcoming competition date")
def readiness(athlete_id, competition_date):
    """Evaluate competition readiness."""
    athlete, sessions = load_athlete_data(athlete_id)
    if athlete is None:
        return
    if competition_date is not None:
        competition_date = competition_date.replace(tzinfo=timezone.utc)
    print_readiness(evaluate_competition_readiness(athlete, sessions, competition_date))


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
def insights(athlete_id):
    """Show prioritized insights."""
    athlete, sessions = load_athlete_data(athlete_id)
    if athlete is None:
        return

    report = run_analytics(athlete, sessions)
    if not report.has_data:
        console.print(f"[red]❌ Error generating insights: {report.error}[/red]")
        return
    print_insights(report.insights)


def _render_report(athlete, sessions, as_json: bool):
    report = run_analytics(athlete, sessions)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    title = athlete.name or athlete.id
    console.print(Panel.fit(f"🧠 Performance Analytics - {title}", style="bold blue"))
    if not report.has_data:
        console.print(f"[yellow]⚠️ Insufficient data for analysis ({report.error})[/yellow]")
        return

    print_trends(report.trends)
    print_injury_risk(report.injury_risk)
    print_readiness(report.competition_readiness)
    console.print()
    print_insights(report.insights)
    console.print(f"\n[dim]Updated {report.generated_at.astimezone().strftime('%H:%M:%S')} "
                  f"from {len(sessions)} sessions[/dim]")


@cli.command()
@click.option("--athlete-id", required=True, help="Athlete identifier")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--watch", is_flag=True, help="Refresh the report periodically")
@click.option("--interval", default=None, type=int, help="Refresh interval in seconds")
def report(athlete_id, as_json, watch, interval):
    """Full analytics report: trends, injury risk, readiness and insights."""
    athlete, sessions = load_athlete_data(athlete_id)
    if athlete is None:
        return

    _render_report(athlete, sessions, as_json)
    if not watch:
        return

    interval = interval or config.REFRESH_INTERVAL_SECONDS
    while True:
        time.sleep(interval)
        athlete, sessions = load_athlete_data(athlete_id)
        if athlete is None:
            return
        if not as_json:
            console.clear()
        _render_report(athlete, sessions, as_json)


@cli.command()
def status():
    """Show training log statistics."""
    console.print(Panel.fit("ℹ️  System Status", style="bold blue"))

    try:
        counts = get_db().table_counts()
        console.print(f"\n[black]📊 Database Statistics ({config.DATABASE_URL}):[/black]")
        console.print(f"  • Athletes: {counts['athletes']}")
        console.print(f"  • Training sessions: {counts['training_sessions']}")
        console.print(f"  • Exercises: {counts['exercises']}")
    except Exception as e:
        console.print(f"[red]❌ Database error: {e}[/red]")


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[orange3]Operation cancelled by user.[/orange3]")


if __name__ == "__main__":
    main()
