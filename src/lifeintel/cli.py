"""Life Intelligence Command Line Interface."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lifeintel.config.log_config import configure_logging
from lifeintel.store import LogStore

app = typer.Typer(
    name="lifeintel",
    help="Life Intelligence - daily logs, scores and insights",
    no_args_is_help=True,
)
console = Console()

DatabaseUrl = typer.Option(None, "--database-url", help="Override DATABASE_URL")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    """Configure logging before any command runs."""
    configure_logging(level=log_level.upper() if log_level else None)


def _open_store(database_url: str | None) -> LogStore:
    from lifeintel.db import create_db_engine
    from lifeintel.store import SQLLogStore

    return SQLLogStore(create_db_engine(database_url))


@app.command("init-db")
def init_db(database_url: str = DatabaseUrl):
    """Create the database tables."""
    _open_store(database_url)
    console.print("[green]✓ Database ready[/green]")


@app.command()
def dashboard(database_url: str = DatabaseUrl):
    """Show domain scores and insights."""
    from lifeintel.aggregators.dashboard import DashboardAggregator

    data = DashboardAggregator(_open_store(database_url)).get_dashboard()
    console.print(Panel("Life Intelligence Dashboard", style="blue"))

    if not data.has_data or data.scores is None:
        console.print("[yellow]No data logged yet.[/yellow]")
        console.print("Log sleep under body and mood under mind to see the first correlations.")
        return

    scores = data.scores
    table = Table(title="Scores")
    table.add_column("Domain", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_row("Body", str(scores.body))
    table.add_row("Mind", str(scores.mind))
    table.add_row("Finance", str(scores.finance))
    table.add_row("Discipline", str(scores.discipline))
    table.add_row("[bold]Overall[/bold]", f"[bold]{scores.overall}[/bold]")
    console.print(table)

    averages = data.averages
    if averages.sleep_hours is not None:
        console.print(
            f"\n[cyan]Averages:[/cyan] sleep {averages.sleep_hours:.1f}h, "
            f"energy {averages.energy_level:.1f}"
        )

    console.print("\n[cyan]Insights:[/cyan]")
    if not data.insights:
        console.print("  Waiting for more data to generate insights.")
    for insight in data.insights:
        color = "green" if insight.polarity == "positive" else "red"
        console.print(f"  [{color}]• {insight.title}[/{color}]: {insight.text}")


@app.command()
def projects(database_url: str = DatabaseUrl):
    """List projects."""
    items = _open_store(database_url).list_projects()

    if not items:
        console.print("[yellow]No projects found[/yellow]")
        return

    table = Table(title="Projects")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Weekly goal (h)", style="green", justify="right")

    for project in items:
        table.add_row(str(project.id), project.name, f"{project.weekly_goal_hours:g}")

    console.print(table)


@app.command()
def inbox(
    limit: int = typer.Option(20, help="Max items"),
    database_url: str = DatabaseUrl,
):
    """Show the mental inbox, newest first."""
    items = _open_store(database_url).list_inbox(limit)

    if not items:
        console.print("[yellow]Inbox is empty[/yellow]")
        return

    for item in items:
        console.print(f"[cyan]#{item.id}[/cyan] ({item.type.value}) {escape(item.content)}")


@app.command()
def note(
    content: str = typer.Argument(..., help="What is on your mind"),
    kind: str = typer.Option("thought", "--type", help="idea, worry, thought or task"),
    database_url: str = DatabaseUrl,
):
    """Drop an item into the mental inbox."""
    from lifeintel.store import ValidationError

    try:
        item = _open_store(database_url).add_inbox_item({"content": content, "type": kind})
    except ValidationError as e:
        for error in e.errors:
            console.print(f"[red]✗ {error['field']}: {escape(error['message'])}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Saved #{item.id} ({item.type.value})[/green]")


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address"),
    port: int = typer.Option(None, help="Port"),
):
    """Run the HTTP API server."""
    from lifeintel.api import run_server

    run_server(host=host, port=port)


@app.command()
def version():
    """Show Life Intelligence version."""
    from lifeintel import __version__

    console.print(f"Life Intelligence v{__version__}")


if __name__ == "__main__":
    app()
