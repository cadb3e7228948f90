import typer
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from typing import Optional
from datetime import datetime

from murajaah.config import settings
from murajaah.database import db_session, init_db
from murajaah.exceptions import InvalidInput, ItemNotFound
from murajaah.logging import configure_logging
from murajaah.repositories import SqlAlchemyReviewRepository
from murajaah.review_service import ReviewService
from murajaah.scheduler import days_overdue
from murajaah.sm2 import Quality
from murajaah.study_session import STUDY_PROFILES, get_profile

app = typer.Typer(help="Murajaah CLI - spaced repetition review scheduling")
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL"),
    log_format: Optional[str] = typer.Option(None, help="Override LOG_FORMAT (json/console)")
):
    """Configure logging before any command runs"""
    configure_logging(level=log_level, fmt=log_format)


def _parse_at(at: Optional[str]) -> Optional[datetime]:
    """Parse the --at option, None means "now" """
    if not at:
        return None
    try:
        return datetime.fromisoformat(at)
    except ValueError:
        console.print(f"[red]✗[/red] Invalid timestamp '{at}'. Use ISO format, e.g. 2024-03-01T08:00:00+00:00")
        raise typer.Exit(code=1)


def _service(db) -> ReviewService:
    return ReviewService(SqlAlchemyReviewRepository(db))


@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")


@app.command()
def add_items(
    subjects: str = typer.Option(..., prompt="Subjects (comma-separated, e.g. word-rahman,word-rahim)"),
    user_id: Optional[str] = typer.Option(None, help="Owner of the items"),
    at: Optional[str] = typer.Option(None, help="Creation time (ISO), default: now")
):
    """Start tracking one or more subjects"""
    now = _parse_at(at)
    with db_session() as db:
        service = _service(db)
        subject_list = [s.strip() for s in subjects.split(",") if s.strip()]

        for subject_id in subject_list:
            item = service.enroll(subject_id, user_id=user_id, now=now)
            console.print(f"[green]✓[/green] {subject_id} → {item.id} (first review {item.next_review_at:%Y-%m-%d %H:%M})")


@app.command()
def due(
    user_id: Optional[str] = typer.Option(None, help="Only this user's items"),
    show_all: bool = typer.Option(False, "--all", help="Do not cap to the session size"),
    at: Optional[str] = typer.Option(None, help="Evaluate at this time (ISO), default: now")
):
    """List items due for review in study order"""
    now = _parse_at(at)
    with db_session() as db:
        service = _service(db)
        items = service.due_queue(now=now, user_id=user_id, capped=not show_all)

        if not items:
            console.print("[green]Nothing due for review.[/green]")
            return

        reference = now or service.clock()
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("Subject", style="green")
        table.add_column("Priority", style="yellow")
        table.add_column("Due", style="blue")
        table.add_column("Days Overdue", style="red")
        table.add_column("Ease")

        for item in items:
            overdue = days_overdue(item, reference, service.calendar)
            table.add_row(
                item.id,
                item.subject_id,
                item.priority.value,
                f"{item.next_review_at:%Y-%m-%d %H:%M}",
                str(overdue) if overdue > 0 else "Today",
                f"{item.ease_factor:.2f}"
            )

        console.print(table)


@app.command()
def review(
    item_id: str = typer.Option(..., prompt="Item ID"),
    quality: int = typer.Option(..., prompt="Quality rating (0-5)"),
    response_time_ms: Optional[int] = typer.Option(None, help="Answer latency in milliseconds"),
    at: Optional[str] = typer.Option(None, help="Review time (ISO), default: now")
):
    """Record a graded review for an item"""
    now = _parse_at(at)
    with db_session() as db:
        service = _service(db)
        try:
            item = service.review(item_id, quality, now=now, response_time_ms=response_time_ms)
        except (InvalidInput, ItemNotFound) as exc:
            console.print(f"[red]✗[/red] {exc}")
            raise typer.Exit(code=1)

        console.print(f"[green]✓[/green] Review recorded!")
        console.print(escape(f"  Item: {item.id} [{item.subject_id}]"))
        console.print(f"  Quality: {quality}/5 ({Quality(quality).description})")
        console.print(f"  Next review: {item.next_review_at:%Y-%m-%d %H:%M} (in {item.interval} days)")
        console.print(f"  Repetitions: {item.repetitions}, priority: {item.priority.value}")
        console.print(f"  Easiness: {item.ease_factor:.2f}")


@app.command()
def stats(
    user_id: Optional[str] = typer.Option(None, help="Only this user's items"),
    at: Optional[str] = typer.Option(None, help="Evaluate at this time (ISO), default: now")
):
    """Show study statistics"""
    now = _parse_at(at)
    with db_session() as db:
        service = _service(db)
        result = service.stats(now=now, user_id=user_id)

        console.print(f"\n[bold]Study Statistics[/bold]")
        console.print(f"  Total items: {result.total_items}")
        console.print(f"  Due now: {result.due_items}")
        console.print(f"  Learned: {result.learned_items}")
        console.print(f"  New: {result.new_items}")
        console.print(f"  Retention: {result.average_retention:.1f}%")
        console.print(f"  Streak: {result.streak_days} days")
        console.print(f"  Activity streak (all reviews): {service.activity_streak(now=now)} days")


@app.command()
def forecast(
    days: int = typer.Option(7, help="How many days ahead to look"),
    user_id: Optional[str] = typer.Option(None, help="Only this user's items"),
    at: Optional[str] = typer.Option(None, help="Evaluate at this time (ISO), default: now")
):
    """Show how many items fall due on upcoming days"""
    if days < 0:
        console.print(f"[red]✗[/red] Days must be zero or more")
        raise typer.Exit(code=1)

    now = _parse_at(at)
    with db_session() as db:
        entries = _service(db).forecast(days, now=now, user_id=user_id)

        if not entries:
            console.print(f"[yellow]No reviews scheduled in the next {days} days[/yellow]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Date", style="cyan")
        table.add_column("Reviews", style="green")
        for entry in entries:
            table.add_row(entry.date.isoformat(), str(entry.count))
        console.print(table)


@app.command()
def profiles():
    """List the built-in study profiles"""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Profile", style="cyan")
    table.add_column("Daily Goal", style="green")
    table.add_column("Session", style="blue")
    table.add_column("Max New", style="yellow")

    for profile in STUDY_PROFILES.values():
        marker = " (default)" if profile.name == settings.study_profile else ""
        table.add_row(
            profile.name + marker,
            str(profile.daily_goal),
            f"{profile.session_duration_minutes} min",
            str(profile.max_new_items)
        )

    console.print(table)


@app.command()
def plan(
    profile: Optional[str] = typer.Option(None, help="Study profile, default: STUDY_PROFILE setting"),
    user_id: Optional[str] = typer.Option(None, help="Only this user's items"),
    at: Optional[str] = typer.Option(None, help="Plan at this time (ISO), default: now")
):
    """Pick the items for the next study session"""
    try:
        study_profile = get_profile(profile or settings.study_profile)
    except InvalidInput as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=1)

    now = _parse_at(at)
    with db_session() as db:
        items = _service(db).plan(study_profile, now=now, user_id=user_id)

        if not items:
            console.print("[green]Nothing to study right now.[/green]")
            return

        console.print(
            f"[bold]Session plan ({study_profile.name}, ~{study_profile.session_duration_minutes} min): "
            f"{len(items)} items[/bold]"
        )
        for i, item in enumerate(items, 1):
            console.print(escape(f"  {i}. [{item.priority.value}] {item.subject_id} ({item.id})"))


if __name__ == "__main__":
    app()
