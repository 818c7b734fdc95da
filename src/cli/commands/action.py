"""
Action commands for the spam unsubscribe tool.

Handles running the unsubscribe cascade against a URL and listing
recorded outcomes.
"""

import click
from src.cli_session import get_cli_session_manager
from src.database.outcome_recorder import DatabaseOutcomeRecorder
from src.email_processor.unsubscribe import UnsubscribeCandidate
from src.email_processor.unsubscribe.discovery import normalize_url
from src.unsubscribe_executor import execute_unsubscribe


@click.command('unsubscribe')
@click.argument('url')
@click.option('--dry-run', is_flag=True, help='Show what would happen without executing')
@click.option('--record', is_flag=True, help='Store the outcome in the database')
@click.option('--timeout', type=float, default=None, help='Per-request timeout in seconds')
def unsubscribe(url, dry_run, record, timeout):
    """
    Execute the unsubscribe cascade for a single URL or mailto: URI.

    Example:
        python main.py unsubscribe https://news.example.com/unsubscribe?id=42
        python main.py unsubscribe "mailto:leave@example.com?subject=unsubscribe"
        python main.py unsubscribe example.com/optout --dry-run
    """
    candidate = UnsubscribeCandidate.from_url(normalize_url(url.strip()))

    if dry_run:
        click.echo(f"\n[DRY RUN] Would unsubscribe via:")
        click.echo(f"  URL: {candidate.url}")
        click.echo(f"  Kind: {candidate.kind}")
        return

    click.echo(f"\nUnsubscribing via {candidate.url}...")
    outcome = execute_unsubscribe(candidate, timeout=timeout)

    if outcome.succeeded:
        click.secho(f"✓ {outcome.message}", fg='green')
    else:
        click.secho(f"✗ {outcome.message}", fg='red')
    click.echo(f"  Method: {outcome.method}")
    click.echo(f"  Status: {outcome.status}")
    if outcome.detail:
        click.echo(f"  Detail: {outcome.detail}")

    if record:
        session_manager = get_cli_session_manager()
        with session_manager.get_session() as session:
            DatabaseOutcomeRecorder(session).record_outcome(candidate, outcome)
        click.echo("  Outcome recorded")

    if not outcome.succeeded:
        raise click.Abort()


@click.command('history')
@click.option('--limit', type=int, default=20, show_default=True, help='Number of results to show')
def history(limit):
    """
    List recorded unsubscribe outcomes, newest first.

    Example:
        python main.py history --limit 5
    """
    session_manager = get_cli_session_manager()

    with session_manager.get_session() as session:
        results = DatabaseOutcomeRecorder(session).recent_results(limit)

        if not results:
            click.echo("No unsubscribe results recorded")
            return

        for result in results:
            marker = '✓' if result.succeeded else '✗'
            color = 'green' if result.succeeded else 'red'
            click.secho(f"{marker} [{result.method}] {result.url}", fg=color)
            click.echo(f"    {result.status}: {result.message}")
