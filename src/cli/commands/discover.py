"""
Discovery commands for the spam unsubscribe tool.

Inspect an email body without touching the network.
"""

import json
import click

from src.config import Config
from src.email_processor.unsubscribe import discover_unsubscribe_candidates, extract_text


def read_body(source) -> str:
    """Read an email body from an open click file, truncated to MAX_BODY_LENGTH."""
    return source.read()[:Config.MAX_BODY_LENGTH]


@click.command('discover')
@click.argument('source', type=click.File('r', encoding='utf-8', errors='replace'))
@click.option('--json', 'as_json', is_flag=True, help='Print candidates as JSON')
def discover(source, as_json):
    """
    List unsubscribe candidates found in an email body.
    
    SOURCE is a file holding the raw HTML or text body ("-" for stdin).
    
    Example:
        python main.py discover message.html
        cat message.html | python main.py discover - --json
    """
    candidates = discover_unsubscribe_candidates(read_body(source))
    
    if as_json:
        click.echo(json.dumps([candidate.to_dict() for candidate in candidates], indent=2))
        return
    
    if not candidates:
        click.echo("No unsubscribe candidates found")
        return
    
    click.secho(f"Found {len(candidates)} unsubscribe candidate(s):", fg='green')
    for index, candidate in enumerate(candidates, start=1):
        click.echo(f"  {index}. [{candidate.kind}] {candidate.url}")
        if candidate.display_text != candidate.url:
            click.echo(f"     text: {candidate.display_text}")


@click.command('extract-text')
@click.argument('source', type=click.File('r', encoding='utf-8', errors='replace'))
def extract_text_command(source):
    """
    Print the plain text of an HTML email body, as the classifier sees it.
    
    Example:
        python main.py extract-text message.html
    """
    click.echo(extract_text(read_body(source)))
