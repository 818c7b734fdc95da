"""
Admin commands for the spam unsubscribe tool.

Handles database initialization.
"""

import click
from src.database import init_database


@click.command('init')
@click.option('--database-url', default=None, help='SQLAlchemy URL (defaults to DATABASE_URL)')
def init(database_url):
    """
    Initialize the database.
    
    Creates the scan, spam email and unsubscribe result tables.
    
    Example:
        python main.py init
    """
    try:
        db_manager = init_database(database_url)
        click.secho("✓ Database initialized successfully", fg='green')
        click.echo(f"Database location: {db_manager.database_url}")
    except Exception as e:
        click.secho(f"✗ Error initializing database: {e}", fg='red')
        raise click.Abort()
