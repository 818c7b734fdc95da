"""
Main CLI group for the spam unsubscribe tool.

Integrates all commands into a single CLI application.
"""

import click
from src.config import Config, load_config_from_env_file
from src.email_processor.unsubscribe.logging import configure_unsubscribe_logging
from .commands.admin import init
from .commands.discover import discover, extract_text_command
from .commands.action import unsubscribe, history


@click.group()
@click.version_option(version='0.1.0', prog_name='Spam Unsubscribe')
@click.option('--log-level', default=None, help='Log level for the unsubscribe pipeline (default: LOG_LEVEL)')
def cli(log_level):
    """
    Spam Unsubscribe - find and invoke unsubscribe mechanisms in spam.
    
    Discovers unsubscribe links and mailto addresses in email bodies and
    performs the unsubscribe through a GET / form-submission cascade.
    """
    load_config_from_env_file()
    configure_unsubscribe_logging(level=log_level or Config.LOG_LEVEL, format=Config.LOG_FORMAT)


# Register standalone commands
cli.add_command(init, name='init')
cli.add_command(discover, name='discover')
cli.add_command(extract_text_command, name='extract-text')
cli.add_command(unsubscribe, name='unsubscribe')
cli.add_command(history, name='history')


if __name__ == '__main__':
    cli()
