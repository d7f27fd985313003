# firflow/cli/base_cmd.py

"""
Base setup for CLI commands: configuration loading and logging initialization.
"""

import logging
import sys

import click

from firflow.config import load_configuration
from firflow.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


class ConfigGroup(click.Group):
    """
    A Click Group that loads configuration and sets up logging before
    invoking the group or its subcommands. The config is passed to commands
    as ctx.obj['config'].
    """
    def invoke(self, ctx: click.Context):
        if ctx.obj is None:
            ctx.obj = {}

        try:
            if 'config' not in ctx.obj:
                config = load_configuration()
                ctx.obj['config'] = config

                if ctx.params.get('quiet', False):
                    verbosity = -1
                else:
                    verbosity = ctx.params.get('verbose', 0)
                setup_logging(config, verbosity)
                logger.debug("Logging setup complete in ConfigGroup.")
            else:
                logger.debug("Configuration already loaded in context.")
        except Exception as e:
            # Only setup failures are handled here; command errors propagate.
            logging.getLogger("firflow.error").critical(f"Critical error during CLI setup: {e!r}", exc_info=True)
            print(f"CRITICAL SETUP ERROR: {e!r}", file=sys.stderr)
            ctx.exit(1)

        return super().invoke(ctx)


# --- Common CLI Options ---
verbose_option = click.option(
    '-v', '--verbose',
    count=True,
    help="Increase verbosity level (-v for INFO, -vv for DEBUG)."
)
quiet_option = click.option(
    '-q', '--quiet',
    is_flag=True,
    default=False,
    help="Suppress all console output except critical errors."
)
