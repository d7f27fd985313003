# firflow/cli/main.py

"""
Main entry point for the firflow CLI application.
Uses Click for command-line interface handling.
"""

import logging

import click

from firflow.version import __version__
from .base_cmd import ConfigGroup, verbose_option, quiet_option
from .filter_cmd import design_cmd, convolve_cmd, apply_cmd

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


@click.group(context_settings=CONTEXT_SETTINGS, cls=ConfigGroup)
@click.version_option(__version__, '-V', '--version', package_name='firflow', prog_name='firflow')
@verbose_option
@quiet_option
@click.pass_context
def main_cli(ctx, verbose: int, quiet: bool):
    """
    firflow: FIR filter design and streaming convolution.

    Configuration is loaded from:
    Defaults -> ./firflow.toml -> ~/.config/firflow/firflow.toml -> Env Vars

    Use -v for verbose output, -vv for debug output, -q for quiet mode.
    """
    logger.debug("firflow CLI group invoked.")


main_cli.add_command(design_cmd)
main_cli.add_command(convolve_cmd)
main_cli.add_command(apply_cmd)

cli = main_cli

if __name__ == "__main__":
    cli()
