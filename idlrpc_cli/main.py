"""
IdlRpc CLI - Main entry point
"""

import logging

import click

from idlrpc_cli import __version__
from idlrpc_cli.utils.config import load_cli_config
from idlrpc_cli.utils.errors import handle_cli_error


@click.group()
@click.version_option(version=__version__, prog_name="idlrpc")
@click.option('--config', 'config_file', type=click.Path(dir_okay=False), default=None,
              help='Config file (default: ~/.idlrpc.yaml then ./.idlrpc.yaml)')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config_file, log_level):
    """
    IdlRpc - IDL contract tools for RPC services

    Check IDL files and try calls against them without running a server.

    \b
    Common Commands:
      validate  - Load an IDL and report schema errors
      inspect   - Show interfaces, structs and enums
      check     - Validate call params (and a result) against a function

    \b
    Examples:
      idlrpc validate service.json
      idlrpc inspect service.json --format table
      idlrpc check service.json Calculator.add '[3, 4]' --result 7

    For more help on a specific command, use:
      idlrpc COMMAND --help
    """
    ctx.ensure_object(dict)
    config = load_cli_config(config_file)
    level = (log_level or config.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")
    ctx.obj['config'] = config


from idlrpc_cli.commands.validate import validate
from idlrpc_cli.commands.inspect import inspect
from idlrpc_cli.commands.check import check

cli.add_command(validate)
cli.add_command(inspect)
cli.add_command(check)


def main():
    """Main entry point with error handling"""
    try:
        cli(obj={})

    except Exception as exc:
        handle_cli_error(exc, verbose=False)


if __name__ == "__main__":
    main()
