"""
Validate command - Load an IDL file and report problems
"""

import click

from idlrpc_core.exceptions import SchemaError
from idlrpc_core.runtime.loader import load_contract
from idlrpc_core.runtime.validator import find_unknown_types
from idlrpc_cli.utils.output import (
    console, print_contract_summary, print_error, print_header, print_info, print_success, print_warning
)
from idlrpc_cli.utils.errors import ValidationError


@click.command()
@click.argument('idl_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--strict',
    is_flag=True,
    help='Treat references to unknown types as errors'
)
def validate(idl_file: str, strict: bool):
    """
    Validate an IDL JSON file.

    \b
    Checks:
      - The file decodes to a list of entries
      - Struct parents exist and the extends chain has no cycle
      - Field names do not clash with inherited fields
      - Every referenced type is a primitive, struct or enum

    \b
    Exit Codes:
      0 - All checks passed
      3 - Validation failed
    """
    print_header("IdlRpc Contract Validator")
    print_info(f"Validating: {idl_file}")

    try:
        contract = load_contract(idl_file)
    except SchemaError as e:
        print_error(str(e))
        raise ValidationError(f"Schema error: {e}")

    print_contract_summary(contract)

    problems = find_unknown_types(contract)
    for problem in problems:
        if strict:
            print_error(problem)
        else:
            print_warning(problem)

    console.print()
    if problems and strict:
        raise ValidationError(f"Validation failed with {len(problems)} error(s)")

    if problems:
        console.print(f"  [yellow]⚠ {len(problems)} warning(s)[/yellow]")
    else:
        print_success("All checks passed! ✨")
