"""
Check command - Validate a call against a function without a server
"""

import json

import click

from idlrpc_core.exceptions import RpcError
from idlrpc_core.model.message import RpcRequest
from idlrpc_core.runtime.dispatcher import validate_params, validate_result
from idlrpc_core.runtime.loader import load_contract
from idlrpc_core.runtime.validator import Validator
from idlrpc_cli.utils.output import print_json, print_rpc_error, print_success
from idlrpc_cli.utils.errors import InputError, ValidationError


def _parse_json(text: str, what: str):
    try:
        return json.loads(text)
    except ValueError as e:
        raise InputError(f"{what} is not valid JSON: {e}")


@click.command()
@click.argument('idl_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('method', type=str)
@click.argument('params', type=str, default='[]')
@click.option(
    '--result',
    type=str,
    default=None,
    help='JSON result to check against the return type'
)
def check(idl_file: str, method: str, params: str, result: str):
    """
    Validate call params (and optionally a result) for METHOD.

    METHOD is interface.function; PARAMS is a JSON array.

    \b
    Examples:
      idlrpc check service.json Calculator.add '[3, 4]'
      idlrpc check service.json Calculator.add '[3, 4]' --result 7

    \b
    Exit Codes:
      0 - Call is valid
      2 - Bad input
      3 - Call violates the contract
    """
    args = _parse_json(params, "PARAMS")
    if not isinstance(args, list):
        raise InputError("PARAMS must be a JSON array")

    contract = load_contract(idl_file)
    validator = Validator(contract)

    try:
        interface_name, function_name = RpcRequest(method=method).split_method()
        func = contract.get_function(interface_name, function_name)
        normalized = validate_params(validator, func, interface_name, args)
        print_success(f"Params valid for {interface_name}.{func.signature()}")
        print_json(normalized, title="params")

        if result is not None:
            value = validate_result(validator, func, interface_name, _parse_json(result, "--result"))
            print_success("Result valid")
            print_json(value, title="result")
    except RpcError as e:
        print_rpc_error(e)
        raise ValidationError(e.message)
