"""
Inspect command - Show the contents of an IDL file
"""

import click
from rich.tree import Tree

from idlrpc_core.model.contract import Contract
from idlrpc_core.runtime.loader import load_contract
from idlrpc_cli.utils.output import console, print_header, print_json, print_table


@click.command()
@click.argument('idl_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--format',
    type=click.Choice(['tree', 'table', 'json']),
    default=None,
    help='Output format (default from config, else tree)'
)
@click.option(
    '--interface',
    type=str,
    help='Only show one interface'
)
@click.pass_context
def inspect(ctx, idl_file: str, format: str, interface: str):
    """
    Inspect an IDL file.

    \b
    Examples:
      idlrpc inspect service.json
      idlrpc inspect service.json --format table
      idlrpc inspect service.json --interface Calculator
    """
    config = (ctx.obj or {}).get('config')
    if format is None:
        format = config.get('inspect', 'format', 'tree') if config else 'tree'

    contract = load_contract(idl_file)

    if format == 'json':
        print_json(_contract_summary(contract, interface))
    elif format == 'table':
        _print_tables(contract, interface)
    else:
        console.print(_contract_tree(contract, interface))


def _selected_interfaces(contract: Contract, interface: str):
    return [i for name, i in contract.interfaces.items() if interface is None or name == interface]


def _contract_summary(contract: Contract, interface: str) -> dict:
    return {
        "interfaces": {
            iface.name: [func.signature() for func in iface]
            for iface in _selected_interfaces(contract, interface)
        },
        "structs": {
            name: {
                "extends": struct.extends,
                "fields": {f.name: f.type_spec.describe() for f in contract.resolved_fields(name)},
            }
            for name, struct in contract.structs.items()
        },
        "enums": {name: list(enum.values) for name, enum in contract.enums.items()},
        "meta": dict(contract.meta),
    }


def _contract_tree(contract: Contract, interface: str) -> Tree:
    tree = Tree("[bold]Contract[/bold]")

    interfaces = tree.add("[cyan]interfaces[/cyan]")
    for iface in _selected_interfaces(contract, interface):
        branch = interfaces.add(f"[bold]{iface.name}[/bold]")
        for func in iface:
            branch.add(func.signature())

    structs = tree.add("[cyan]structs[/cyan]")
    for name, struct in contract.structs.items():
        label = f"[bold]{name}[/bold]"
        if struct.extends:
            label += f" extends {struct.extends}"
        branch = structs.add(label)
        for f in contract.resolved_fields(name):
            branch.add(f"{f.name}: {f.type_spec.describe()}")

    enums = tree.add("[cyan]enums[/cyan]")
    for name, enum in contract.enums.items():
        enums.add(f"[bold]{name}[/bold]: {', '.join(enum.values)}")

    return tree


def _print_tables(contract: Contract, interface: str) -> None:
    print_header("Functions")
    rows = [
        (iface.name, func.name,
         ", ".join(f"{p.name}: {p.type_spec.describe()}" for p in func.params),
         func.returns.describe())
        for iface in _selected_interfaces(contract, interface) for func in iface
    ]
    print_table(["Interface", "Function", "Params", "Returns"], rows)

    print_header("Structs")
    rows = [
        (name, struct.extends or "", ", ".join(f.name for f in contract.resolved_fields(name)))
        for name, struct in contract.structs.items()
    ]
    print_table(["Struct", "Extends", "Fields"], rows)

    print_header("Enums")
    rows = [(name, ", ".join(enum.values)) for name, enum in contract.enums.items()]
    print_table(["Enum", "Values"], rows)
