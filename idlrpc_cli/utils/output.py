"""
Console output for the idlrpc CLI

Status lines, contract summaries and RPC errors all go through one rich
console. Messages are printed without markup parsing because they carry
user data (enum value lists, paths like value[1]).
"""

import json
from typing import Any, Iterable, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from idlrpc_core.exceptions import RpcError
from idlrpc_core.model.contract import Contract

console = Console()


def _status(symbol: str, message: str, style: str) -> None:
    console.print(f"{symbol} {message}", style=style, markup=False)


def print_success(message: str):
    _status("✓", message, "bold green")


def print_error(message: str):
    _status("✗", message, "bold red")


def print_warning(message: str):
    _status("⚠", message, "bold yellow")


def print_info(message: str):
    _status("ℹ", message, "bold blue")


def print_header(text: str):
    console.print(f"\n{text}", style="bold cyan", markup=False)


def describe_rpc_error(err: RpcError) -> str:
    """One-line form of an RpcError: 'KIND (code): message'."""
    return f"{err.kind.name} ({err.code}): {err.message}"


def print_rpc_error(err: RpcError) -> None:
    """Print an RpcError, plus the failing value path when the validator recorded one."""
    print_error(describe_rpc_error(err))
    if isinstance(err.data, dict) and err.data.get("path"):
        console.print(f"  at {err.data['path']}", style="dim", markup=False)


def print_contract_summary(contract: Contract) -> None:
    """Entity counts of a loaded contract, and its checksum if the IDL carries one."""
    print_success(
        f"Loaded {len(contract.interfaces)} interface(s), "
        f"{len(contract.structs)} struct(s), {len(contract.enums)} enum(s)"
    )
    checksum = contract.meta.get("checksum")
    if checksum:
        print_info(f"IDL checksum: {checksum}")


def print_table(headers: Sequence[str], rows: Iterable[Sequence[Any]], title: Optional[str] = None):
    """Print rows (one sequence of cells per row) under the given column headers."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*[Text(str(cell)) for cell in row])
    console.print(table)


def print_json(data: Any, title: Optional[str] = None):
    """Print a decoded JSON value (params, results, contract views) highlighted."""
    syntax = Syntax(json.dumps(data, indent=2, default=str), "json", theme="monokai")
    console.print(Panel(syntax, title=title, border_style="cyan") if title else syntax)
