"""
Error handling utilities for IdlRpc CLI
"""

import sys
from typing import Optional
from rich.console import Console
from rich.panel import Panel

from idlrpc_core.exceptions import RpcError, SchemaError
from idlrpc_cli.utils.output import describe_rpc_error

console = Console()


class CLIError(Exception):
    """Base exception for CLI errors"""

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class InputError(CLIError):
    """Bad command line input (unparseable params, malformed method)"""

    def __init__(self, message: str):
        super().__init__(message, exit_code=2)


class ValidationError(CLIError):
    """Error during validation"""

    def __init__(self, message: str):
        super().__init__(message, exit_code=3)


def format_exception(exc: Exception, context: Optional[str] = None) -> str:
    """
    Format exception with context

    Args:
        exc: The exception to format
        context: Optional context about where error occurred

    Returns:
        Formatted error message
    """
    lines = []

    if context:
        lines.append(f"Error in {context}:")

    if isinstance(exc, RpcError):
        lines.append(describe_rpc_error(exc))
    else:
        lines.append(f"{type(exc).__name__}: {str(exc)}")

    return "\n".join(lines)


def show_error(exc: Exception, context: Optional[str] = None, verbose: bool = False):
    """
    Display error message to user

    Args:
        exc: The exception to display
        context: Optional context about where error occurred
        verbose: Show full traceback if True
    """
    if verbose:
        console.print_exception()
    else:
        error_msg = format_exception(exc, context)
        console.print(Panel(error_msg, title="Error", border_style="red"))

        suggestion = suggest_fix(exc)
        if suggestion:
            console.print(f"\n💡 [cyan]Suggestion:[/cyan] {suggestion}")


def suggest_fix(exc: Exception) -> Optional[str]:
    """
    Suggest fixes for common errors

    Args:
        exc: The exception to analyze

    Returns:
        Suggestion string or None
    """
    error_msg = str(exc).lower()

    if "not found" in error_msg and ("file" in error_msg or "no such" in error_msg):
        return "Check that the path exists and is spelled correctly."

    if "cyclic" in error_msg or "cycle" in error_msg:
        return "Remove the circular 'extends' chain between structs."

    if "extends unknown struct" in error_msg:
        return "Declare the parent struct in the same IDL file or fix the 'extends' name."

    if "clashes with field" in error_msg:
        return "Rename the field; only the immediate parent's fields may be overridden."

    if "json" in error_msg:
        return "Check that the file is valid JSON."

    return None


def handle_cli_error(exc: Exception, verbose: bool = False):
    """
    Handle CLI error and exit with appropriate code

    Args:
        exc: The exception to handle
        verbose: Show full traceback if True
    """
    show_error(exc, verbose=verbose)
    if isinstance(exc, CLIError):
        sys.exit(exc.exit_code)
    elif isinstance(exc, SchemaError):
        sys.exit(3)
    else:
        sys.exit(1)
