"""
IdlRpc CLI - command line tools for IDL contracts
"""

__version__ = "0.1.0"
