"""
Contract Loader - reads IDL JSON files at boot
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from idlrpc_core.exceptions import SchemaError
from idlrpc_core.model.contract import Contract
from idlrpc_core.runtime.codec import JsonCodec

logger = logging.getLogger(__name__)


class ContractLoader:
    """
    Loads an IDL JSON file and builds a Contract from it.

    Any failure (missing file, bad JSON, inconsistent schema) surfaces as
    SchemaError so callers have a single boot-time error to handle.
    """

    def __init__(self, idl_path: str, codec: Optional[JsonCodec] = None):
        """
        Args:
            idl_path: Path to the IDL JSON file
            codec: Codec used to decode the file (JsonCodec by default)
        """
        self.idl_path = Path(idl_path)
        self.codec = codec or JsonCodec()
        self._validate_path()

    def _validate_path(self) -> None:
        if not self.idl_path.exists():
            raise SchemaError(f"IDL file not found: {self.idl_path}")
        if not self.idl_path.is_file():
            raise SchemaError(f"IDL path is not a file: {self.idl_path}")

    def load_idl(self) -> List[Dict[str, Any]]:
        """Decoded IDL entries."""
        with open(self.idl_path, 'rb') as f:
            return self.codec.read_idl(f)

    def load_contract(self) -> Contract:
        logger.info("Loading contract from %s", self.idl_path)
        return Contract(self.load_idl())


def load_contract(idl_path: str) -> Contract:
    """Load a Contract from an IDL JSON file."""
    return ContractLoader(idl_path).load_contract()


def load_contract_text(text: str) -> Contract:
    """Load a Contract from IDL JSON text."""
    return Contract(JsonCodec().read_idl(text))
