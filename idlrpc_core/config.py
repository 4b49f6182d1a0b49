"""
Configuration objects for the RPC runtime
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RuntimeConfig:
    """
    Configuration for serving calls against a loaded contract.
    """
    idl_path: str | None = None  # IDL JSON file to load at boot
    validate_requests: bool = True  # Check params before invoking handlers
    validate_responses: bool = True  # Check handler results before replying
    log_level: str = "INFO"
    extra_params: dict[str, Any] = field(default_factory=dict)
