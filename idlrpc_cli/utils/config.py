"""
CLI Configuration utilities

Loads CLI configuration from .idlrpc.yaml
"""

import copy
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class CLIConfig:
    """
    Manages CLI configuration from .idlrpc.yaml files.

    Configuration is loaded in this order (last wins):
    1. Built-in defaults
    2. User home directory config (~/.idlrpc.yaml)
    3. Current directory config (./.idlrpc.yaml)
    """

    DEFAULT_CONFIG = {
        "log_level": "WARNING",
        "inspect": {
            "format": "tree"
        },
        "check": {
            "validate_responses": True
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Args:
            config_file: Optional path to config file. If None, searches standard locations.
        """
        self.config: Dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_from_file(config_file)
        else:
            self.load_standard_configs()

    def load_standard_configs(self):
        """Load config from standard locations in order."""
        home_config = Path.home() / ".idlrpc.yaml"
        if home_config.exists():
            self.load_from_file(str(home_config))

        local_config = Path.cwd() / ".idlrpc.yaml"
        if local_config.exists():
            self.load_from_file(str(local_config))

    def load_from_file(self, config_file: str):
        """
        Load configuration from a YAML file. Unreadable files are skipped.

        Args:
            config_file: Path to config file
        """
        try:
            with open(config_file, 'r') as f:
                loaded_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring config file %s: %s", config_file, e)
            return
        if not isinstance(loaded_config, dict):
            logger.warning("Ignoring config file %s: top level must be a mapping", config_file)
            return
        self._merge_config(loaded_config)

    def _merge_config(self, new_config: Dict[str, Any]):
        """Merge new config into existing config, one level deep."""
        for key, value in new_config.items():
            if key in self.config and isinstance(self.config[key], dict) and isinstance(value, dict):
                self.config[key].update(value)
            else:
                self.config[key] = value

    def get(self, command: str, option: str, default: Any = None) -> Any:
        """
        Get a config value for a command.

        Args:
            command: Command name (e.g., 'inspect', 'check')
            option: Option name (e.g., 'format')
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        section = self.config.get(command)
        if isinstance(section, dict):
            return section.get(option, default)
        return default

    @property
    def log_level(self) -> str:
        return str(self.config.get("log_level", "WARNING")).upper()

    def save(self, config_file: str):
        """Save current configuration to a file."""
        with open(config_file, 'w') as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)


def load_cli_config(config_file: Optional[str] = None) -> CLIConfig:
    """
    Load CLI configuration.

    Args:
        config_file: Optional path to config file

    Returns:
        CLIConfig instance
    """
    return CLIConfig(config_file)
