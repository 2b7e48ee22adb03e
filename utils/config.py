"""
Configuration management for the program lister.

Provides centralized configuration management with JSON persistence.
"""

import os
import json
import copy
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the program lister."""

    # Default configuration
    DEFAULT_CONFIG = {
        "filter": {
            "skip_parent_keys": False,
            "default_scope": "all",  # all, current-user, machine
        },
        "output": {
            "default_format": "table",  # table, json, simple
            "max_name_width": 50,
        },
        "logging": {
            "level": "WARNING",  # DEBUG, INFO, WARNING, ERROR
            "keep_days": 30,
        },
    }

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            # Default location in user's AppData
            app_data = os.environ.get('LOCALAPPDATA', '')
            if app_data:
                config_file = os.path.join(app_data, 'WindowsProgram', 'config.json')
            else:
                # Fallback to current directory
                config_file = 'config.json'

        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.load()

    def load(self) -> bool:
        """Load configuration from file.

        Returns:
            True if loaded successfully, False otherwise.
        """
        if not os.path.exists(self.config_file):
            logger.debug("No configuration file found, using defaults")
            return False

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

        if not isinstance(user_config, dict):
            logger.error(f"Ignoring configuration file {self.config_file}: top level must be an object")
            return False

        # Merge with default config (deep merge)
        self._deep_merge(self.config, user_config)

        logger.debug(f"Configuration loaded from {self.config_file}")
        return True

    def save(self) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise.
        """
        try:
            # Create directory if it doesn't exist
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

        logger.info(f"Configuration saved to {self.config_file}")
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "filter.skip_parent_keys")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        try:
            value = self.config
            for part in key.split('.'):
                value = value[part]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "output.default_format")
            value: Value to set
        """
        parts = key.split('.')
        config = self.config

        # Navigate to the parent dictionary
        for part in parts[:-1]:
            if not isinstance(config.get(part), dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def reset_to_defaults(self) -> bool:
        """Reset configuration to default values.

        Returns:
            True if reset and saved successfully
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        return self.save()

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section.

        Args:
            section: Section name (e.g., "output")

        Returns:
            Configuration section dictionary
        """
        return self.config.get(section, {})

    def _deep_merge(self, base: Dict, update: Dict) -> None:
        """Deep merge update dictionary into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def __repr__(self) -> str:
        return f"Config(file='{self.config_file}')"


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance.

    Returns:
        Global Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from file.

    Returns:
        Reloaded Config instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
