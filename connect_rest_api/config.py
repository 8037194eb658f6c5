"""
Configuration Module.

This module handles loading configuration from an optional config.yaml file,
with support for environment variable overrides. The REST API credentials
normally arrive through CONNECT_REST_API_USERNAME and
CONNECT_REST_API_PASSWORD, so the file itself is not required.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from connect_rest_api.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

ALIAS = "connect_rest_api"
ENV_PREFIX = "CONNECT_REST_API"
CONFIG_FILE_ENV_VAR = f"{ENV_PREFIX}_CONFIG"

# Keys under the connect_rest_api section that must be present and non-empty
REQUIRED_KEYS = {
    "username": "Username for REST API authentication",
    "password": "Password for REST API authentication",
}


class Config:
    """Configuration manager for the connector.

    This class loads configuration from a YAML file and provides
    access to configuration values with environment variable overrides.

    Attributes:
        config: The loaded configuration dictionary.
        config_file: Path to the configuration file, or None when running
            from the environment only.
    """

    def __init__(self, config_file: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_file: Path to the configuration file, or None to look it up.

        Raises:
            FileNotFoundError: If an explicitly given file does not exist.
        """
        self._explicit = config_file is not None or CONFIG_FILE_ENV_VAR in os.environ
        self.config_file = config_file or self._find_config_file()
        self.config: Dict[str, Any] = {}
        self.load_config()

    def _find_config_file(self) -> Optional[str]:
        """Find the configuration file.

        Looks at the CONNECT_REST_API_CONFIG environment variable first, then
        for config.yaml in the current directory.

        Returns:
            Optional[str]: Path to the configuration file, or None if there is none.
        """
        env_file = os.environ.get(CONFIG_FILE_ENV_VAR)
        if env_file:
            return env_file

        if os.path.exists("config.yaml"):
            return "config.yaml"

        return None

    def load_config(self) -> None:
        """Load configuration from the configuration file.

        Raises:
            FileNotFoundError: If an explicitly configured file does not exist.
            yaml.YAMLError: If the configuration file is not valid YAML.
        """
        if self.config_file is None:
            logger.debug("No configuration file found, using environment only")
            self.config = {}
            return

        logger.info(f"Loading configuration from {self.config_file}")

        if not os.path.exists(self.config_file):
            if self._explicit:
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
            logger.warning(f"Configuration file disappeared: {self.config_file}")
            self.config = {}
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f)

            if self.config is None:
                self.config = {}
                logger.warning("Configuration file is empty, using defaults")

            logger.info("Configuration loaded successfully")
        except yaml.YAMLError as e:
            logger.error(f"Error parsing configuration file: {e}")
            raise

    @staticmethod
    def env_var_for(key: str) -> str:
        """Return the environment variable that overrides a configuration key.

        Keys already inside the connect_rest_api section map directly
        (connect_rest_api.username -> CONNECT_REST_API_USERNAME); anything
        else is prefixed (general.log_level -> CONNECT_REST_API_GENERAL_LOG_LEVEL).
        """
        name = key.upper().replace(".", "_")
        if name.startswith(f"{ENV_PREFIX}_"):
            return name
        return f"{ENV_PREFIX}_{name}"

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, with environment variable override.

        Args:
            key: The configuration key, using dot notation (e.g., "connect_rest_api.username").
            default: The default value to return if the key is not found.

        Returns:
            Any: The configuration value.
        """
        env_var = self.env_var_for(key)
        env_value = os.environ.get(env_var)
        if env_value is not None:
            logger.debug(f"Using environment variable override for {key}: {env_var}")
            return env_value

        parts = key.split(".")
        config = self.config
        for part in parts:
            if not isinstance(config, dict) or part not in config:
                return default
            config = config[part]

        return config

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a section of the configuration.

        Args:
            section: The section name (top-level key).

        Returns:
            Dict[str, Any]: The section dictionary, or an empty dict if not found.
        """
        return self.config.get(section, {})

    def validate(self) -> None:
        """Check that the required connector settings are present.

        Both credentials are required scalar values that cannot be empty.

        Raises:
            ConfigurationError: Listing every key that failed validation.
        """
        problems: List[str] = []
        bad_keys: List[str] = []
        for name, info in REQUIRED_KEYS.items():
            key = f"{ALIAS}.{name}"
            value = self.get(key)
            if value is None:
                problems.append(f'The child config "{name}" under "{ALIAS}" must be configured: {info}.')
            elif isinstance(value, (dict, list)):
                problems.append(f'Invalid type for path "{key}". Expected a scalar value.')
            elif str(value) == "":
                problems.append(f'The path "{key}" cannot contain an empty value, but got "".')
            else:
                continue
            bad_keys.append(key)

        if problems:
            for problem in problems:
                logger.error(problem)
            raise ConfigurationError(" ".join(problems), keys=bad_keys)

        logger.debug("Configuration validated")

    def reload(self) -> None:
        """Reload the configuration from the file.

        Raises:
            FileNotFoundError: If an explicitly configured file does not exist.
            yaml.YAMLError: If the configuration file is not valid YAML.
        """
        logger.info(f"Reloading configuration from {self.config_file}")
        self.load_config()
        logger.info("Configuration reloaded successfully")


def init_logging(config: Config) -> None:
    """Initialize logging based on the configuration."""
    log_level_name = config.get("general.log_level", "INFO")
    log_level = getattr(logging, str(log_level_name).upper(), logging.INFO)

    log_file = config.get("general.log_file")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(console_format)
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging initialized at level {log_level_name}")
