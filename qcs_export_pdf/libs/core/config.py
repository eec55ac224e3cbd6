"""
Configuration Management

Builds the immutable run configuration from command-line values, an optional
YAML configuration file and environment variables.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from decouple import config as env_config

from .constants import ConfigConstants, ErrorMessages, NetworkConstants
from .exceptions import ConfigurationError
from .utils import parse_positive_int, validate_tenant_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportSettings:
    """
    Run configuration, built once at startup and held for the process lifetime.
    """
    url: Optional[str] = None
    api_key: Optional[str] = None
    app_id: Optional[str] = None
    object_id: Optional[str] = None
    interval: int = ConfigConstants.DEFAULT_INTERVAL
    output_dir: Path = Path(ConfigConstants.DEFAULT_OUTPUT_DIR)
    request_timeout: int = NetworkConstants.DEFAULT_TIMEOUT
    skip_tls: bool = False
    debug: bool = False

    # Flag names reported when a core field is missing
    REQUIRED_FLAGS = {
        'url': '-url',
        'api_key': '-apiKey',
        'app_id': '-appId',
        'object_id': '-objId',
    }

    def missing_fields(self) -> List[str]:
        """Return the command-line flags of core fields that are not set"""
        return [flag for name, flag in self.REQUIRED_FLAGS.items() if not getattr(self, name)]

    def validate(self) -> 'ExportSettings':
        """
        Check the configuration invariants

        Returns:
            ExportSettings: A copy with a normalized URL

        Raises:
            ConfigurationError: If a core field is missing or a value is invalid
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(ErrorMessages.UsageError.MISSING_REQUIRED.format(flags=", ".join(missing)))

        return replace(
            self,
            url=validate_tenant_url(self.url),
            interval=parse_positive_int(self.interval, ErrorMessages.UsageError.NON_POSITIVE_INTERVAL),
            request_timeout=parse_positive_int(self.request_timeout, ErrorMessages.UsageError.INVALID_TIMEOUT),
            output_dir=Path(self.output_dir),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for debug output, with the API key masked"""
        return {
            'url': self.url,
            'api_key': '***MASKED***' if self.api_key else None,
            'app_id': self.app_id,
            'object_id': self.object_id,
            'interval': self.interval,
            'output_dir': str(self.output_dir),
            'request_timeout': self.request_timeout,
            'skip_tls': self.skip_tls,
            'debug': self.debug,
        }


class ConfigManager:
    """Manages configuration loading, validation and merging"""

    # Configuration schema - defines expected structure and types
    CONFIG_SCHEMA = {
        'tenant': {
            'type': dict,
            'required': False,
            'fields': {
                'url': {'type': str, 'required': False, 'setting': 'url'},
                'apiKey': {'type': str, 'required': False, 'setting': 'api_key'}
            }
        },
        'export': {
            'type': dict,
            'required': False,
            'fields': {
                'appId': {'type': str, 'required': False, 'setting': 'app_id'},
                'objectId': {'type': str, 'required': False, 'setting': 'object_id'},
                'interval': {'type': int, 'required': False, 'setting': 'interval'},
                'outputDir': {'type': str, 'required': False, 'setting': 'output_dir'}
            }
        },
        'global': {
            'type': dict,
            'required': False,
            'fields': {
                'timeout': {'type': int, 'required': False, 'setting': 'request_timeout'},
                'skipTls': {'type': bool, 'required': False, 'setting': 'skip_tls'},
                'debug': {'type': bool, 'required': False, 'setting': 'debug'}
            }
        },
    }

    # Environment variable -> settings field
    ENVIRONMENT = {
        ConfigConstants.ENV_URL: 'url',
        ConfigConstants.ENV_API_KEY: 'api_key',
        ConfigConstants.ENV_APP_ID: 'app_id',
        ConfigConstants.ENV_OBJECT_ID: 'object_id',
        ConfigConstants.ENV_INTERVAL: 'interval',
        ConfigConstants.ENV_OUTPUT_DIR: 'output_dir',
    }

    def __init__(self, env_reader: Optional[Callable[..., Any]] = None):
        """
        Initialize configuration manager

        Args:
            env_reader: Callable with the python-decouple ``config`` signature
                (defaults to decouple's environment/.env lookup)
        """
        self.env_reader = env_reader or env_config
        self.config_data: Dict[str, Any] = {}
        self.config_file_path: Optional[str] = None

    def load_config(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file

        Args:
            config_path: Path to configuration file

        Returns:
            Dict containing configuration data

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        if not config_file.is_file():
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_file, 'r') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

        self.config_file_path = config_path
        self._validate_config()
        logger.info(f"Loaded configuration from {config_path}")

        return self.config_data

    def _validate_config(self) -> None:
        """
        Validate configuration structure and values

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not isinstance(self.config_data, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        unknown = sorted(set(self.config_data) - set(self.CONFIG_SCHEMA))
        if unknown:
            raise ConfigurationError(f"Unknown configuration section(s): {', '.join(unknown)}")

        self._validate_against_schema(self.config_data, self.CONFIG_SCHEMA, "config")

    def _validate_against_schema(self, data: Dict[str, Any], schema: Dict[str, Any], path: str = "") -> None:
        """
        Validate data against schema definition

        Args:
            data: Data to validate
            schema: Schema definition
            path: Current path for error reporting

        Raises:
            ConfigurationError: If data doesn't match schema
        """
        for key, field_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key in data:
                value = data[key]

                # Skip None values for optional fields
                if value is None and not field_schema.get('required', False):
                    continue

                expected_type = field_schema['type']
                # bool is a subclass of int; an int field must not accept true/false
                if not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
                    raise ConfigurationError(f"{current_path} must be a {expected_type.__name__}")

                if expected_type == dict and 'fields' in field_schema:
                    self._validate_against_schema(value, field_schema['fields'], current_path)

            elif field_schema.get('required', False):
                raise ConfigurationError(f"Required field {current_path} is missing")

    def file_values(self) -> Dict[str, Any]:
        """
        Flatten the loaded configuration file into settings fields

        Returns:
            Dict of settings field name -> value for every key present in the file
        """
        values = {}
        for section, section_schema in self.CONFIG_SCHEMA.items():
            section_data = self.config_data.get(section) or {}
            for key, field_schema in section_schema['fields'].items():
                if section_data.get(key) is not None:
                    values[field_schema['setting']] = section_data[key]
        return values

    def environment_values(self) -> Dict[str, Any]:
        """
        Read settings fields from environment variables or a .env file

        Returns:
            Dict of settings field name -> value for every variable that is set
        """
        values = {}
        for variable, setting in self.ENVIRONMENT.items():
            value = self.env_reader(variable, default=None)
            if value not in (None, ""):
                values[setting] = value
        return values

    def build_settings(self, cli_values: Dict[str, Any], config_path: Optional[str] = None) -> ExportSettings:
        """
        Merge all configuration sources into validated settings

        Precedence: command line, then configuration file, then environment,
        then defaults.

        Args:
            cli_values: Settings field name -> value from the command line
                (None means not given)
            config_path: Optional path to a YAML configuration file

        Returns:
            ExportSettings: Validated, immutable settings

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        merged: Dict[str, Any] = {}
        merged.update(self.environment_values())
        if config_path:
            self.load_config(config_path)
            merged.update(self.file_values())
        merged.update({key: value for key, value in cli_values.items() if value is not None})

        if 'interval' in merged:
            merged['interval'] = parse_positive_int(merged['interval'], ErrorMessages.UsageError.INVALID_INTERVAL)
        if 'output_dir' in merged:
            merged['output_dir'] = Path(merged['output_dir'])

        settings = ExportSettings(**merged).validate()
        return settings
