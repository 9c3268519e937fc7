"""
Configuration loading and connection string parsing for sqldatadump.
"""

import os
import re
from typing import Any, Optional

import yaml

from .models import DEFAULT_PORT, ConnectionSettings

CONNECTION_STRING_PATTERN = re.compile(
    r'^(?P<user>[^:@/]+):(?P<password>.*)@(?P<host>[^@/:]+):(?P<port>\d+)/(?P<database>[^/]+)$'
)


def parse_connection_string(value: str) -> ConnectionSettings:
    """
    Parse a connection string of the form <user>:<password>@<host>:<port>/<database>.

    The password may contain ':' and '@'; the last '@' separates it from the host.
    """
    match = CONNECTION_STRING_PATTERN.match(value)
    if not match:
        raise ValueError(
            "connection string must look like <username>:<password>@<address>:<port>/<database>"
        )
    return ConnectionSettings(
        host=match.group('host'),
        port=int(match.group('port')),
        user=match.group('user'),
        password=match.group('password'),
        database=match.group('database'),
    )


class ConfigLoader:
    """Loads configuration from an optional YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config() if config_path else {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise yaml.YAMLError(f"expected a mapping at the top of {self.config_path}")
        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self) -> Optional[ConnectionSettings]:
        """Get connection settings, or None when the file has no connection section."""
        connection = self.config.get('connection')
        if not connection:
            return None
        if not isinstance(connection, dict):
            raise ValueError("connection section must be a mapping")
        missing = [key for key in ('host', 'user', 'password', 'database') if key not in connection]
        if missing:
            raise ValueError(f"connection section is missing: {', '.join(missing)}")
        return ConnectionSettings(
            host=connection['host'],
            port=int(connection.get('port', DEFAULT_PORT)),
            user=connection['user'],
            password=str(connection['password']),
            database=connection['database'],
        )

    def _get_section(self, name: str) -> dict[str, Any]:
        """Get a mapping section; an empty section is an empty mapping."""
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"{name} section must be a mapping")
        return section

    def get_export_settings(self) -> dict[str, Any]:
        """Get export settings."""
        return self._get_section('export')

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self._get_section('logging')
