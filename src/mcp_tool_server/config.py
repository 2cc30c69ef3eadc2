"""Server configuration loader.

Loads server settings from a YAML file. Every setting has a default, so a
server can also be built from ``ServerConfig()`` with no file at all.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from mcp_tool_server.protocol.jsonrpc import MAX_MESSAGE_SIZE
from mcp_tool_server.protocol.lifecycle import MCP_PROTOCOL_VERSION

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return pattern.sub(replacer, value)


@dataclass
class ServerConfig:
    """Server configuration.

    Immutable once the server has been constructed from it.
    """

    version: str = "1.0"

    # Server identity
    server_name: str = "mcp-tool-server"
    server_version: str = "0.1.0"
    instructions: str | None = None

    # Protocol settings
    protocol_version: str = MCP_PROTOCOL_VERSION
    max_message_size: int = MAX_MESSAGE_SIZE

    # Tool settings
    max_string_length: int = 10000

    # Audit settings
    audit_log_file: str = ""

    # Logging settings
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig instance with all settings populated.

        Raises:
            ConfigLoadError: If a setting has an invalid value.
        """
        defaults = cls()
        server = config.get("server") or {}
        protocol = config.get("protocol") or {}
        tools = config.get("tools") or {}
        audit = config.get("audit") or {}
        logging_section = config.get("logging") or {}

        for section_name, section in (
            ("server", server),
            ("protocol", protocol),
            ("tools", tools),
            ("audit", audit),
            ("logging", logging_section),
        ):
            if not isinstance(section, dict):
                raise ConfigLoadError(f"'{section_name}' must be a mapping")

        max_message_size = protocol.get("max_message_size", defaults.max_message_size)
        if not isinstance(max_message_size, int) or max_message_size <= 0:
            raise ConfigLoadError("protocol.max_message_size must be a positive integer")

        max_string_length = tools.get("max_string_length", defaults.max_string_length)
        if not isinstance(max_string_length, int) or max_string_length <= 0:
            raise ConfigLoadError("tools.max_string_length must be a positive integer")

        log_level = str(logging_section.get("level", defaults.log_level)).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigLoadError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")

        return cls(
            version=str(config.get("version", defaults.version)),
            server_name=str(server.get("name", defaults.server_name)),
            server_version=str(server.get("version", defaults.server_version)),
            instructions=server.get("instructions"),
            protocol_version=str(protocol.get("version", defaults.protocol_version)),
            max_message_size=max_message_size,
            max_string_length=max_string_length,
            audit_log_file=expand_env_vars(audit.get("log_file", "")),
            log_level=log_level,
        )

    @property
    def server_info(self) -> dict[str, str]:
        """Server implementation identity for the initialize result."""
        return {"name": self.server_name, "version": self.server_version}


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigLoadError("Config must include 'version' field")

    return ServerConfig.from_dict(config)
