"""Configuration loading for the locale file checks."""
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

import jsonschema
import yaml
from dotenv import load_dotenv

from i18next_test.locale_validator import ProhibitedPattern

CONFIG_FILE_ENV_VAR = 'I18NEXT_TEST_CONFIG_FILE'
DEFAULT_CONFIG_FILE = 'i18next-test.config.yaml'

_PROHIBITED_PATTERN_SCHEMA = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "properties": {
                "pattern": {"type": "string"},
                "ignore_case": {"type": "boolean"}
            },
            "required": ["pattern"],
            "additionalProperties": False
        }
    ]
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "i18n": {
            "type": "object",
            "properties": {
                "default_locale": {"type": "string"}
            },
            "required": ["default_locale"]
        },
        "locale_path": {"type": "string"},
        "default_namespace": {"type": "string"},
        "prohibited_text": {
            "type": "array",
            "items": _PROHIBITED_PATTERN_SCHEMA
        },
        "silent": {"type": "boolean"},
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": ["string", "null"]},
                "log_to_console": {"type": "boolean"}
            }
        }
    },
    "required": ["i18n", "locale_path", "default_namespace"]
}


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    config_file: str
    default_locale: str
    locale_path: str
    default_namespace: str
    prohibited_text: List[ProhibitedPattern] = field(default_factory=list)
    silent: bool = False

    # Logging
    log_level: str = 'INFO'
    log_file_path: Optional[str] = None
    log_to_console: bool = True

    # The .env file that was loaded, if any
    dotenv_path: Optional[str] = None


def resolve_config_path(config_path: Optional[str] = None) -> str:
    """Resolve the config file from the argument, the environment, or the working directory."""
    if not config_path:
        config_path = os.environ.get(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE)
    return os.path.abspath(config_path)


def _load_dotenv_file() -> Optional[str]:
    """Load a .env file from the working directory, if there is one."""
    dotenv_path = os.path.join(os.getcwd(), '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)
        return dotenv_path
    return None


def _load_yaml_config(config_file: str) -> Dict[str, Any]:
    """Load the YAML configuration file, raising ConfigError with a readable reason."""
    if not os.path.exists(config_file):
        raise ConfigError(f"config file does not exist: {config_file}")

    if not os.access(config_file, os.R_OK):
        raise ConfigError(f"config file could not be loaded: '{config_file}' is not readable")

    try:
        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
    except yaml.YAMLError as e:
        raise ConfigError(f"config file could not be loaded: invalid YAML in '{config_file}': {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"config file could not be loaded: {e}") from e

    if not isinstance(loaded_config, dict):
        raise ConfigError(f"config file is invalid: '{config_file}' must contain a YAML dictionary")

    return loaded_config


def _validate_config(config: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=config, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        location = '.'.join(str(part) for part in e.absolute_path)
        if location:
            raise ConfigError(f"config file is invalid: {location}: {e.message}") from e
        raise ConfigError(f"config file is invalid: {e.message}") from e


def _build_prohibited_patterns(raw_patterns: List[Any]) -> List[ProhibitedPattern]:
    """Convert configured patterns and make sure every one of them compiles."""
    patterns = []
    for raw_pattern in raw_patterns:
        if isinstance(raw_pattern, str):
            pattern = ProhibitedPattern(raw_pattern)
        else:
            pattern = ProhibitedPattern(raw_pattern['pattern'], raw_pattern.get('ignore_case', False))
        try:
            pattern.compile()
        except re.error as e:
            raise ConfigError(
                f"config file is invalid: prohibited_text pattern '{pattern.pattern}' does not compile: {e}"
            ) from e
        patterns.append(pattern)
    return patterns


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from the YAML file and environment variables.

    Args:
        config_path: Path to the config file. Falls back to the
            I18NEXT_TEST_CONFIG_FILE environment variable, then to
            'i18next-test.config.yaml' in the working directory.

    Returns:
        AppConfig: The loaded application configuration.

    Raises:
        ConfigError: If the file cannot be read or does not match the schema.
    """
    dotenv_path = _load_dotenv_file()
    config_file = resolve_config_path(config_path)

    config = _load_yaml_config(config_file)
    _validate_config(config)

    log_config = config.get('logging', {})
    return AppConfig(
        config_file=config_file,
        default_locale=config['i18n']['default_locale'],
        locale_path=config['locale_path'],
        default_namespace=config['default_namespace'],
        prohibited_text=_build_prohibited_patterns(config.get('prohibited_text', [])),
        silent=config.get('silent', False),
        log_level=log_config.get('log_level', 'INFO').upper(),
        log_file_path=log_config.get('log_file_path'),
        log_to_console=log_config.get('log_to_console', True),
        dotenv_path=dotenv_path,
    )
