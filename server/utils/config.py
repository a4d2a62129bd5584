# Configuration management
# JSON config per CONFIG_ENV plus backend credentials read from the environment

import json
import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Optional
import re

ORIGIN_LABEL = "SUPABASE_URL|API_ORIGIN"
ANON_KEY_LABEL = "SUPABASE_ANON_KEY"


def _replace_env_vars(value: str) -> str:
    """
    Replace environment placeholders.

    Supports ``${ENV_VAR}`` and ``${ENV_VAR:-default}``. A placeholder without a
    default whose variable is unset is left untouched.
    """
    def replace_match(match):
        env_var = match.group(1)
        default = match.group(3)
        env_value = os.getenv(env_var)
        if env_value is not None:
            return env_value
        if default is not None:
            return default
        return match.group(0)

    return re.sub(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(:-([^}]*))?\}', replace_match, value)


def _process_config_values(config: Any) -> Any:
    """
    Recursively substitute environment placeholders in config values
    """
    if isinstance(config, dict):
        return {k: _process_config_values(v) for k, v in config.items()}
    elif isinstance(config, list):
        return [_process_config_values(item) for item in config]
    elif isinstance(config, str):
        return _replace_env_vars(config)
    else:
        return config


def _server_dir() -> str:
    script_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.dirname(script_dir)


def load_config() -> Dict[str, Any]:
    """
    Load the config file selected by the CONFIG_ENV environment variable.

    Returns:
        Config dict
    """
    config_env = os.getenv('CONFIG_ENV', 'development')

    config_files = {
        'production': 'config/config-prod.json',
        'development': 'config/config-dev.json',
    }

    config_file = config_files.get(config_env, 'config/config.json')

    if not os.path.isabs(config_file):
        config_file = os.path.join(_server_dir(), config_file)

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)

        config = _process_config_values(config)
        config.pop('_comment', None)

        logging.info(f"Loaded config file: {config_file}")
        return config

    except FileNotFoundError:
        logging.error(f"Config file not found: {config_file}")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Config file is not valid JSON: {e}")
        raise


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Check that the config has every required section.

    Args:
        config: Config dict

    Returns:
        Validation result
    """
    required_sections = ['app', 'server', 'backend', 'auth', 'logging']

    for section in required_sections:
        if section not in config:
            logging.error(f"Config is missing required section: {section}")
            return False

    origin_env = config.get('backend', {}).get('origin_env')
    if not origin_env:
        logging.error("backend.origin_env is not configured")
        return False

    return True


@dataclass
class BackendSettings:
    """Connection settings for the hosted database, resolved per request."""
    origin: Optional[str]
    anon_key: Optional[str]
    service_role_key: Optional[str] = None
    jwt_secret: Optional[str] = None
    timeout_seconds: float = 10.0
    origin_label: str = ORIGIN_LABEL
    anon_key_label: str = ANON_KEY_LABEL
    service_role_key_label: str = "SUPABASE_SERVICE_ROLE_KEY"

    @property
    def missing(self) -> List[str]:
        missing = []
        if not self.origin:
            missing.append(self.origin_label)
        if not self.anon_key:
            missing.append(self.anon_key_label)
        return missing

    @property
    def is_configured(self) -> bool:
        return not self.missing


def _read_env(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    value = os.getenv(name, "").strip()
    return value or None


class Config:
    """
    Config manager
    """
    def __init__(self):
        self.env = os.getenv('CONFIG_ENV', 'development')
        self.config = load_config()

        if not validate_config(self.config):
            raise ValueError("Config validation failed")

    def get(self, key: str, default=None):
        """
        Get a config value, nested keys separated by dots.

        Args:
            key: Config key such as 'app.name'
            default: Default value

        Returns:
            Config value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_backend_settings(self) -> BackendSettings:
        """
        Resolve backend settings from the environment.

        The variable names come from the config file; the values are read on
        every call so a missing deployment variable is detected per request.
        """
        backend_config = self.config.get('backend', {})
        origin_env = backend_config.get('origin_env', [])
        if isinstance(origin_env, str):
            origin_env = [origin_env]

        origin = None
        for name in origin_env:
            origin = _read_env(name)
            if origin:
                break

        anon_key_env = backend_config.get('anon_key_env', 'SUPABASE_ANON_KEY')
        service_role_env = backend_config.get('service_role_key_env', 'SUPABASE_SERVICE_ROLE_KEY')

        return BackendSettings(
            origin=origin.rstrip('/') if origin else None,
            anon_key=_read_env(anon_key_env),
            service_role_key=_read_env(service_role_env),
            jwt_secret=_read_env(self.get('auth.jwt_secret_env')),
            timeout_seconds=float(backend_config.get('timeout_seconds', 10)),
            origin_label="|".join(origin_env),
            anon_key_label=anon_key_env,
            service_role_key_label=service_role_env,
        )
