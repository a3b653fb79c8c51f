"""
Configuration for coder-faas

Process settings come from environment variables. Per-function overrides
(namespace, enabled flag, extra environment) come from an optional
functions.yaml found by searching up from the working directory.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .types import ConfigError, FunctionMetadata

CONFIG_FILENAME = "functions.yaml"


def parse_port(value: str) -> int:
    """Parse a port number.

    Accepts Kubernetes service discovery values like 'tcp://10.43.27.255:8080'
    as well as plain port numbers.
    """
    if value.startswith("tcp://"):
        return int(value.split(":")[-1])
    return int(value)


@dataclass
class Settings:
    """Process-level settings for the local host"""
    host: str = "0.0.0.0"
    port: int = 8080
    function: Optional[str] = None
    config_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=parse_port(os.getenv("PORT", "8080")),
            function=os.getenv("CODERFAAS_FUNCTION") or None,
            config_path=os.getenv("CODERFAAS_CONFIG") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def find_functions_yaml(start: Optional[Path] = None) -> Optional[Path]:
    """
    Find functions.yaml by searching up from `start` (default: cwd).

    Returns:
        Path to functions.yaml or None if not found
    """
    current = start or Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_functions_yaml(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load functions.yaml.

    Args:
        path: Optional explicit path. If not provided, searches up from cwd.

    Returns:
        Parsed document, or an empty dict when no file exists and no
        explicit path was given

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"{config_path} not found")
    else:
        config_path = find_functions_yaml()
        if config_path is None:
            return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")
    if not isinstance(data.get("functions", []), list):
        raise ConfigError(f"{config_path}: 'functions' must be a list")
    return data


def get_function_config(config: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    """Get the functions.yaml entry for a function, if any"""
    for entry in config.get("functions", []):
        if isinstance(entry, dict) and entry.get("name") == name:
            return entry
    return None


def is_enabled(config: Dict[str, Any], name: str) -> bool:
    entry = get_function_config(config, name) or {}
    return bool(entry.get("enabled", True))


def apply_config(functions: Iterable[FunctionMetadata], config: Dict[str, Any]) -> List[FunctionMetadata]:
    """
    Return copies of `functions` with functions.yaml overrides applied.

    The registered metadata is left untouched, so each caller sees only
    the overrides of the config it passed in.

    A per-function `namespace` wins over `defaults.namespace`, which only
    replaces the decorator's namespace when that was left at "default".
    """
    defaults = config.get("defaults", {}) or {}
    default_namespace = defaults.get("namespace")

    configured = []
    for func in functions:
        entry = get_function_config(config, func.name) or {}

        namespace = func.namespace
        if entry.get("namespace"):
            namespace = str(entry["namespace"])
        elif default_namespace and namespace == "default":
            namespace = str(default_namespace)

        env = entry.get("environment") or {}
        configured.append(replace(
            func,
            namespace=namespace,
            environment={**func.environment, **{k: str(v) for k, v in env.items()}},
            enabled=is_enabled(config, func.name),
        ))
    return configured
