import json
import os
from typing import Any, Dict, Optional

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.path.join(PACKAGE_DIR, "config.json")

DEFAULT_CONFIG = {
    "index_path": os.path.join("data", "act_protocol_index.json"),
    "pdf_path": "/protocols.pdf",
    "display": {
        "excerpt_length": 240,
    },
}


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file, falling back to the defaults.

    Args:
        config_path: Path to a config JSON file (defaults to the packaged config.json)

    Returns:
        Configuration dictionary with every default key present
    """
    config_path = config_path or CONFIG_PATH

    if not os.path.exists(config_path):
        print(f"No config file found at {config_path}, using default settings")
        return _merge(DEFAULT_CONFIG, {})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Warning: Could not load config: {e}, using default settings")
        return _merge(DEFAULT_CONFIG, {})

    if not isinstance(config, dict):
        print("Warning: Config file must contain a JSON object, using default settings")
        return _merge(DEFAULT_CONFIG, {})

    return _merge(DEFAULT_CONFIG, config)


def resolve_index_path(index_path: str, base_dir: Optional[str] = None) -> str:
    """
    Resolve a configured index path.

    Relative paths from the config file are relative to the package
    directory, so the bundled index is found from any working directory.
    """
    if os.path.isabs(index_path):
        return index_path
    return os.path.join(base_dir or PACKAGE_DIR, index_path)
