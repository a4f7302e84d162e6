"""
Client configuration.

A configuration is a plain dict: `DEFAULT_CONFIG` updated with whatever the
caller overrides.
"""

from typing import Any, Dict, Optional

DEFAULT_CONFIG: Dict[str, Any] = {
    "url": "ws://127.0.0.1:8007/ws",
    "nickname": "player",
    "command_error_timeout": 3.0,
    "info_message_timeout": 10.0,
    "room_link_file": None,
    "room_id": None,
    "record_file": None,
    "log_level": "INFO",
}


def load_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build a configuration from the defaults and some overrides.

    Overrides whose value is None keep the default.

    Args:
        overrides: Values to change

    Returns:
        A new configuration dict

    Raises:
        ValueError: If an override names an unknown key or a timeout is negative
    """
    config = dict(DEFAULT_CONFIG)
    if overrides:
        unknown = sorted(set(overrides) - set(DEFAULT_CONFIG))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        config.update({k: v for k, v in overrides.items() if v is not None})

    for key in ("command_error_timeout", "info_message_timeout"):
        config[key] = float(config[key])
        if config[key] < 0:
            raise ValueError(f"{key} must not be negative")
    config["log_level"] = str(config["log_level"]).upper()
    return config
