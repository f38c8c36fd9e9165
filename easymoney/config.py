"""Configuration file management for easymoney."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_CONFIG: dict[str, Any] = {
    "theme": "light",
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "easymoney" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config(dict(DEFAULT_CONFIG), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_config_or_default(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, falling back to defaults when the file is missing."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return dict(DEFAULT_CONFIG)
    return {**DEFAULT_CONFIG, **config}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_setting(name: str, config_path: Path | None = None) -> Any:
    """Get a single setting, or its default.

    Args:
        name: Setting name.
        config_path: Path to config file. If None, uses default location.

    Returns:
        The configured value, the default, or None for unknown settings.
    """
    return load_config_or_default(config_path).get(name)


def set_setting(name: str, value: Any, config_path: Path | None = None) -> None:
    """Set a single setting, creating the config file if needed.

    Args:
        name: Setting name.
        value: New value (must be TOML-serializable).
        config_path: Path to config file. If None, uses default location.
    """
    config = load_config_or_default(config_path)
    config[name] = value
    save_config(config, config_path)
