"""User preferences outside the ledger: first-launch flag and theme."""

from enum import Enum
from pathlib import Path

from easymoney.config import get_setting, set_setting
from easymoney.store.kv import KeyValueStore

ALREADY_LAUNCHED_KEY = "already_launched"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


async def check_first_launch(storage: KeyValueStore) -> bool:
    """Report whether this is the first launch, and record that it happened.

    The stored flag keeps the polarity existing data uses: absent or true
    means the app has not been launched yet, false means it has.

    Args:
        storage: Key-value store holding the flag.

    Returns:
        True on the first launch only.
    """
    flag = await storage.get_bool(ALREADY_LAUNCHED_KEY)
    first_launch = True if flag is None else flag
    if first_launch:
        await storage.set_bool(ALREADY_LAUNCHED_KEY, False)
    return first_launch


def get_theme(config_path: Path | None = None) -> ThemeMode:
    """Configured theme; unknown values fall back to light."""
    value = get_setting("theme", config_path)
    try:
        return ThemeMode(value)
    except ValueError:
        return ThemeMode.LIGHT


def set_theme(mode: ThemeMode, config_path: Path | None = None) -> None:
    set_setting("theme", mode.value, config_path)


def toggle_theme(is_dark: bool, config_path: Path | None = None) -> ThemeMode:
    """Switch dark mode on or off.

    Returns:
        The theme now in effect.
    """
    mode = ThemeMode.DARK if is_dark else ThemeMode.LIGHT
    set_theme(mode, config_path)
    return mode
