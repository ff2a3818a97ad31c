"""User preferences for reminder windows and display.

Config lives in ~/.billcycle/config.json, or wherever BILLCYCLE_CONFIG points.
"""
import json
import logging
import os
from pathlib import Path

from billcycle.utils.constants import (
    BUDGET_ALERT_THRESHOLD, CURRENCY_SYMBOL, UPCOMING_BILL_DAYS,
)

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".billcycle"
CONFIG_FILE = CONFIG_DIR / "config.json"


def config_path() -> Path:
    override = os.environ.get("BILLCYCLE_CONFIG")
    return Path(override) if override else CONFIG_FILE


def load_config() -> dict:
    """Returns {} on missing or corrupt file. Never raises."""
    path = config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return {}
    return data


def save_config(config: dict) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_upcoming_days() -> int:
    value = load_config().get("upcoming_days", UPCOMING_BILL_DAYS)
    try:
        days = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid upcoming_days %r, using %d", value, UPCOMING_BILL_DAYS)
        return UPCOMING_BILL_DAYS
    return max(0, days)


def get_alert_threshold() -> float:
    value = load_config().get("alert_threshold", BUDGET_ALERT_THRESHOLD)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid alert_threshold %r, using %.2f", value, BUDGET_ALERT_THRESHOLD)
        return BUDGET_ALERT_THRESHOLD


def get_currency_symbol() -> str:
    return str(load_config().get("currency_symbol", CURRENCY_SYMBOL))


def set_value(key: str, value) -> None:
    """Update a single key in config and save. None removes the key."""
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)
