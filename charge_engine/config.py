# charge_engine/config.py
import os
from dotenv import load_dotenv

# Load from .env file for local development
load_dotenv()


def get_env(key: str, default=None):
    """
    Get an environment variable from os.environ/.env.

    Parameters
    ----------
    key : str
        Environment variable name
    default : str, optional
        Default value if key not found

    Returns
    -------
    str
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_bool(key: str, default: bool = False) -> bool:
    """Read a true/false flag such as LOG_TO_FILE=true."""
    value = get_env(key)
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def get_int(key: str, default: int) -> int:
    """Read an integer setting, falling back to default when unset or malformed."""
    try:
        return int(get_env(key, default))
    except (TypeError, ValueError):
        return default


BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

ENV = get_env("ENV", "dev")

# -------------------------
# Logging
# -------------------------
LOG_LEVEL = get_env("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = get_bool("LOG_TO_FILE", False)
LOG_DIR = get_env("LOG_DIR", os.path.join(BASE_DIR, "logs"))

# -------------------------
# Display
# -------------------------
# Amounts are conventionally shown with two decimals in the bill output.
DISPLAY_DECIMALS = get_int("DISPLAY_DECIMALS", 2)
INVALID_MARKER = get_env("INVALID_MARKER", "- invalid -")
