import os
from pathlib import Path

DEFAULT_STORE_FILE = Path.home() / ".cf-switch.json"
DEFAULT_ENV_FILE = Path.home() / ".cloudflare.env"
DEFAULT_CLIENT = "flarectl"

PROG_NAME = "cf-switch"


def get_store_path() -> Path:
    """get the profile store path, honouring CF_SWITCH_CONFIG."""
    override = os.environ.get("CF_SWITCH_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_STORE_FILE


def get_env_path() -> Path:
    """get the active credential file path, honouring CF_SWITCH_ENV_FILE."""
    override = os.environ.get("CF_SWITCH_ENV_FILE")
    if override:
        return Path(override).expanduser()
    return DEFAULT_ENV_FILE


def get_client_binary() -> str:
    return os.environ.get("CF_SWITCH_CLIENT") or DEFAULT_CLIENT


def detect_shell() -> str:
    """name of the user's login shell, e.g. 'bash' or 'fish'."""
    shell = os.environ.get("SHELL", "")
    name = shell.rstrip("/").rsplit("/", 1)[-1]
    return name or "bash"
