import os
from pathlib import Path
from typing import List

CONFIG_DIR = Path.home() / ".config" / "nostr"
CONFIG_FILE_NAME = "config.json"
CONFIG_FILE = CONFIG_DIR / CONFIG_FILE_NAME

# overrides CONFIG_DIR, mostly for tests and sandboxed runs
CONFIG_DIR_ENV = "NOSTRKIT_CONFIG_DIR"

DEFAULT_PROFILE_ALIAS = "default"

DEFAULT_RELAYS = (
    "wss://relay.damus.io",
    "wss://relay.primal.net",
    "wss://nos.lol",
)

# NIP-65 relay list metadata
RELAY_LIST_KIND = 10002

CONNECT_TIMEOUT = 5.0
QUERY_TIMEOUT = 5.0


def get_config_dir() -> Path:
    """get the directory holding the config file."""
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR


def get_config_file() -> Path:
    """get the path of the JSON config file."""
    return get_config_dir() / CONFIG_FILE_NAME


def default_relays() -> List[str]:
    """return a fresh copy of the built-in relay set."""
    return list(DEFAULT_RELAYS)
