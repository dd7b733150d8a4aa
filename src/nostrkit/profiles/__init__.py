"""multi-profile key vault."""
from .models import Config, LegacyDocument, Profile
from .migration import migrate_legacy
from .store import ConfigStore
from .vault import (
    active_profile,
    create_or_update_profile,
    profile_aliases,
    set_current_profile,
    unlock_secret_key,
)

__all__ = [
    "Config",
    "ConfigStore",
    "LegacyDocument",
    "Profile",
    "active_profile",
    "create_or_update_profile",
    "migrate_legacy",
    "profile_aliases",
    "set_current_profile",
    "unlock_secret_key",
]
