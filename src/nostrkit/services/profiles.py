import logging
from typing import List, Optional, Tuple

from ..crypto.keys import generate_keypair, hex_to_npub, hex_to_nsec, parse_secret_key
from ..domain.errors import ConfigNotFoundError, NotConfiguredError, ProfileError
from ..profiles import (
    Config,
    ConfigStore,
    Profile,
    active_profile,
    create_or_update_profile,
    set_current_profile,
    unlock_secret_key,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """command-level operations on profiles: load, change, save."""

    def __init__(self, store: ConfigStore):
        self.store = store

    def _load_or_empty(self) -> Config:
        try:
            return self.store.load()
        except ConfigNotFoundError:
            return Config.empty()

    def list_profiles(self) -> Tuple[List[str], Optional[str]]:
        """
        list configured aliases.

        returns:
            (sorted aliases, current alias); both empty when nothing is configured
        """
        cfg = self._load_or_empty()
        if not cfg.profiles:
            return [], None
        return cfg.aliases(), cfg.current_profile

    def switch_profile(self, alias: str) -> str:
        """make alias the default profile and persist it."""
        cfg = self.store.load()
        set_current_profile(cfg, alias)
        self.store.save(cfg)
        return cfg.current_profile

    def setup_profile(self, alias: str, secret_key: str, password: str) -> Tuple[str, Profile]:
        """
        store (or replace) the key for alias.

        args:
            alias: profile alias, "default" when blank
            secret_key: nsec or hex secret key
            password: password protecting the key on disk

        returns:
            (alias, profile)
        """
        secret_hex = parse_secret_key(secret_key)
        cfg = self._load_or_empty()
        profile = create_or_update_profile(cfg, alias, secret_hex, password)
        self.store.save(cfg)
        logger.debug(f"saved profile '{cfg.current_profile}' to {self.store.config_file}")
        return cfg.current_profile, profile

    def add_profile(self, alias: str, secret_key: str, password: str) -> Tuple[str, Profile]:
        """like setup_profile, but refuses to overwrite an existing alias."""
        alias = alias.strip()
        if not alias:
            raise ProfileError("Profile alias cannot be empty")

        cfg = self._load_or_empty()
        if alias in cfg.profiles:
            raise ProfileError(f"Profile '{alias}' already exists")

        return self.setup_profile(alias, secret_key, password)

    def generate_profile(self, alias: str, password: str) -> Tuple[str, Profile, str, str]:
        """
        create a fresh key pair and store it under alias.

        returns:
            (alias, profile, nsec, npub)
        """
        secret_hex, public_hex = generate_keypair()
        alias, profile = self.setup_profile(alias, secret_hex, password)
        return alias, profile, hex_to_nsec(secret_hex), hex_to_npub(public_hex)

    def show_public_key(self, alias_override: Optional[str] = None) -> Tuple[str, str, str]:
        """
        returns:
            (alias, public key hex, npub)
        """
        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)
        public_key = profile.public_key.strip()
        if not public_key:
            raise NotConfiguredError("No public key found; run 'nostrkit setup' first")
        return alias, public_key, hex_to_npub(public_key)

    def unlock(self, alias_override: Optional[str], password: str) -> Tuple[str, str]:
        """
        decrypt the secret key of the active profile.

        returns:
            (alias, secret key hex)
        """
        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)
        return alias, unlock_secret_key(profile, password)
