import asyncio
import logging
from typing import List, Optional, Tuple

from ..config import default_relays
from ..domain.errors import NotConfiguredError, RelayListError
from ..profiles import ConfigStore, active_profile
from ..relays import OutboxSynchronizer, add_relays, normalize_relay_url, remove_relays

logger = logging.getLogger(__name__)


class RelayService:
    """handles relay list commands for the active profile."""

    def __init__(self, store: ConfigStore, synchronizer: OutboxSynchronizer):
        self.store = store
        self.synchronizer = synchronizer

    def list_relays(self, alias_override: Optional[str] = None) -> Tuple[str, List[str]]:
        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)
        return alias, [relay.strip() for relay in profile.relays]

    def add_relays(self, alias_override: Optional[str], urls: List[str]) -> Tuple[str, List[str]]:
        """
        add relays to a profile.

        returns:
            (alias, added); the config is only written when something was added

        raises:
            RelayListError: if no non-blank URLs were given
        """
        if not any(normalize_relay_url(url) for url in urls):
            raise RelayListError("At least one relay URL is required")

        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)
        added = add_relays(profile, urls)
        if added:
            self.store.save(cfg)
        return alias, added

    def remove_relays(
        self, alias_override: Optional[str], urls: List[str]
    ) -> Tuple[str, List[str], List[str]]:
        """
        remove relays from a profile.

        returns:
            (alias, removed, missing)

        raises:
            RelayListError: if no non-blank URLs were given, or none of them were configured
        """
        if not any(normalize_relay_url(url) for url in urls):
            raise RelayListError("At least one relay URL is required")

        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)
        removed, missing = remove_relays(profile, urls)
        if not removed:
            raise RelayListError("None of the provided relays were configured")

        self.store.save(cfg)
        return alias, removed, missing

    async def pull_relays(
        self,
        alias_override: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Tuple[str, List[str]]:
        """
        replace the profile's relays with the ones its outbox advertises.

        the profile's own relays (or the built-in set when it has none) are
        the candidates queried. nothing is written if discovery fails.

        returns:
            (alias, synchronized relays)
        """
        cfg = self.store.load()
        profile, alias = active_profile(cfg, alias_override)

        pubkey = profile.public_key.strip()
        if not pubkey:
            raise NotConfiguredError("No public key found in config; run 'nostrkit setup' first")

        candidates = list(profile.relays) or default_relays()
        fetched = await self.synchronizer.discover(candidates, pubkey, cancel_event=cancel_event)

        profile.relays = fetched
        self.store.save(cfg)
        logger.info(f"synchronized {len(fetched)} relay(s) into '{alias}'")
        return alias, fetched
