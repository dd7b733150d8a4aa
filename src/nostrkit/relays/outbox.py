"""outbox discovery: find an identity's write relays from its NIP-65 event."""
import asyncio
import logging
from typing import Iterable, List, Optional

from ..config import CONNECT_TIMEOUT, QUERY_TIMEOUT, RELAY_LIST_KIND
from ..crypto.events import verify_event
from ..domain.errors import DiscoveryCancelledError, NoMetadataError
from .manager import normalize_relay_url, relay_key
from .transport import RelayTransport

logger = logging.getLogger(__name__)


def write_relays_from_event(event: dict) -> List[str]:
    """
    extract relay URLs usable for writing from a relay list event.

    tags look like ["r", url] or ["r", url, "read"|"write"]; read-only
    entries are skipped.
    """
    relays = []
    for tag in event.get("tags") or []:
        if not isinstance(tag, list) or len(tag) < 2 or tag[0] != "r":
            continue
        if not isinstance(tag[1], str):
            continue
        if len(tag) >= 3 and str(tag[2]).strip().lower() == "read":
            continue
        url = normalize_relay_url(tag[1])
        if url:
            relays.append(url)
    return relays


class OutboxSynchronizer:
    """queries candidate relays, one after another, for the latest relay list."""

    def __init__(
        self,
        transport: RelayTransport,
        connect_timeout: float = CONNECT_TIMEOUT,
        query_timeout: float = QUERY_TIMEOUT,
    ):
        self.transport = transport
        self.connect_timeout = connect_timeout
        self.query_timeout = query_timeout

    async def discover(
        self,
        candidate_relays: Iterable[str],
        pubkey_hex: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[str]:
        """
        collect the write relays advertised for pubkey_hex.

        a candidate that cannot be reached or queried in time is logged and
        skipped. events of another kind or author, or with a bad signature,
        are ignored. results are deduplicated across all candidates in the order
        they were first seen.

        args:
            candidate_relays: relays to ask, in order
            pubkey_hex: author of the relay list event
            cancel_event: when set, the scan stops before the next candidate

        returns:
            ordered relay URLs; the caller should replace its list with them

        raises:
            NoMetadataError: if no candidate yielded a relay
            DiscoveryCancelledError: if cancel_event was set mid-scan
        """
        relay_filter = {"authors": [pubkey_hex], "kinds": [RELAY_LIST_KIND], "limit": 1}
        seen = set()
        discovered = []

        for candidate in candidate_relays:
            if cancel_event is not None and cancel_event.is_set():
                raise DiscoveryCancelledError("Relay discovery was cancelled")

            url = normalize_relay_url(candidate)
            if not url:
                continue

            events = await self._query(url, relay_filter)
            if not events:
                continue

            for event in events:
                if not self._is_relay_list_from(event, pubkey_hex):
                    logger.warning(f"{url}: ignoring event that is not a signed relay list from {pubkey_hex}")
                    continue
                for relay in write_relays_from_event(event):
                    key = relay_key(relay)
                    if key in seen:
                        continue
                    seen.add(key)
                    discovered.append(relay)

        if not discovered:
            raise NoMetadataError("No relay list metadata was found on the queried relays")

        return discovered

    @staticmethod
    def _is_relay_list_from(event, pubkey_hex: str) -> bool:
        if not isinstance(event, dict):
            return False
        if event.get("kind") != RELAY_LIST_KIND:
            return False
        author = event.get("pubkey")
        if not isinstance(author, str) or author.lower() != pubkey_hex.strip().lower():
            return False
        return verify_event(event)

    async def _query(self, url: str, relay_filter: dict) -> List[dict]:
        try:
            connection = await asyncio.wait_for(self.transport.connect(url), self.connect_timeout)
        except Exception as e:
            logger.warning(f"Failed to connect to {url}: {e!r}")
            return []

        try:
            events = await asyncio.wait_for(connection.query(relay_filter), self.query_timeout)
        except Exception as e:
            logger.warning(f"Failed to query {url}: {e!r}")
            return []
        finally:
            try:
                await connection.close()
            except Exception as e:
                logger.debug(f"error closing {url}: {e!r}")

        logger.debug(f"{url}: {len(events)} relay list event(s)")
        return events
