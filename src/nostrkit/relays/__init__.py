"""relay list editing and outbox discovery."""
from .manager import add_relays, dedupe_relays, normalize_relay_url, relay_key, remove_relays
from .outbox import OutboxSynchronizer, write_relays_from_event
from .transport import RelayTransport, WebsocketTransport

__all__ = [
    "OutboxSynchronizer",
    "RelayTransport",
    "WebsocketTransport",
    "add_relays",
    "dedupe_relays",
    "normalize_relay_url",
    "relay_key",
    "remove_relays",
    "write_relays_from_event",
]
