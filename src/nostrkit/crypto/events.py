"""event id computation and schnorr signature checks for received events."""
import hashlib
import json
import logging

from coincurve import PublicKeyXOnly

logger = logging.getLogger(__name__)


def compute_event_id(event: dict) -> str:
    """
    hash the canonical serialization of an event.

    the id is sha256 over [0, pubkey, created_at, kind, tags, content] as
    compact UTF-8 JSON.
    """
    serialized = json.dumps(
        [0, event["pubkey"], event["created_at"], event["kind"], event["tags"], event["content"]],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def verify_event(event: dict) -> bool:
    """
    check that an event's id matches its content and its signature is valid.

    returns:
        False for malformed events, mismatched ids and bad signatures
    """
    try:
        event_id = compute_event_id(event)
        if event.get("id") != event_id:
            return False
        public_key = PublicKeyXOnly(bytes.fromhex(event["pubkey"]))
        return public_key.verify(bytes.fromhex(event["sig"]), bytes.fromhex(event_id))
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"rejecting malformed event: {e!r}")
        return False
