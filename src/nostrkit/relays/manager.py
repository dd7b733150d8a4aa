"""relay list editing for a profile.

stored URLs keep the casing they were added with; comparisons go through
relay_key(), which ignores case and trailing slashes.
"""
from typing import Iterable, List, Tuple

from ..profiles.models import Profile


def normalize_relay_url(url: str) -> str:
    """trim whitespace and trailing slashes."""
    return url.strip().rstrip("/")


def relay_key(url: str) -> str:
    """comparison key for a relay URL."""
    return normalize_relay_url(url).lower()


def dedupe_relays(urls: Iterable[str]) -> List[str]:
    """normalize urls, dropping blanks and repeats, keeping first-seen order."""
    seen = set()
    result = []
    for url in urls:
        cleaned = normalize_relay_url(url)
        if not cleaned:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result


def add_relays(profile: Profile, urls: Iterable[str]) -> List[str]:
    """
    append relays that are not configured yet.

    args:
        profile: profile to edit in place
        urls: relay URLs in priority order

    returns:
        the URLs actually added, in input order
    """
    existing = {relay_key(relay) for relay in profile.relays}
    existing.discard("")

    added = []
    for url in urls:
        cleaned = normalize_relay_url(url)
        if not cleaned:
            continue
        key = cleaned.lower()
        if key in existing:
            continue
        existing.add(key)
        profile.relays.append(cleaned)
        added.append(cleaned)
    return added


def remove_relays(profile: Profile, urls: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    drop relays from a profile.

    returns:
        (removed, missing): removed holds the stored entries that matched,
        missing holds the requested URLs (as given) that matched nothing
    """
    targets = {}
    for url in urls:
        key = relay_key(url)
        if not key or key in targets:
            continue
        targets[key] = url

    kept = []
    removed = []
    matched = set()
    for relay in profile.relays:
        key = relay_key(relay)
        if key in targets:
            removed.append(relay)
            matched.add(key)
        else:
            kept.append(relay)
    profile.relays = kept

    missing = [url for key, url in targets.items() if key not in matched]
    return removed, missing
