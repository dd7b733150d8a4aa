from ..config import DEFAULT_PROFILE_ALIAS, default_relays
from .models import Config, LegacyDocument, Profile


def migrate_legacy(legacy: LegacyDocument) -> Config:
    """
    wrap a legacy single-profile document into the multi-profile shape.

    the profile lands under the "default" alias and becomes current. an empty
    legacy relay list falls back to the built-in relays.
    """
    relays = list(legacy.relays or [])
    if not relays:
        relays = default_relays()

    profile = Profile(
        relays=relays,
        encrypted_private_key=legacy.encrypted_private_key,
        salt=legacy.salt,
        public_key=legacy.public_key,
    )
    return Config(
        current_profile=DEFAULT_PROFILE_ALIAS,
        profiles={DEFAULT_PROFILE_ALIAS: profile},
    )
