"""profile resolution and key material handling.

nothing in this module touches the disk: callers mutate a Config in memory and
persist it with ConfigStore.save() once all changes are in place.
"""
from typing import List, Optional, Tuple

from ..config import DEFAULT_PROFILE_ALIAS, default_relays
from ..crypto import cipher
from ..crypto.keys import derive_public_key
from ..domain.errors import (
    DecryptionError,
    NotConfiguredError,
    ProfileError,
    ProfileNotFoundError,
)
from .models import Config, Profile

NOT_CONFIGURED_MESSAGE = "No profiles configured. Run 'nostrkit setup' first."


def profile_aliases(cfg: Config) -> List[str]:
    """list configured aliases in sorted order."""
    return cfg.aliases()


def active_profile(cfg: Config, alias_override: Optional[str] = None) -> Tuple[Profile, str]:
    """
    resolve the profile a command should act on.

    args:
        cfg: loaded config
        alias_override: explicit alias (e.g. from --profile), wins over current_profile

    returns:
        (profile, alias)

    raises:
        NotConfiguredError: if no profiles exist
        ProfileNotFoundError: if the override names an unknown alias
    """
    if not cfg.profiles:
        raise NotConfiguredError(NOT_CONFIGURED_MESSAGE)

    target = (alias_override or "").strip()
    if target:
        if target not in cfg.profiles:
            raise ProfileNotFoundError(target, cfg.aliases())
        return cfg.profiles[target], target

    alias = cfg.ensure_current_profile()
    return cfg.profiles[alias], alias


def set_current_profile(cfg: Config, alias: str) -> None:
    """
    make alias the default profile.

    raises:
        ProfileError: if alias is empty
        ProfileNotFoundError: if alias is not configured
    """
    target = alias.strip()
    if not target:
        raise ProfileError("Profile alias cannot be empty")
    if target not in cfg.profiles:
        raise ProfileNotFoundError(target, cfg.aliases())
    cfg.current_profile = target


def create_or_update_profile(cfg: Config, alias: str, secret_key_hex: str, password: str) -> Profile:
    """
    encrypt a secret key into the profile stored under alias.

    an existing alias keeps its relay list; a new one starts with the
    built-in relays. the profile becomes current.

    raises:
        InvalidKeyError: if the secret key is malformed
    """
    alias = alias.strip() or DEFAULT_PROFILE_ALIAS
    public_key = derive_public_key(secret_key_hex)

    ciphertext, salt = cipher.encrypt(secret_key_hex.strip().lower().encode("ascii"), password)

    relays = default_relays()
    existing = cfg.profiles.get(alias)
    if existing is not None and existing.relays:
        relays = list(existing.relays)

    profile = Profile(
        relays=relays,
        encrypted_private_key=ciphertext,
        salt=salt.hex(),
        public_key=public_key,
    )
    cfg.profiles[alias] = profile
    cfg.current_profile = alias
    return profile


def unlock_secret_key(profile: Profile, password: str) -> str:
    """
    decrypt a profile's secret key.

    returns:
        secret key as hex

    raises:
        NotConfiguredError: if the profile holds no key material
        DecryptionError: on wrong password or corrupted data
    """
    if not profile.has_key:
        raise NotConfiguredError("Profile has no encrypted key. Run 'nostrkit setup' first.")

    try:
        salt = bytes.fromhex(profile.salt)
    except ValueError as e:
        raise DecryptionError("Stored salt is not valid hex") from e

    plaintext = cipher.decrypt(profile.encrypted_private_key, password, salt)
    try:
        return plaintext.decode("ascii")
    except UnicodeDecodeError as e:
        raise DecryptionError("Decrypted key is not valid text") from e
