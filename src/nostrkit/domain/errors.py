from typing import Iterable


class NostrkitError(Exception):
    """base class for exceptions in nostrkit."""
    pass


class ConfigError(NostrkitError):
    """raised when the config file is missing, unreadable or incomplete."""
    pass


class ConfigNotFoundError(ConfigError):
    """raised when no config file exists yet."""
    def __init__(self, path):
        self.path = path
        super().__init__(
            f"No config found at {path}.\n"
            f"Run 'nostrkit setup' to create one."
        )


class ConfigParseError(ConfigError):
    """raised when the config file is not valid JSON or has the wrong shape."""
    pass


class ConfigWriteError(ConfigError):
    """raised when the config file cannot be written."""
    pass


class KeyFormatError(NostrkitError):
    """raised when a bech32 or hex key cannot be decoded."""
    pass


class InvalidKeyError(NostrkitError):
    """raised when a secret key is not a usable secp256k1 scalar."""
    pass


class DecryptionError(NostrkitError):
    """raised when a secret cannot be decrypted (wrong password or corrupted data)."""
    pass


class ProfileError(NostrkitError):
    """raised when profile operations fail."""
    pass


class NotConfiguredError(ProfileError):
    """raised when there is no profile (or no key material) to work with."""
    pass


class ProfileNotFoundError(ProfileError):
    """raised when an alias does not name a configured profile."""
    def __init__(self, alias: str, available: Iterable[str]):
        self.alias = alias
        self.available = list(available)
        message = f"Profile '{alias}' not found."
        if self.available:
            message += f"\nAvailable profiles: {', '.join(self.available)}"
        super().__init__(message)


class RelayListError(NostrkitError):
    """raised when a relay list edit cannot be applied."""
    pass


class NoMetadataError(NostrkitError):
    """raised when outbox discovery finds no relay list on any candidate."""
    pass


class DiscoveryCancelledError(NostrkitError):
    """raised when outbox discovery is cancelled between candidates."""
    pass
