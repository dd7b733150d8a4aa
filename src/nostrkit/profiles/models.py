"""data models for the on-disk config document."""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class Profile(BaseModel):
    """one identity: encrypted key material plus its relay list."""
    relays: List[str] = Field(default_factory=list)
    encrypted_private_key: str = ""  # base64, nonce-prefixed AES-GCM
    salt: str = ""  # hex
    public_key: str = ""  # hex, cached for display

    @field_validator("relays", mode="before")
    @classmethod
    def _null_relays(cls, value):
        # older releases wrote null after the last relay was removed
        return [] if value is None else value

    @model_validator(mode="after")
    def _key_material_complete(self) -> "Profile":
        present = [bool(self.encrypted_private_key), bool(self.salt), bool(self.public_key)]
        if any(present) and not all(present):
            raise ValueError(
                "encrypted_private_key, salt and public_key must be set together"
            )
        return self

    @property
    def has_key(self) -> bool:
        return bool(self.encrypted_private_key)


class Config(BaseModel):
    """complete multi-profile configuration."""
    current_profile: str = ""
    profiles: Dict[str, Profile] = Field(default_factory=dict)

    @field_validator("profiles", mode="before")
    @classmethod
    def _null_profiles(cls, value):
        return {} if value is None else value

    @classmethod
    def empty(cls) -> "Config":
        """create empty config."""
        return cls(current_profile="", profiles={})

    def aliases(self) -> List[str]:
        """profile aliases, sorted."""
        return sorted(self.profiles)

    def ensure_current_profile(self) -> Optional[str]:
        """
        point current_profile at an existing alias.

        a stale or empty pointer is replaced with the first alias in sorted
        order. returns the resolved alias, or None when there are no profiles.
        """
        if not self.profiles:
            return None
        if self.current_profile not in self.profiles:
            self.current_profile = self.aliases()[0]
        return self.current_profile


class LegacyDocument(BaseModel):
    """single-profile document written by older releases."""
    relays: Optional[List[str]] = None
    encrypted_private_key: str = ""
    salt: str = ""
    public_key: str = ""

    def missing_fields(self) -> List[str]:
        return [
            name for name in ("encrypted_private_key", "salt", "public_key")
            if not getattr(self, name).strip()
        ]
