"""test suite for profile and relay services."""
import asyncio
import pytest
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nostrkit.config import DEFAULT_RELAYS
from nostrkit.domain.errors import (
    ConfigNotFoundError,
    DecryptionError,
    KeyFormatError,
    NoMetadataError,
    NotConfiguredError,
    ProfileError,
    ProfileNotFoundError,
    RelayListError,
)
from nostrkit.profiles import Config, ConfigStore, Profile
from nostrkit.services.profiles import ProfileService
from nostrkit.services.relays import RelayService

NSEC = "nsec1vl029mgpspedva04g90vltkh6fvh240zqtv9k0t9af8935ke9laqsnlfe5"
NSEC_HEX = "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"
PUBKEY = "cd" * 32


@pytest.fixture
def temp_dir():
    """create a temporary config directory."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


@pytest.fixture
def store(temp_dir):
    return ConfigStore(temp_dir / "nostr" / "config.json")


@pytest.fixture
def seeded_store(store):
    """store with two profiles whose key material is placeholder text."""
    store.save(Config(
        current_profile="main",
        profiles={
            "main": Profile(relays=["wss://a", "wss://b"], encrypted_private_key="X", salt="Y", public_key=PUBKEY),
            "alt": Profile(relays=[], encrypted_private_key="X", salt="Y", public_key=PUBKEY),
        },
    ))
    return store


class TestProfileService:
    def test_list_without_config(self, store):
        assert ProfileService(store).list_profiles() == ([], None)

    def test_list(self, seeded_store):
        assert ProfileService(seeded_store).list_profiles() == (["alt", "main"], "main")

    def test_setup_creates_config(self, store):
        service = ProfileService(store)
        alias, profile = service.setup_profile("main", NSEC, "pw")

        assert alias == "main"
        loaded = store.load()
        assert loaded.current_profile == "main"
        assert loaded.profiles["main"].public_key == profile.public_key
        assert loaded.profiles["main"].relays == list(DEFAULT_RELAYS)

    def test_setup_accepts_hex(self, store):
        ProfileService(store).setup_profile("main", NSEC_HEX, "pw")
        assert ProfileService(store).unlock(None, "pw") == ("main", NSEC_HEX)

    def test_setup_rejects_bad_key(self, store):
        with pytest.raises(KeyFormatError):
            ProfileService(store).setup_profile("main", "npub1xyz", "pw")
        assert not store.exists()

    def test_setup_rekey_keeps_relays(self, seeded_store):
        ProfileService(seeded_store).setup_profile("main", NSEC, "pw")
        assert seeded_store.load().profiles["main"].relays == ["wss://a", "wss://b"]

    def test_add_existing_alias_rejected(self, seeded_store):
        with pytest.raises(ProfileError, match="already exists"):
            ProfileService(seeded_store).add_profile("main", NSEC, "pw")

    def test_add_new_alias(self, seeded_store):
        alias, _ = ProfileService(seeded_store).add_profile(" third ", NSEC, "pw")
        assert alias == "third"
        assert seeded_store.load().current_profile == "third"

    def test_add_empty_alias(self, store):
        with pytest.raises(ProfileError):
            ProfileService(store).add_profile("  ", NSEC, "pw")

    def test_switch(self, seeded_store):
        assert ProfileService(seeded_store).switch_profile("alt") == "alt"
        assert seeded_store.load().current_profile == "alt"

    def test_switch_unknown(self, seeded_store):
        with pytest.raises(ProfileNotFoundError):
            ProfileService(seeded_store).switch_profile("ghost")

    def test_switch_without_config(self, store):
        with pytest.raises(ConfigNotFoundError):
            ProfileService(store).switch_profile("main")

    def test_generate_profile(self, store):
        alias, profile, nsec, npub = ProfileService(store).generate_profile("fresh", "pw")

        assert alias == "fresh"
        assert nsec.startswith("nsec1")
        assert npub.startswith("npub1")
        assert store.load().profiles["fresh"].public_key == profile.public_key

    def test_show_public_key(self, seeded_store):
        alias, public_hex, npub = ProfileService(seeded_store).show_public_key("alt")
        assert alias == "alt"
        assert public_hex == PUBKEY
        assert npub.startswith("npub1")

    def test_unlock_wrong_password(self, store):
        ProfileService(store).setup_profile("main", NSEC, "pw")
        with pytest.raises(DecryptionError):
            ProfileService(store).unlock("main", "nope")


class TestRelayService:
    @pytest.fixture
    def synchronizer(self):
        synchronizer = AsyncMock()
        synchronizer.discover = AsyncMock(return_value=["wss://x", "wss://y"])
        return synchronizer

    def test_list(self, seeded_store, synchronizer):
        assert RelayService(seeded_store, synchronizer).list_relays() == ("main", ["wss://a", "wss://b"])

    def test_list_override(self, seeded_store, synchronizer):
        assert RelayService(seeded_store, synchronizer).list_relays("alt") == ("alt", [])

    def test_add(self, seeded_store, synchronizer):
        alias, added = RelayService(seeded_store, synchronizer).add_relays(None, ["wss://A/", "wss://c"])

        assert (alias, added) == ("main", ["wss://c"])
        assert seeded_store.load().profiles["main"].relays == ["wss://a", "wss://b", "wss://c"]

    def test_add_nothing_new_does_not_write(self, seeded_store, synchronizer):
        before = seeded_store.config_file.read_bytes()
        _, added = RelayService(seeded_store, synchronizer).add_relays(None, ["wss://a"])

        assert added == []
        assert seeded_store.config_file.read_bytes() == before

    def test_add_requires_urls(self, seeded_store, synchronizer):
        with pytest.raises(RelayListError, match="required"):
            RelayService(seeded_store, synchronizer).add_relays(None, [])

    def test_add_blank_urls_only(self, seeded_store, synchronizer):
        with pytest.raises(RelayListError, match="required"):
            RelayService(seeded_store, synchronizer).add_relays(None, ["  ", ""])

    def test_remove(self, seeded_store, synchronizer):
        alias, removed, missing = RelayService(seeded_store, synchronizer).remove_relays(
            None, ["wss://a", "wss://c"]
        )

        assert (alias, removed, missing) == ("main", ["wss://a"], ["wss://c"])
        assert seeded_store.load().profiles["main"].relays == ["wss://b"]

    def test_remove_requires_urls(self, seeded_store, synchronizer):
        with pytest.raises(RelayListError, match="required"):
            RelayService(seeded_store, synchronizer).remove_relays(None, [])

    def test_remove_blank_urls_only(self, seeded_store, synchronizer):
        before = seeded_store.config_file.read_bytes()
        with pytest.raises(RelayListError, match="required"):
            RelayService(seeded_store, synchronizer).remove_relays(None, ["  "])
        assert seeded_store.config_file.read_bytes() == before

    def test_remove_none_matched(self, seeded_store, synchronizer):
        before = seeded_store.config_file.read_bytes()
        with pytest.raises(RelayListError, match="None of the provided relays"):
            RelayService(seeded_store, synchronizer).remove_relays(None, ["wss://z"])
        assert seeded_store.config_file.read_bytes() == before

    def test_pull_replaces_relays(self, seeded_store, synchronizer):
        service = RelayService(seeded_store, synchronizer)
        alias, relays = asyncio.run(service.pull_relays())

        assert (alias, relays) == ("main", ["wss://x", "wss://y"])
        assert seeded_store.load().profiles["main"].relays == ["wss://x", "wss://y"]
        synchronizer.discover.assert_awaited_once_with(["wss://a", "wss://b"], PUBKEY, cancel_event=None)

    def test_pull_uses_defaults_without_relays(self, seeded_store, synchronizer):
        asyncio.run(RelayService(seeded_store, synchronizer).pull_relays("alt"))

        candidates = synchronizer.discover.await_args.args[0]
        assert candidates == list(DEFAULT_RELAYS)

    def test_pull_failure_leaves_config_untouched(self, seeded_store, synchronizer):
        synchronizer.discover = AsyncMock(side_effect=NoMetadataError("nothing"))
        before = seeded_store.config_file.read_bytes()

        with pytest.raises(NoMetadataError):
            asyncio.run(RelayService(seeded_store, synchronizer).pull_relays())

        assert seeded_store.config_file.read_bytes() == before

    def test_pull_without_public_key(self, store, synchronizer):
        store.save(Config(current_profile="bare", profiles={"bare": Profile(relays=["wss://a"])}))

        with pytest.raises(NotConfiguredError):
            asyncio.run(RelayService(store, synchronizer).pull_relays())
        synchronizer.discover.assert_not_awaited()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
