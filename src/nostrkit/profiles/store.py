import json
import logging
import os
import tempfile
from pathlib import Path
from pydantic import ValidationError

from ..domain.errors import ConfigError, ConfigNotFoundError, ConfigParseError, ConfigWriteError
from .migration import migrate_legacy
from .models import Config, LegacyDocument

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class ConfigStore:
    """handles config persistence to JSON."""

    def __init__(self, config_file: Path):
        self.config_file = config_file

    def exists(self) -> bool:
        return self.config_file.exists()

    def load(self) -> Config:
        """
        load the config, migrating a legacy document if needed.

        returns:
            config with a valid current_profile whenever profiles exist

        raises:
            ConfigNotFoundError: if the file does not exist
            ConfigParseError: if the file is not valid JSON or has a bad shape
            ConfigError: if a legacy document lacks key material
        """
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            raise ConfigNotFoundError(self.config_file)
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"parsing config {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"reading config {self.config_file}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigParseError(f"parsing config {self.config_file}: expected a JSON object")

        if "profiles" in raw:
            try:
                config = Config.model_validate(raw)
            except ValidationError as e:
                raise ConfigParseError(f"parsing config {self.config_file}: {e}") from e
            stale = config.current_profile
            if config.profiles and stale not in config.profiles:
                config.ensure_current_profile()
                logger.debug(
                    f"current profile '{stale}' is not configured, using '{config.current_profile}'"
                )
            return config

        return self._migrate(raw)

    def _migrate(self, raw: dict) -> Config:
        try:
            legacy = LegacyDocument.model_validate(raw)
        except ValidationError as e:
            raise ConfigParseError(f"parsing legacy config {self.config_file}: {e}") from e

        missing = legacy.missing_fields()
        if missing:
            raise ConfigError(
                f"Config is missing profile data ({', '.join(missing)}). "
                "Run 'nostrkit setup' again."
            )

        config = migrate_legacy(legacy)
        # persist right away so migration runs at most once
        self.save(config)
        logger.info(f"migrated legacy config at {self.config_file} to profile 'default'")
        return config

    def save(self, config: Config) -> None:
        """
        save config to JSON, readable by the owner only.

        the document is written to a sibling temp file and moved into place,
        so a failed write leaves the previous file untouched.

        raises:
            ConfigWriteError: if the directory or file cannot be written
        """
        if config.profiles and not config.current_profile:
            config.ensure_current_profile()

        directory = self.config_file.parent
        payload = json.dumps(self._serialize(config), indent=2) + "\n"

        tmp_path = None
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            os.chmod(directory, DIR_MODE)

            # mkstemp creates the file with mode 0600
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".config-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp_path, FILE_MODE)
            os.replace(tmp_path, self.config_file)
            tmp_path = None
        except OSError as e:
            raise ConfigWriteError(f"failed to write config file {self.config_file}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    @staticmethod
    def _serialize(config: Config) -> dict:
        data = config.model_dump()
        data["profiles"] = {alias: data["profiles"][alias] for alias in sorted(data["profiles"])}
        return data
