"""Loading the runtime configuration from a JSON document or file."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .alg_section import parse_alg_config
from .basic_section import parse_basic_config
from .fields import ConfigOpenError, ConfigParseError
from .models import Language, SirenConfig
from .vt_section import parse_debug_config, parse_def_vt_configs

log = logging.getLogger(__name__)

KEY_BASIC_CONFIG = "basic_config"
KEY_ALG_CONFIG = "alg_config"
KEY_DEBUG_CONFIG = "debug_config"

DEFAULT_BACKUP_FILE_PATH = "/etc/blacksiren.json"
LEGACY_ALG_DIR_CN = "/system/workdir_cn"


def _section(document: Mapping[str, Any], key: str, name: str) -> Mapping[str, Any]:
    section = document.get(key)
    if not isinstance(section, Mapping):
        log.error("cannot find %s config", name)
        raise ConfigParseError(f"cannot find {name} config")
    return section


def load_config_from_json(contents: str | bytes, config: SirenConfig | None = None) -> SirenConfig:
    """Parse *contents* into *config* (a new one when omitted) and return it.

    Raises ConfigParseError when the text is not JSON, a section is missing,
    or a required key is missing or mistyped.
    """
    if config is None:
        config = SirenConfig()
    try:
        document = json.loads(contents)
    except (ValueError, TypeError) as exc:
        log.error("parse json failed")
        raise ConfigParseError(f"parse json failed: {exc}") from exc
    if not isinstance(document, Mapping):
        log.error("parse json failed")
        raise ConfigParseError("configuration document is not a JSON object")

    basic = _section(document, KEY_BASIC_CONFIG, "basic")
    alg = _section(document, KEY_ALG_CONFIG, "alg")
    debug = _section(document, KEY_DEBUG_CONFIG, "debug")

    parse_basic_config(basic, config)
    parse_alg_config(alg, config)
    parse_def_vt_configs(alg, config)
    parse_debug_config(debug, config)
    return config


class ConfigurationManager:
    """Finds and loads the configuration, falling back to a backup file."""

    def __init__(
        self,
        config_file_path: str | Path | None = None,
        *,
        backup_file_path: str | Path = DEFAULT_BACKUP_FILE_PATH,
        legacy_siren_test: bool = False,
        legacy_dir: str = LEGACY_ALG_DIR_CN,
    ) -> None:
        self.config_file_path = str(config_file_path) if config_file_path else ""
        self.backup_file_path = Path(backup_file_path)
        self.legacy_siren_test = legacy_siren_test
        self.legacy_dir = legacy_dir
        self.siren_config = SirenConfig()

    @property
    def valid_path(self) -> bool:
        """Whether a user configuration path was given."""
        return bool(self.config_file_path)

    def update_config_file(self) -> bool:
        """Try to fetch a remote configuration; return whether one was used.

        Remote configuration is disabled, so this always returns False.
        """
        return False

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.error("%s config file not exist or permission denied: %s", path, exc)
            return None

    def parse_config_file(self) -> SirenConfig:
        """Load the configuration and return it.

        The user path is tried first; if it cannot be read the backup file is
        used. A user file that is read but fails to parse is an error and the
        backup is not consulted. Raises ConfigOpenError or ConfigParseError.
        """
        log.info(
            "validPath = %s, use path %s",
            self.valid_path,
            self.config_file_path or "null",
        )
        if not self.update_config_file():
            contents = self._read(Path(self.config_file_path)) if self.valid_path else None
            if contents is not None:
                log.debug("%s", contents)
                load_config_from_json(contents, self.siren_config)
            else:
                log.info("use backup %s", self.backup_file_path)
                contents = self._read(self.backup_file_path)
                if contents is None:
                    log.error("config file is not exist or other error")
                    raise ConfigOpenError(f"cannot open {self.backup_file_path}")
                log.debug("%s", contents)
                load_config_from_json(contents, self.siren_config)

        if self.legacy_siren_test:
            self.siren_config.alg_config.alg_lan = Language.ZH
            self.siren_config.alg_config.alg_legacy_dir = self.legacy_dir
        return self.siren_config