"""
Config Store

Reads, validates and writes ~/.aicommits (KEY=value lines, see dotfile.py).
Every read re-parses the file; every write replaces it wholesale.
"""

from pathlib import Path
from typing import Any, Iterable, Optional

from aicommits.config import dotfile
from aicommits.config.settings import (
    SETTINGS,
    SETTINGS_BY_KEY,
    ConfigError,
    MissingCredentialError,
    UnknownKeyError,
)

ValidConfig = dict[str, Any]


class ConfigManager:
    """
    Manages loading, validating and saving configuration.

    No locking: two concurrent `set_configs` calls race and the last
    writer wins.
    """

    CONFIG_FILENAME = ".aicommits"

    @property
    def config_path(self) -> Path:
        return Path.home() / self.CONFIG_FILENAME

    def read_raw(self) -> dict[str, Optional[str]]:
        """Return the file's key/value pairs, or {} when there is no file."""
        path = self.config_path
        if not path.exists():
            return {}
        return dotfile.load(path)

    def write_raw(self, raw: dict[str, Any]) -> Path:
        path = self.config_path
        path.write_text(dotfile.dumps(raw), encoding='utf-8')
        return path

    def get_config(
        self,
        cli_config: Optional[dict[str, Optional[str]]] = None,
        suppress_errors: bool = False,
    ) -> ValidConfig:
        """
        Resolve every recognized setting.

        Precedence: CLI override > config file > default.

        Args:
            cli_config: Raw overrides; a None value means "not given"
            suppress_errors: Drop keys that fail validation instead of raising,
                and skip the credential checks

        Returns:
            Mapping of key to validated value (possibly partial when suppressing)
        """
        raw = self.read_raw()
        cli_config = cli_config or {}
        parsed: ValidConfig = {}

        for setting in SETTINGS:
            value = cli_config.get(setting.key)
            if value is None:
                value = raw.get(setting.key)
            try:
                parsed[setting.key] = setting.parse(value)
            except ConfigError:
                if not suppress_errors:
                    raise

        if not suppress_errors:
            self._check_credentials(parsed)
        return parsed

    def _check_credentials(self, config: ValidConfig) -> None:
        if not config['USE_AZURE']:
            if config['OPENAI_KEY'] == '':
                raise MissingCredentialError(
                    "Please set your OpenAI API key via `aicommits config set OPENAI_KEY=<your token>` "
                    "or set your Azure OpenAI configurations."
                )
            return

        if config['AZURE_OPENAI_KEY'] == '':
            raise MissingCredentialError(
                "Please set your Azure OpenAI configurations via "
                "`aicommits config set AZURE_OPENAI_KEY=<your token>`"
            )
        if config['AZURE_OPENAI_ENDPOINT'] == '':
            raise MissingCredentialError(
                "Please set your Azure OpenAI configurations via "
                "`aicommits config set AZURE_OPENAI_ENDPOINT='<your-deployment-full-url>'`"
            )

    def set_configs(self, pairs: Iterable[tuple[str, str]]) -> Path:
        """
        Validate and persist key/value pairs.

        The file is only rewritten once every pair has validated, so a
        single bad pair leaves it untouched. Unknown keys already in the
        file are carried over as they are.
        """
        raw: dict[str, Any] = self.read_raw()

        for key, value in pairs:
            setting = SETTINGS_BY_KEY.get(key)
            if setting is None:
                raise UnknownKeyError(key)
            parsed = setting.parse(value)
            if parsed is None:
                raw.pop(key, None)
            else:
                raw[key] = parsed

        return self.write_raw(raw)


# Singleton instance for easy access
_manager = ConfigManager()


def get_config(
    cli_config: Optional[dict[str, Optional[str]]] = None,
    suppress_errors: bool = False,
) -> ValidConfig:
    """Load and validate configuration (convenience function)."""
    return _manager.get_config(cli_config, suppress_errors)


def set_configs(pairs: Iterable[tuple[str, str]]) -> Path:
    """Validate and save key/value pairs (convenience function)."""
    return _manager.set_configs(pairs)


def get_config_path() -> Path:
    """Path of the per-user config file (convenience function)."""
    return _manager.config_path
