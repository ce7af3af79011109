"""Setting descriptors and their validators.

Each recognized key of the config file is described once by a `Setting`.
`Setting.parse()` returns the default for a missing value and otherwise runs
the key's validator, which raises `ValidationError` on bad input.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from aicommits import COMMIT_FORMATS


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


class ValidationError(ConfigError):
    """A config value breaks its key's rule."""

    def __init__(self, key: str, rule: str):
        self.key = key
        self.rule = rule
        super().__init__(f"Invalid config property {key}: {rule}")


class UnknownKeyError(ConfigError):
    """A `config set` targeted a key that is not recognized."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invalid config property: {key}")


class MissingCredentialError(ConfigError):
    """The credentials needed by the selected mode are not configured."""
    pass


URL_PATTERN = re.compile(r'^https?://')
INTEGER_PATTERN = re.compile(r'^\d+$')
LOCALE_PATTERN = re.compile(r'^[a-z-]+$', re.IGNORECASE)


def _check(key: str, condition: Any, rule: str) -> None:
    if not condition:
        raise ValidationError(key, rule)


def _integer(key: str, value: str) -> int:
    _check(key, INTEGER_PATTERN.match(value), 'Must be an integer')
    return int(value)


def _openai_key(value: str) -> str:
    _check('OPENAI_KEY', value.startswith('sk-'), 'Must start with "sk-"')
    return value


def _locale(value: str) -> str:
    _check(
        'locale',
        LOCALE_PATTERN.match(value),
        'Must be a valid locale (letters and dashes/underscores). You can consult '
        'the list of codes in: https://wikipedia.org/wiki/List_of_ISO_639-1_codes',
    )
    return value


def _generate(value: str) -> int:
    count = _integer('generate', value)
    _check('generate', count > 0, 'Must be greater than 0')
    _check('generate', count <= 5, 'Must be less or equal to 5')
    return count


def _commit_type(value: str) -> str:
    _check('type', value in COMMIT_FORMATS, 'Invalid commit type')
    return value


def _url(key: str) -> Callable[[str], str]:
    def validate(value: str) -> str:
        _check(key, URL_PATTERN.match(value), 'Must be a valid URL')
        return value
    return validate


def _timeout(value: str) -> int:
    timeout = _integer('timeout', value)
    _check('timeout', timeout >= 500, 'Must be greater than 500ms')
    return timeout


def _max_length(value: str) -> int:
    max_length = _integer('max-length', value)
    _check('max-length', max_length >= 20, 'Must be greater than 20 characters')
    return max_length


def _use_azure(value: str) -> bool:
    normalized = value.lower()
    _check('USE_AZURE', normalized in ('true', 'false'), 'Must be true or false')
    return normalized == 'true'


@dataclass(frozen=True)
class Setting:
    """One recognized config key: validator plus default."""
    key: str
    validate: Callable[[str], Any]
    default: Any = None
    # USE_AZURE only falls back to its default when the value is absent;
    # an empty string still has to be "true" or "false".
    empty_is_missing: bool = True

    def parse(self, value: Optional[str]) -> Any:
        if value is None or (self.empty_is_missing and value == ''):
            return self.default
        return self.validate(value)


def _identity(value: str) -> str:
    return value


# Resolution order matters: the first failing key is the one reported
SETTINGS: tuple[Setting, ...] = (
    Setting('USE_AZURE', _use_azure, False, empty_is_missing=False),
    Setting('AZURE_OPENAI_KEY', _identity, ''),
    Setting('AZURE_OPENAI_ENDPOINT', _url('AZURE_OPENAI_ENDPOINT'), ''),
    Setting('OPENAI_KEY', _openai_key, ''),
    Setting('locale', _locale, 'en'),
    Setting('generate', _generate, 1),
    Setting('type', _commit_type, ''),
    Setting('proxy', _url('proxy'), None),
    Setting('model', _identity, 'gpt-3.5-turbo'),
    Setting('timeout', _timeout, 10_000),
    Setting('max-length', _max_length, 50),
)

SETTINGS_BY_KEY: dict[str, Setting] = {s.key: s for s in SETTINGS}

CONFIG_KEYS = [s.key for s in SETTINGS]
