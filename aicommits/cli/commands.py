"""CLI Commands"""

from aicommits.config import get_config, set_configs
from aicommits.output import print_success, dim

from aicommits.cli.utils import format_config_value, parse_pair


def run_config_get(keys: list[str]) -> int:
    """Print KEY=value for each requested setting; unknown or invalid keys print nothing."""
    config = get_config(suppress_errors=True)
    for key in keys:
        if key in config:
            print(f"{key}={format_config_value(config[key])}")
    return 0


def run_config_set(pairs: list[str]) -> int:
    """Validate and save KEY=VALUE pairs; nothing is saved if any pair is invalid."""
    path = set_configs([parse_pair(pair) for pair in pairs])
    print_success(f"Saved to {dim(str(path))}")
    return 0
