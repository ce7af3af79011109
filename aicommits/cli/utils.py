"""CLI Utility Functions"""

from typing import Any

from aicommits.output import bold, colorize_commit_type, dim, info


def format_config_value(value: Any) -> str:
    """Render a validated value the way it is written to the config file."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def parse_pair(pair: str) -> tuple[str, str]:
    """Split KEY=VALUE on the first '='."""
    key, _, value = pair.partition('=')
    return key, value


def confirm(question: str) -> bool:
    """Yes/no prompt defaulting to yes. Ctrl+C or EOF count as no."""
    try:
        answer = input(f"{question} {dim('[Y/n]')} ").strip().lower()
    except (KeyboardInterrupt, EOFError):
        return False
    return answer in ('', 'y', 'yes')


def display_options(options: list[str]) -> int | None:
    """Show numbered candidate messages and return the chosen index, or None to cancel."""
    print()
    for i, opt in enumerate(options, 1):
        print(f"  {info(f'[{i}]')} {bold(colorize_commit_type(opt))}")

    print()  # Space before prompt
    while True:
        try:
            choice = input(f"Select [1-{len(options)}] or (q)uit: ").strip().lower()
            if choice == 'q':
                return None
            idx = int(choice) - 1
            if 0 <= idx < len(options):
                return idx
        except ValueError:
            pass
        except (KeyboardInterrupt, EOFError):
            return None
        print(f"Enter 1-{len(options)} or q")
