"""CLI Main Entry Point"""

import sys
import time
import urllib.error

from aicommits.config import ConfigError, get_config
from aicommits.git import GitAnalyzer, GitError, StagedDiff
from aicommits.llm import LLMError, LLMResponse, get_client
from aicommits.output import bold, dim, info, print_error, print_success, Spinner, colorize_commit_type

from aicommits.cli.args import parse_args
from aicommits.cli.commands import run_config_get, run_config_set
from aicommits.cli.utils import confirm, display_options


def _display_file_list(staged: StagedDiff):
    """Show which staged files go into the diff."""
    noun = 'file' if staged.total_files == 1 else 'files'
    print(bold(f"Detected {staged.total_files} staged {noun}:"))
    for path in staged.files:
        print(dim(f"  {path}"))


def _print_verbose_stats(response: LLMResponse, elapsed: float):
    print(dim(f"  Model: {response.model}"))
    print(dim(f"  Tokens: {response.tokens_used}"))
    print(dim(f"  Request: {elapsed:.2f}s"))


def _choose_message(messages: list[str]) -> str | None:
    """Ask the user to accept or pick a message. None means cancelled."""
    if len(messages) == 1:
        message = messages[0]
        print(f"\n  {bold(colorize_commit_type(message))}\n")
        return message if confirm("Use this commit message?") else None

    idx = display_options(messages)
    return None if idx is None else messages[idx]


def _generate_commit_flow(args) -> int:
    """Main commit message generation flow.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()
    is_interactive = sys.stdin.isatty() and not is_pipe

    analyzer = GitAnalyzer()
    if args.all:
        analyzer.stage_tracked()

    staged = analyzer.get_staged_diff(args.exclude)
    if staged is None:
        print_error(
            "No staged changes found. Stage your changes manually, "
            "or automatically stage all changes with the `--all` flag."
        )
        return 1

    if not is_pipe:
        _display_file_list(staged)

    config = get_config({'generate': args.generate, 'type': args.type})
    client = get_client(config)

    t0 = time.time()
    with Spinner(f"Generating with {info(client.name)}..."):
        response = client.generate(staged.diff)
    elapsed = time.time() - t0

    if args.verbose and not is_pipe:
        _print_verbose_stats(response, elapsed)

    if not response.messages:
        print_error("No commit messages were generated. Try again.")
        return 1

    # Pipe mode: output raw messages and exit
    if not is_interactive:
        print('\n'.join(response.messages))
        return 0

    message = _choose_message(response.messages)
    if message is None:
        print(dim("Commit cancelled."))
        return 0

    analyzer.commit(message, args.commit_args)
    print_success("Successfully committed!")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    try:
        if args.command == 'config':
            if args.mode == 'get':
                return run_config_get(args.keys)
            return run_config_set(args.pairs)
        return _generate_commit_flow(args)
    except (ConfigError, LLMError, GitError) as e:
        print_error(str(e))
        return 1
    except (urllib.error.URLError, ConnectionError) as e:
        # Unclassified transport failures keep their original message
        print_error(f"Request failed: {e}")
        return 1
    except OSError as e:
        # Config file or filesystem trouble
        print_error(str(e))
        return 1
