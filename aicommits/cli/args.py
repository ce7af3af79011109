"""CLI Argument Parsing"""

import argparse
import sys
import argcomplete

from aicommits import __version__
from aicommits.config import CONFIG_KEYS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aicommits',
        description='Generate commit messages for staged changes with AI',
        epilog='Extra arguments after -- are passed to git commit. Example: aicommits -g 3 -- --no-verify'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Generation options (values are validated by the config layer)
    parser.add_argument('-g', '--generate', type=str, metavar='N', help='Number of messages to generate (1-5)')
    parser.add_argument('-t', '--type', type=str, metavar='TYPE', help='Commit message format: conventional')
    parser.add_argument('-x', '--exclude', action='append', default=[], metavar='FILE', help='Files to leave out of the diff (repeatable)')
    parser.add_argument('-a', '--all', action='store_true', help='Stage changes to tracked files before generating')

    # Output options
    parser.add_argument('--verbose', action='store_true', help='Show debug info (request time, tokens used)')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    config_parser = subparsers.add_parser('config', help='Read or write settings in ~/.aicommits')
    config_modes = config_parser.add_subparsers(dest='mode', metavar='MODE', required=True)

    get_parser = config_modes.add_parser('get', help='Print settings: config get KEY...')
    keys_arg = get_parser.add_argument('keys', nargs='+', metavar='KEY')
    keys_arg.completer = argcomplete.completers.ChoicesCompleter(CONFIG_KEYS)

    set_parser = config_modes.add_parser('set', help='Save settings: config set KEY=VALUE...')
    set_parser.add_argument('pairs', nargs='+', metavar='KEY=VALUE')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else list(argv)

    # Everything after -- belongs to git commit
    commit_args = []
    if '--' in argv:
        split = argv.index('--')
        argv, commit_args = argv[:split], argv[split + 1:]

    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    args.commit_args = commit_args
    return args
