"""Git Analyzer - Extract staged changes from git and commit them."""

import subprocess
from dataclasses import dataclass, field

# Lock files are noise for commit messages and can be huge
EXCLUDED_FROM_DIFF = [
    'package-lock.json',
    'pnpm-lock.yaml',
    '*.lock',
]


@dataclass
class StagedDiff:
    """What's staged for commit."""
    files: list[str] = field(default_factory=list)
    diff: str = ""

    @property
    def total_files(self) -> int:
        return len(self.files)


class GitError(Exception):
    """Raised when git operations fail."""
    pass


def _exclude_pathspecs(paths: list[str]) -> list[str]:
    return [f':(exclude){path}' for path in paths]


class GitAnalyzer:
    """Reads staged changes and creates commits."""

    def __init__(self):
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--show-toplevel')
        except GitError:
            raise GitError("The current directory must be a Git repository!")

    def stage_tracked(self) -> None:
        """Stage modifications and deletions of already tracked files."""
        self._run_git('add', '--update')

    def get_staged_diff(self, exclude: list[str] | None = None) -> StagedDiff | None:
        """Return the staged diff, or None when nothing (relevant) is staged."""
        pathspecs = _exclude_pathspecs(EXCLUDED_FROM_DIFF + (exclude or []))
        diff_cached = ['diff', '--cached', '--diff-algorithm=minimal']

        files = self._run_git(*diff_cached, '--name-only', '--', '.', *pathspecs)
        if not files.strip():
            return None

        diff = self._run_git(*diff_cached, '--', '.', *pathspecs)
        return StagedDiff(files=files.strip().split('\n'), diff=diff)

    def commit(self, message: str, extra_args: list[str] | None = None) -> None:
        self._run_git('commit', '-m', message, *(extra_args or []))
