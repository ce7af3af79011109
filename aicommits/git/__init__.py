"""Git Operations Package"""

from aicommits.git.analyzer import EXCLUDED_FROM_DIFF, GitAnalyzer, GitError, StagedDiff

__all__ = [
    "EXCLUDED_FROM_DIFF",
    "GitAnalyzer",
    "GitError",
    "StagedDiff",
]
