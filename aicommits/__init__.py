"""
AI Commits

AI-powered commit message generation from staged git changes.
"""

__version__ = "1.0.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py (type descriptions), config/settings.py (validation)
COMMIT_TYPES = {
    'docs': 'Documentation only changes',
    'style': 'Changes that do not affect the meaning of the code (white-space, formatting, missing semi-colons, etc)',
    'refactor': 'A code change that neither fixes a bug nor adds a feature',
    'perf': 'A code change that improves performance',
    'test': 'Adding missing tests or correcting existing tests',
    'build': 'Changes that affect the build system or external dependencies',
    'ci': 'Changes to our CI configuration files and scripts',
    'chore': "Other changes that don't modify src or test files",
    'revert': 'Reverts a previous commit',
    'feat': 'A new feature',
    'fix': 'A bug fix',
}

# Message formats accepted by the `type` setting ('' means plain messages)
COMMIT_FORMATS = ('', 'conventional')
