"""Prompt Builder - Construct the system prompt for commit message generation."""

import json

from aicommits import COMMIT_TYPES

# Lookup table: commit format -> output template the model must follow
FORMAT_TEMPLATES = {
    '': '<commit message>',
    'conventional': '<type>(<optional scope>): <commit message>',
}


def _build_type_section(commit_type: str) -> str:
    if commit_type != 'conventional':
        return ''
    return (
        "Choose a type from the type-to-description JSON below that best describes the git diff:\n"
        + json.dumps(COMMIT_TYPES, indent=2)
    )


def _build_format_section(commit_type: str) -> str:
    return f"The output response must be in format:\n{FORMAT_TEMPLATES[commit_type]}"


def generate_prompt(locale: str, max_length: int, commit_type: str) -> str:
    """Build the system instruction sent ahead of the diff.

    Pure function of its arguments; empty sections are dropped.
    """
    sections = [
        'Generate a concise git commit message written in present tense for the following code diff with the given specifications below:',
        f'Message language: {locale}',
        f'Commit message must be a maximum of {max_length} characters.',
        'Exclude anything unnecessary such as translation. Your entire response will be passed directly into git commit.',
        _build_type_section(commit_type),
        _build_format_section(commit_type),
    ]
    return '\n'.join(section for section in sections if section)
