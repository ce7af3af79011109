"""Prompt Generation Package"""

from aicommits.prompts.builder import FORMAT_TEMPLATES, generate_prompt

__all__ = ["FORMAT_TEMPLATES", "generate_prompt"]
