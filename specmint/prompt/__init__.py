"""Prompt templates prefixed to design specifications before enhancement."""

from .lib import (
    PROMPT_TEMPLATES,
    SPEC_SEPARATOR,
    STANDARD_TEMPLATE,
    SYSTEM_PROMPT,
    PromptTemplate,
    compose_user_text,
    get_active_template,
    get_prompt_template,
    list_prompt_templates,
    load_prompt_template,
)

__all__ = [
    "PromptTemplate",
    "PROMPT_TEMPLATES",
    "SPEC_SEPARATOR",
    "STANDARD_TEMPLATE",
    "SYSTEM_PROMPT",
    "compose_user_text",
    "get_active_template",
    "get_prompt_template",
    "list_prompt_templates",
    "load_prompt_template",
]
