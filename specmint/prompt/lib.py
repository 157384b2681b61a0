"""Prompt templates for specification enhancement.

Templates are static configuration: one is active per deployment and is
prefixed to the caller's specification text. Selection happens once, from
`SPECMINT_PROMPT_FILE` (a custom file) or `SPECMINT_PROMPT_TEMPLATE` (a
registered name).
"""

from dataclasses import dataclass
from pathlib import Path

from specmint.config import EnvVar, get_environment

# Separator between the template and the caller's specification text.
SPEC_SEPARATOR = "\n\n"

SYSTEM_PROMPT = (
    "You are an expert UI/UX analyst and frontend developer specializing in "
    "design-to-code workflows. You provide detailed, actionable specifications "
    "for implementing designs in React, Vue, or HTML/CSS."
)

STANDARD_TEMPLATE = """You are an expert UI/UX analyst and frontend developer. You receive a design specification package containing:

1. **Spec.md** - Technical specifications (dimensions, colors, typography, layout)
2. **Spec.json** - Structured data
3. **Screenshot** - Visual representation of the design

Your task is to analyze this package and generate an ENHANCED specification that:

1. **Visual Analysis**: Describe what you see in the screenshot - UI patterns, visual hierarchy, user flow
2. **Semantic Structure**: Identify semantic meaning of elements (not just "Frame 1" but "Hero Section with CTA")
3. **Component Recommendations**: Suggest appropriate React/Vue components or HTML semantic tags
4. **Implementation Guide**: Provide specific code recommendations (layout, styling, behavior)
5. **Accessibility**: Add ARIA attributes, keyboard navigation, screen reader considerations
6. **Responsive Design**: Suggest breakpoints and mobile adaptations
7. **UX Improvements**: Identify potential UX issues and suggest improvements

**Output Format:**
Generate a markdown document with these sections:
- # Enhanced Design Specification
- ## Visual Analysis
- ## Semantic Component Structure
- ## Implementation Recommendations
- ## Code Scaffolding Examples
- ## Accessibility Guidelines
- ## Responsive Considerations
- ## UX/UI Insights

Be specific, actionable, and code-focused. Reference exact values from the technical specs.

---

**TECHNICAL SPECIFICATION:**
"""


@dataclass(frozen=True)
class PromptTemplate:
    """A named prompt template.

    Attributes:
        name: Registry key or file stem.
        text: Template body prefixed to the specification text.
        description: Human-readable summary for listings.
    """

    name: str
    text: str
    description: str = ""

    def compose(self, spec_text: str) -> str:
        """Prefix the template to a specification."""
        return compose_user_text(self.text, spec_text)


PROMPT_TEMPLATES: dict[str, PromptTemplate] = {
    "standard": PromptTemplate(
        name="standard",
        text=STANDARD_TEMPLATE,
        description="Full analysis: visuals, semantics, code, a11y, responsive, UX",
    ),
}


def compose_user_text(prompt: str, spec_text: str) -> str:
    """Concatenate a template and the caller's specification text."""
    return f"{prompt}{SPEC_SEPARATOR}{spec_text}"


def get_prompt_template(name: str) -> PromptTemplate:
    """Look up a registered template by name.

    Raises:
        ValueError: If no template has that name.
    """
    template = PROMPT_TEMPLATES.get(name.strip().lower())
    if template is None:
        raise ValueError(
            f"Unknown prompt template '{name}'. Available: {sorted(PROMPT_TEMPLATES)}"
        )
    return template


def load_prompt_template(path: Path | str) -> PromptTemplate:
    """Read a template from a UTF-8 text file.

    Raises:
        ValueError: If the file is empty.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        raise ValueError(f"Prompt template file is empty: {path}")
    return PromptTemplate(name=path.stem, text=text, description=f"Loaded from {path}")


def get_active_template(
    name: str | None = None,
    path: Path | str | None = None,
) -> PromptTemplate:
    """Resolve the deployment's active template.

    Resolution: path > SPECMINT_PROMPT_FILE > name > SPECMINT_PROMPT_TEMPLATE.
    """
    template_path = get_environment(EnvVar.SPECMINT_PROMPT_FILE, override=path)
    if template_path:
        return load_prompt_template(template_path)
    return get_prompt_template(get_environment(EnvVar.SPECMINT_PROMPT_TEMPLATE, override=name))


def list_prompt_templates() -> list[PromptTemplate]:
    """List registered templates sorted by name."""
    return [PROMPT_TEMPLATES[key] for key in sorted(PROMPT_TEMPLATES)]


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
