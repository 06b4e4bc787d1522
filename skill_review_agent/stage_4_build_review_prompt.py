"""
Stage 4: Build Review Prompt — Skill Review Agent

PURPOSE:
    Assemble the user message sent to the model in Stage 5. The prompt
    includes, in this order:

    1. Repository and base ref lines
    2. The Agent Skills specification text
    3. The skill-creator best practices text
    4. The full current SKILL.md
    5. The changed reference files (omitted when there are none)
    6. The PR diff

CALLED BY:
    review_pipeline_main.py — passes outputs from Stages 1-3.

DESIGN DECISIONS:
    - ReviewPromptBuilder keeps named sections in the order they are added
      and drops any section whose body is empty, so there is never a header
      with nothing under it.
    - The system instruction is NOT part of this prompt. It lives in
      ReviewConfig.system_prompt and Stage 5 sends it as its own message.

COST:
    $0 — This stage is pure Python string assembly. No API calls.
"""

from typing import List, Optional

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)

SKILL_MISSING_PLACEHOLDER = "[SKILL.md missing]"
REFERENCE_MISSING_PLACEHOLDER = "[File missing or deleted in this PR]"


class ReviewPromptBuilder:
    """Ordered list of named prompt sections, rendered with blank lines between them."""

    def __init__(self):
        self._sections = []

    def add_section(self, name: str, body: str, heading: Optional[str] = None) -> "ReviewPromptBuilder":
        """
        Append a section. Sections with an empty body are skipped at render time.

        `heading` is rendered on its own line above the body when given.
        """
        self._sections.append((name, heading, body or ""))
        return self

    def section_names(self) -> List[str]:
        """Names of the sections that will appear in the rendered prompt."""
        return [name for name, _, body in self._sections if body]

    def build(self) -> str:
        rendered = []
        for _, heading, body in self._sections:
            if not body:
                continue
            rendered.append(f"{heading}\n{body}" if heading else body)
        return "\n\n".join(rendered)


def build_review_prompt(
    pr_context: dict,
    diff_text: str,
    review_context: dict,
    config: ReviewConfig,
) -> str:
    """
    Assemble the complete user prompt for the model.

    This is the ONLY public stage function in this file.

    Args:
        pr_context: Output from Stage 1 — 'repository' and 'base_ref' are used
        diff_text: Output from Stage 2 — the zero-context diff
        review_context: Output from Stage 3 — skill content, reference files,
                        spec and best-practices text
        config: The ReviewConfig (for the SKILL.md path shown in the prompt)

    Returns:
        The prompt string ready to send to the model.
    """
    skill_content = review_context.get("skill_content")
    skill_body = skill_content if skill_content is not None else SKILL_MISSING_PLACEHOLDER

    builder = ReviewPromptBuilder()
    builder.add_section("repository", f"Repository: {pr_context['repository']}")
    builder.add_section("base_ref", f"Base ref: {pr_context['base_ref']}")
    builder.add_section(
        "spec",
        review_context.get("spec_text", ""),
        heading="## Agent Skills specification (full text)",
    )
    builder.add_section(
        "best_practices",
        review_context.get("best_practices_text", ""),
        heading="## Skill-creator best practices (full text)",
    )
    builder.add_section(
        "skill",
        f"File: {config.skill_path}\n{skill_body}",
        heading="## Full file content (for context)",
    )
    builder.add_section(
        "reference_files",
        _format_reference_files(review_context.get("reference_files", [])),
        heading="## Reference files (for context)",
    )
    builder.add_section(
        "diff",
        diff_text,
        heading="## PR diff (only changed lines)",
    )

    prompt = builder.build()
    logger.debug(f"Built review prompt ({len(prompt)} chars) with sections: {', '.join(builder.section_names())}")
    return prompt


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _format_reference_files(reference_files: list) -> str:
    entries = []
    for entry in reference_files:
        content = entry.get("content")
        payload = content if content is not None else REFERENCE_MISSING_PLACEHOLDER
        entries.append(f"File: {entry['path']}\n{payload}")
    return "\n\n".join(entries)
