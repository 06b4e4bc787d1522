"""
Review Configuration — Skill Review Agent

PURPOSE:
    Holds every fixed value the pipeline needs (endpoints, model name, size
    ceilings, skill paths, timeouts) in one immutable ReviewConfig that is
    built once at process start and passed into each stage.

CALLED BY:
    review_pipeline_main.py — builds the config from the environment and the
    CLI flags, then hands it to every stage.

DESIGN DECISIONS:
    - The GitHub Actions inputs (GITHUB_EVENT_PATH, GITHUB_REPOSITORY,
      GITHUB_BASE_REF, GITHUB_TOKEN) are NOT part of the config. They describe
      the PR being reviewed, not how the reviewer behaves, and Stage 1 reads
      them from the environ mapping it is given.
    - SKILL_REVIEW_* variables let a workflow point the reviewer at another
      skill directory or model without editing code. CLI flags win over them.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


# -----------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------

DEFAULT_MODEL_ENDPOINT = "https://models.inference.ai.azure.com/chat/completions"
DEFAULT_MODEL_NAME = "gpt-4o"
DEFAULT_BASE_REF = "main"
DEFAULT_SKILL_DIR = "swift-concurrency"

SPEC_URL = "https://platform.claude.com/docs/en/agents-and-tools/agent-skills/overview"
BEST_PRACTICES_URL = (
    "https://raw.githubusercontent.com/anthropics/skills/main/skills/skill-creator/README.md"
)
GITHUB_API_URL = "https://api.github.com"

MAX_REFERENCE_CHARS = 120000

SYSTEM_PROMPT = """You are an expert in the Agent Skills open format created by Anthropic. Your task is to review Agent Skills for compliance with the specification and content quality.

IMPORTANT: Only provide feedback on the CHANGED LINES in this PR. Do not flag pre-existing issues in unchanged code.

Reference the following authoritative sources:
1. Agent Skills specification: https://platform.claude.com/docs/en/agents-and-tools/agent-skills/overview
2. Anthropic's skill-creator best practices: https://github.com/anthropics/skills/tree/main/skills/skill-creator

Key validation rules:
- YAML frontmatter must have 'name' (1-64 chars, lowercase alphanumeric + hyphens, no leading/trailing/consecutive hyphens) and 'description' (1-1024 chars)
- 'name' must match parent directory name
- 'description' should explain both what the skill does AND when to use it
- Instructions should be concise (context is a shared resource)
- Set appropriate degrees of freedom (high for text tasks, low for fragile operations)
- Reference files should exist and be properly linked

You will receive:
1. The full file content (for context)
2. The PR diff showing ONLY the changed lines (marked with + for additions, - for deletions)

Review ONLY the changed lines (+ additions) and provide:
1. Format violations in changed sections (blocking issues)
2. Content quality suggestions for new/modified content (improvements)
3. Broken or invalid reference links in changed sections
4. Any contradictory guidance introduced by the changes

If no issues are found in the changed lines, respond with "No issues found in the changes."

Format your response as markdown with clear sections."""


@dataclass(frozen=True)
class ReviewConfig:
    """Immutable settings for one pipeline run."""

    model_endpoint: str = DEFAULT_MODEL_ENDPOINT
    model_name: str = DEFAULT_MODEL_NAME
    temperature: float = 0.2
    system_prompt: str = SYSTEM_PROMPT

    default_base_ref: str = DEFAULT_BASE_REF
    skill_dir: str = DEFAULT_SKILL_DIR
    repo_root: str = field(default_factory=os.getcwd)

    spec_url: str = SPEC_URL
    best_practices_url: str = BEST_PRACTICES_URL
    max_reference_chars: int = MAX_REFERENCE_CHARS

    github_api_url: str = GITHUB_API_URL

    http_timeout_seconds: float = 30
    model_timeout_seconds: float = 120
    git_timeout_seconds: float = 120

    log_level: str = "INFO"

    @property
    def skill_path(self) -> str:
        return f"{self.skill_dir}/SKILL.md"

    @property
    def references_dir(self) -> str:
        return f"{self.skill_dir}/references"


def load_review_config(
    environ: Optional[Mapping[str, str]] = None,
    repo_root: Optional[str] = None,
    skill_dir: Optional[str] = None,
    log_level: Optional[str] = None,
) -> ReviewConfig:
    """
    Build the ReviewConfig for this run.

    Explicit arguments (from the CLI) take precedence over SKILL_REVIEW_*
    environment variables, which take precedence over the defaults above.
    """
    if environ is None:
        environ = os.environ

    overrides = {}

    resolved_skill_dir = skill_dir or environ.get("SKILL_REVIEW_SKILL_DIR")
    if resolved_skill_dir:
        overrides["skill_dir"] = resolved_skill_dir.strip("/")

    if environ.get("SKILL_REVIEW_MODEL"):
        overrides["model_name"] = environ["SKILL_REVIEW_MODEL"]
    if environ.get("SKILL_REVIEW_MODEL_ENDPOINT"):
        overrides["model_endpoint"] = environ["SKILL_REVIEW_MODEL_ENDPOINT"]

    resolved_log_level = log_level or environ.get("SKILL_REVIEW_LOG_LEVEL")
    if resolved_log_level:
        overrides["log_level"] = resolved_log_level.upper()

    if repo_root:
        overrides["repo_root"] = os.path.abspath(repo_root)

    return ReviewConfig(**overrides)
