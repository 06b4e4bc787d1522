"""
Stage 3: Gather Review Context — Skill Review Agent

PURPOSE:
    Collect everything the reviewer needs besides the diff itself:

    1. The full current SKILL.md (so the model sees changed lines in context)
    2. The current content of every changed file under references/
    3. The Agent Skills specification (fetched from the docs site)
    4. Anthropic's skill-creator best practices (fetched from GitHub raw)

CALLED BY:
    review_pipeline_main.py — passes the changed file list from Stage 2.

EXTERNAL APIS USED:
    - platform.claude.com docs page for the Agent Skills spec (no key)
    - raw.githubusercontent.com for the skill-creator README (no key)

DESIGN DECISIONS:
    - We handle fetch failures gracefully — a failed reference fetch should
      NOT block the review. The section is replaced with a bracketed note
      carrying the reason and the model reviews with less context.
    - Both reference texts are capped at max_reference_chars (120K by
      default) with a visible truncation note, to keep the prompt inside the
      model's context window.
    - A missing file is represented as None rather than skipped, so the
      prompt can say explicitly that it was deleted in this PR.
"""

import os
from typing import List, Optional

import requests

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_errors import ExternalFetchDegraded
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)

SPEC_LABEL = "Agent Skills spec"
SPEC_UNAVAILABLE_LABEL = "Agent Skills specification"
BEST_PRACTICES_LABEL = "skill-creator best practices"


def gather_review_context(changed_files: List[str], config: ReviewConfig) -> dict:
    """
    Read local skill files and fetch the two external reference documents.

    This is the ONLY public stage function in this file. Fetch failures are
    absorbed here; only local read errors other than "file missing" escape.

    Args:
        changed_files: Paths from Stage 2, relative to the repo root.
        config: The ReviewConfig (paths, URLs, size ceiling, HTTP timeout).

    Returns:
        dict with keys:
            - 'success' (bool): always True; degraded fetches do not fail the stage
            - 'skill_content' (str or None): None if SKILL.md is missing
            - 'reference_files' (list[dict]): each with
                - 'path' (str)
                - 'content' (str or None): None if missing/deleted
            - 'spec_text' (str)
            - 'best_practices_text' (str)
            - 'degraded' (list[ExternalFetchDegraded]): fetches that failed
            - 'error' (None)
    """
    skill_content = _read_file_if_exists(config.repo_root, config.skill_path)

    references_prefix = config.references_dir + "/"
    reference_files = [
        {"path": path, "content": _read_file_if_exists(config.repo_root, path)}
        for path in changed_files
        if path.startswith(references_prefix)
    ]

    degraded = []

    # -----------------------------------------------------------------------
    # Fetch the reference documents one at a time. Each failure is recorded
    # and turned into an inline note; the other fetch still runs.
    # -----------------------------------------------------------------------

    try:
        spec_text = truncate_if_needed(
            SPEC_LABEL,
            _fetch_text(config.spec_url, SPEC_UNAVAILABLE_LABEL, config.http_timeout_seconds),
            config.max_reference_chars,
        )
    except ExternalFetchDegraded as e:
        logger.warning(e.message)
        degraded.append(e)
        spec_text = f"[{e.message}]"

    try:
        best_practices_text = truncate_if_needed(
            BEST_PRACTICES_LABEL,
            _fetch_text(config.best_practices_url, BEST_PRACTICES_LABEL, config.http_timeout_seconds),
            config.max_reference_chars,
        )
    except ExternalFetchDegraded as e:
        logger.warning(e.message)
        degraded.append(e)
        best_practices_text = f"[{e.message}]"

    logger.info(
        f"Gathered context: SKILL.md {'present' if skill_content is not None else 'missing'}, "
        f"{len(reference_files)} reference file(s), {len(degraded)} degraded fetch(es)"
    )

    return {
        "success": True,
        "skill_content": skill_content,
        "reference_files": reference_files,
        "spec_text": spec_text,
        "best_practices_text": best_practices_text,
        "degraded": degraded,
        "error": None,
    }


def truncate_if_needed(label: str, content: str, max_chars: int) -> str:
    """
    Cap content at max_chars and append a truncation note.

    Content at or under the limit is returned unchanged.
    """
    if len(content) <= max_chars:
        return content
    return (
        f"{content[:max_chars]}\n\n"
        f"[Truncated {label} to {max_chars} characters due to size limits.]"
    )


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _read_file_if_exists(repo_root: str, relative_path: str) -> Optional[str]:
    full_path = os.path.join(repo_root, relative_path)
    if not os.path.isfile(full_path):
        return None
    with open(full_path, "r", encoding="utf-8") as f:
        return f.read()


def _fetch_text(url: str, label: str, timeout_seconds: float) -> str:
    """GET a URL as text, raising ExternalFetchDegraded on any failure."""
    try:
        resp = requests.get(url, timeout=timeout_seconds)
    except requests.exceptions.Timeout:
        raise ExternalFetchDegraded(
            label, f"Request to {url} timed out after {timeout_seconds} seconds"
        )
    except requests.exceptions.RequestException as e:
        raise ExternalFetchDegraded(label, f"Failed to fetch {url}: {e}")

    if not 200 <= resp.status_code < 300:
        raise ExternalFetchDegraded(label, f"Failed to fetch {url}: {resp.status_code}")

    return resp.text
