"""
Stage 1: Resolve PR Context — Skill Review Agent

PURPOSE:
    This is the first stage of the review pipeline. It reads what GitHub
    Actions hands us (the event payload file and a handful of environment
    variables) and turns it into the PR context every later stage needs:
    base branch, PR number, repository owner/name, and the token.

    This stage acts as a cheap gatekeeper — if anything required is missing
    we fail here, before running git or spending any network calls.

CALLED BY:
    review_pipeline_main.py — passes the ReviewConfig and the environment
    mapping (os.environ in production, a plain dict in tests).

DEPENDS ON:
    - GITHUB_EVENT_PATH: path to the pull_request event JSON
    - GITHUB_REPOSITORY: "owner/repo"
    - GITHUB_TOKEN: bearer token for GitHub Models and the Issues API
    - GITHUB_BASE_REF (optional): overrides the payload's base branch

RETURNS:
    A result dict: 'success', 'context' (or None) and 'error' (or None).
"""

import json
import os
from typing import Mapping, Optional

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_errors import ConfigurationError
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)


def resolve_pr_context(config: ReviewConfig, environ: Mapping[str, str]) -> dict:
    """
    Resolve the PR context from the GitHub Actions environment.

    This is the ONLY public function in this file. It never touches the
    network; it only reads environ and the event payload file.

    Args:
        config: The ReviewConfig for this run (supplies the default base ref).
        environ: Environment mapping to read GitHub Actions variables from.

    Returns:
        dict with keys:
            - 'success' (bool)
            - 'context' (dict or None):
                - 'base_ref' (str)
                - 'pr_number' (int)
                - 'owner' (str)
                - 'repo' (str)
                - 'repository' (str): "owner/repo"
                - 'token' (str)
            - 'error' (ConfigurationError or None)
    """
    try:
        # The token is checked first: without it neither the model call nor
        # the comment post can happen, so nothing else is worth resolving.
        token = environ.get("GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_TOKEN is required to call the Models API.")

        payload = _load_event_payload(environ.get("GITHUB_EVENT_PATH"))
        base_ref = _resolve_base_ref(payload, environ, config.default_base_ref)
        pr_number = _resolve_pr_number(payload)
        owner, repo = _split_repository(environ.get("GITHUB_REPOSITORY"))
    except ConfigurationError as e:
        return {"success": False, "context": None, "error": e}

    logger.info(f"Resolved PR #{pr_number} on {owner}/{repo} against base '{base_ref}'")

    return {
        "success": True,
        "context": {
            "base_ref": base_ref,
            "pr_number": pr_number,
            "owner": owner,
            "repo": repo,
            "repository": f"{owner}/{repo}",
            "token": token,
        },
        "error": None,
    }


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _load_event_payload(event_path: Optional[str]) -> dict:
    if not event_path or not os.path.isfile(event_path):
        raise ConfigurationError("Missing GITHUB_EVENT_PATH for PR context.")

    try:
        with open(event_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read event payload at {event_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Event payload at {event_path} is not a JSON object.")
    return payload


def _pull_request_of(payload: dict) -> dict:
    pull_request = payload.get("pull_request")
    return pull_request if isinstance(pull_request, dict) else {}


def _resolve_base_ref(payload: dict, environ: Mapping[str, str], default_base_ref: str) -> str:
    """GITHUB_BASE_REF, else pull_request.base.ref, else the configured default."""
    override = environ.get("GITHUB_BASE_REF")
    if override:
        return override

    base = _pull_request_of(payload).get("base")
    if isinstance(base, dict) and base.get("ref"):
        return str(base["ref"])

    return default_base_ref


def _resolve_pr_number(payload: dict) -> int:
    number = _pull_request_of(payload).get("number")
    if not number:
        raise ConfigurationError("Pull request number not found in event payload.")
    try:
        return int(number)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Pull request number is not an integer: {number!r}") from e


def _split_repository(repository: Optional[str]) -> tuple:
    """Split "owner/repo" on the first separator."""
    if not repository or "/" not in repository:
        raise ConfigurationError("GITHUB_REPOSITORY is not set.")

    owner, _, repo = repository.partition("/")
    if not owner or not repo:
        raise ConfigurationError(f"GITHUB_REPOSITORY is malformed: {repository!r}")
    return owner, repo
