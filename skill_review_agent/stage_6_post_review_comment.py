"""
Stage 6: Post Review Comment — Skill Review Agent

PURPOSE:
    This is the final stage of the review pipeline. It posts the model's
    review from Stage 5 as a new comment on the pull request.

CALLED BY:
    review_pipeline_main.py — passes the review text and the PR context.

DEPENDS ON:
    - GitHub API (via requests library) for the Issues comments endpoint
      (PR conversation comments are issue comments)
    - The GITHUB_TOKEN automatically provided by GitHub Actions
      (needs `pull-requests: write`)

DESIGN DECISIONS:
    - Every run posts a NEW comment. We do not look for or edit a previous
      bot comment, so re-running a workflow on the same PR adds another one.

COST:
    $0 — One API call with the free GITHUB_TOKEN.
"""

from typing import Optional

import requests

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_errors import CommentPostError, RequestTimeoutError, SkillReviewError
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)


def post_review_comment(review_text: str, pr_context: dict, config: ReviewConfig) -> dict:
    """
    Post the review as a PR comment.

    Args:
        review_text: Output from Stage 5 — the model's Markdown review
        pr_context: Output from Stage 1 — owner, repo, pr_number and token
        config: The ReviewConfig (GitHub API base URL, HTTP timeout)

    Returns:
        dict with keys:
            - 'success' (bool)
            - 'comment_url' (str or None): html_url of the new comment
            - 'error' (CommentPostError, RequestTimeoutError or None)
    """
    gh = GitHubAPI(
        pr_context["owner"],
        pr_context["repo"],
        pr_context["token"],
        api_url=config.github_api_url,
        timeout_seconds=config.http_timeout_seconds,
    )

    try:
        comment = gh.post_comment(pr_context["pr_number"], review_text)
    except SkillReviewError as e:
        return {"success": False, "comment_url": None, "error": e}

    comment_url = comment.get("html_url") if isinstance(comment, dict) else None
    logger.info(f"Posted review comment on PR #{pr_context['pr_number']}: {comment_url}")

    return {"success": True, "comment_url": comment_url, "error": None}


# ---------------------------------------------------------------------------
# GITHUB API HELPER CLASS
# ---------------------------------------------------------------------------
# Wraps the GitHub REST API call this stage needs. Uses the GITHUB_TOKEN
# which is auto-generated by GitHub Actions.
# ---------------------------------------------------------------------------


class GitHubAPI:
    """Thin wrapper around the GitHub REST API for posting PR comments."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 30,
    ):
        self.owner = owner
        self.repo = repo
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}"
        self.timeout_seconds = timeout_seconds
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def post_comment(self, issue_number: int, body: str) -> Optional[dict]:
        """Post a comment on a GitHub Issue or Pull Request."""
        url = f"{self.base_url}/issues/{issue_number}/comments"
        try:
            resp = requests.post(url, headers=self.headers, json={"body": body}, timeout=self.timeout_seconds)
        except requests.exceptions.Timeout:
            raise RequestTimeoutError(url, self.timeout_seconds)
        except requests.exceptions.RequestException as e:
            raise CommentPostError(None, str(e))

        if not 200 <= resp.status_code < 300:
            raise CommentPostError(resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError:
            return None
