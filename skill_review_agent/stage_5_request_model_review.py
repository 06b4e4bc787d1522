"""
Stage 5: Request Model Review — Skill Review Agent

PURPOSE:
    Send the assembled prompt to a hosted chat-completion endpoint (GitHub
    Models by default) and return the review text. This single API call is
    the whole "review": the model reads the spec, the best practices, the
    skill and the diff, and answers in Markdown.

CALLED BY:
    review_pipeline_main.py — passes the prompt string from Stage 4.

EXTERNAL APIS USED:
    - GitHub Models chat completions (OpenAI-compatible request/response shape)
    - Authenticated with the workflow's GITHUB_TOKEN (needs `models: read`)

DESIGN DECISIONS:
    - We set temperature=0.2 for consistent, deterministic-leaning reviews.
    - We do NOT retry. A failed or empty response fails the run; re-running
      the workflow is cheap and the PR simply gets no comment this time.
    - The error carries the status code and the response body verbatim so
      the Actions log shows exactly what the endpoint said.
"""

import requests

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_errors import (
    ConfigurationError,
    EmptyResponseError,
    ModelAPIError,
    RequestTimeoutError,
    SkillReviewError,
)
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)


def request_model_review(prompt: str, token: str, config: ReviewConfig) -> dict:
    """
    Ask the model to review the prompt.

    This is the ONLY public function in this file.

    Args:
        prompt: The complete user prompt from Stage 4
        token: Bearer token for the model endpoint
        config: The ReviewConfig (endpoint, model name, system prompt,
                temperature, timeout)

    Returns:
        dict with keys:
            - 'success' (bool)
            - 'review_text' (str): stripped message content, "" on failure
            - 'model_used' (str)
            - 'error' (SkillReviewError or None)
    """
    try:
        review_text = _call_model(prompt, token, config)
    except SkillReviewError as e:
        return {
            "success": False,
            "review_text": "",
            "model_used": config.model_name,
            "error": e,
        }

    logger.info(f"Model {config.model_name} returned {len(review_text)} characters")

    return {
        "success": True,
        "review_text": review_text,
        "model_used": config.model_name,
        "error": None,
    }


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _call_model(prompt: str, token: str, config: ReviewConfig) -> str:
    if not token:
        raise ConfigurationError("GITHUB_TOKEN is required to call the Models API.")

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }
    body = {
        "model": config.model_name,
        "messages": [
            {"role": "system", "content": config.system_prompt},
            {"role": "user", "content": prompt},
        ],
        "temperature": config.temperature,
    }

    try:
        resp = requests.post(
            config.model_endpoint,
            headers=headers,
            json=body,
            timeout=config.model_timeout_seconds,
        )
    except requests.exceptions.Timeout:
        raise RequestTimeoutError(config.model_endpoint, config.model_timeout_seconds)
    except requests.exceptions.RequestException as e:
        raise ModelAPIError(None, str(e))

    if not 200 <= resp.status_code < 300:
        raise ModelAPIError(resp.status_code, resp.text)

    try:
        payload = resp.json()
    except ValueError:
        raise ModelAPIError(resp.status_code, resp.text)

    return _extract_message_content(payload)


def _extract_message_content(payload) -> str:
    """Read choices[0].message.content; anything missing or blank is an empty response."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise EmptyResponseError()

    if not isinstance(content, str) or not content.strip():
        raise EmptyResponseError()
    return content.strip()
