"""
Tests for Stage 5: Request Model Review.
"""

from unittest.mock import patch

import pytest
import requests

from conftest import make_response
from skill_review_agent.review_errors import (
    ConfigurationError,
    EmptyResponseError,
    ModelAPIError,
    RequestTimeoutError,
)
from skill_review_agent.stage_5_request_model_review import request_model_review

POST_PATH = "skill_review_agent.stage_5_request_model_review.requests.post"


def test_sends_system_and_user_messages(config):
    payload = {"choices": [{"message": {"content": "  No issues found in the changes.\n"}}]}

    with patch(POST_PATH, return_value=make_response(200, json_data=payload)) as mock_post:
        result = request_model_review("PROMPT", "ghs_test_token", config)

    assert result["success"] is True
    assert result["review_text"] == "No issues found in the changes."
    assert result["model_used"] == "gpt-4o"

    args, kwargs = mock_post.call_args
    assert args[0] == config.model_endpoint
    assert kwargs["headers"]["Authorization"] == "Bearer ghs_test_token"
    assert kwargs["timeout"] == config.model_timeout_seconds
    assert kwargs["json"] == {
        "model": "gpt-4o",
        "messages": [
            {"role": "system", "content": config.system_prompt},
            {"role": "user", "content": "PROMPT"},
        ],
        "temperature": 0.2,
    }


def test_missing_token_fails_before_request(config):
    with patch(POST_PATH) as mock_post:
        result = request_model_review("PROMPT", "", config)

    assert isinstance(result["error"], ConfigurationError)
    mock_post.assert_not_called()


def test_non_success_status_carries_status_and_body(config):
    with patch(POST_PATH, return_value=make_response(429, text='{"error": "rate limited"}')):
        result = request_model_review("PROMPT", "ghs_test_token", config)

    error = result["error"]
    assert result["success"] is False
    assert isinstance(error, ModelAPIError)
    assert error.status_code == 429
    assert error.body == '{"error": "rate limited"}'
    assert error.message == 'Model API failed (429): {"error": "rate limited"}'


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": [{"message": {"content": ""}}]},
        {"choices": [{"message": {"content": "   "}}]},
        {"choices": [{"message": {}}]},
        {"choices": []},
        {},
    ],
)
def test_empty_content_is_empty_response_error(config, payload):
    with patch(POST_PATH, return_value=make_response(200, json_data=payload)):
        result = request_model_review("PROMPT", "ghs_test_token", config)

    assert isinstance(result["error"], EmptyResponseError)


def test_non_json_body_is_model_api_error(config):
    with patch(POST_PATH, return_value=make_response(200, text="<html>gateway</html>")):
        result = request_model_review("PROMPT", "ghs_test_token", config)

    assert isinstance(result["error"], ModelAPIError)
    assert result["error"].body == "<html>gateway</html>"


def test_timeout_is_distinct_error(config):
    with patch(POST_PATH, side_effect=requests.exceptions.Timeout()):
        result = request_model_review("PROMPT", "ghs_test_token", config)

    assert isinstance(result["error"], RequestTimeoutError)
    assert result["error"].timeout_seconds == config.model_timeout_seconds
