"""
Tests for Stage 3: Gather Review Context.
"""

from dataclasses import replace
from unittest.mock import patch

import requests

from conftest import make_response
from skill_review_agent.review_errors import ExternalFetchDegraded
from skill_review_agent.stage_3_gather_review_context import gather_review_context, truncate_if_needed

GET_PATH = "skill_review_agent.stage_3_gather_review_context.requests.get"


def _fetch_ok(url, timeout):
    return make_response(200, text=f"content of {url}")


def test_truncate_if_needed_keeps_short_content():
    assert truncate_if_needed("Agent Skills spec", "abc", 3) == "abc"


def test_truncate_if_needed_law():
    original = "x" * 50 + "y" * 25
    notice = "\n\n[Truncated Agent Skills spec to 50 characters due to size limits.]"

    truncated = truncate_if_needed("Agent Skills spec", original, 50)

    assert len(truncated) == 50 + len(notice)
    assert truncated[:50] == original[:50]
    assert truncated.endswith(notice)


def test_reads_skill_and_changed_reference_files(config, skill_tree):
    changed = [
        "swift-concurrency/SKILL.md",
        "swift-concurrency/references/actors.md",
        "swift-concurrency/references/removed.md",
    ]

    with patch(GET_PATH, side_effect=_fetch_ok):
        result = gather_review_context(changed, config)

    assert result["success"] is True
    assert result["skill_content"].startswith("---\nname: swift-concurrency")
    assert result["reference_files"] == [
        {"path": "swift-concurrency/references/actors.md", "content": "# Actors\nUse actors to protect state.\n"},
        {"path": "swift-concurrency/references/removed.md", "content": None},
    ]
    assert result["spec_text"] == f"content of {config.spec_url}"
    assert result["best_practices_text"] == f"content of {config.best_practices_url}"
    assert result["degraded"] == []


def test_missing_skill_file_is_none(config):
    with patch(GET_PATH, side_effect=_fetch_ok):
        result = gather_review_context([], config)

    assert result["skill_content"] is None
    assert result["reference_files"] == []


def test_fetches_are_truncated_to_ceiling(config, skill_tree):
    small_config = replace(config, max_reference_chars=10)

    with patch(GET_PATH, return_value=make_response(200, text="a" * 40)):
        result = gather_review_context([], small_config)

    assert result["spec_text"] == "a" * 10 + "\n\n[Truncated Agent Skills spec to 10 characters due to size limits.]"
    assert result["best_practices_text"].startswith("a" * 10 + "\n\n[Truncated skill-creator best practices")


def test_spec_404_degrades_without_failing(config, skill_tree):
    def fetch(url, timeout):
        if url == config.spec_url:
            return make_response(404, text="Not Found")
        return make_response(200, text="best practices")

    with patch(GET_PATH, side_effect=fetch):
        result = gather_review_context([], config)

    assert result["success"] is True
    assert result["spec_text"].startswith("[Unable to fetch Agent Skills specification:")
    assert "404" in result["spec_text"]
    assert result["best_practices_text"] == "best practices"
    assert len(result["degraded"]) == 1
    assert isinstance(result["degraded"][0], ExternalFetchDegraded)


def test_network_errors_degrade_both_fetches(config, skill_tree):
    with patch(GET_PATH, side_effect=requests.exceptions.ConnectionError("connection refused")):
        result = gather_review_context([], config)

    assert result["success"] is True
    assert "connection refused" in result["spec_text"]
    assert result["best_practices_text"].startswith("[Unable to fetch skill-creator best practices:")
    assert len(result["degraded"]) == 2


def test_fetch_timeout_degrades(config, skill_tree):
    with patch(GET_PATH, side_effect=requests.exceptions.Timeout()):
        result = gather_review_context([], config)

    assert "timed out" in result["spec_text"]
    assert "timed out" in result["best_practices_text"]
