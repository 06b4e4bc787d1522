"""
Tests for ReviewConfig loading.
"""

import dataclasses

import pytest

from skill_review_agent.review_config import ReviewConfig, load_review_config


def test_defaults():
    config = load_review_config({}, repo_root="/tmp/checkout")

    assert config.model_name == "gpt-4o"
    assert config.model_endpoint == "https://models.inference.ai.azure.com/chat/completions"
    assert config.max_reference_chars == 120000
    assert config.skill_path == "swift-concurrency/SKILL.md"
    assert config.references_dir == "swift-concurrency/references"
    assert config.repo_root == "/tmp/checkout"
    assert config.log_level == "INFO"


def test_environment_overrides():
    config = load_review_config({
        "SKILL_REVIEW_SKILL_DIR": "skills/pdf/",
        "SKILL_REVIEW_MODEL": "gpt-4o-mini",
        "SKILL_REVIEW_LOG_LEVEL": "debug",
    })

    assert config.skill_path == "skills/pdf/SKILL.md"
    assert config.model_name == "gpt-4o-mini"
    assert config.log_level == "DEBUG"


def test_explicit_arguments_win_over_environment():
    config = load_review_config({"SKILL_REVIEW_SKILL_DIR": "from-env"}, skill_dir="from-cli")

    assert config.skill_dir == "from-cli"


def test_config_is_immutable():
    config = ReviewConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.model_name = "other"
