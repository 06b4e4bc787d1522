import json
from unittest.mock import MagicMock

import pytest

from skill_review_agent.review_config import ReviewConfig

SKILL_DIR = "swift-concurrency"


def make_response(status_code=200, text="", json_data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def config(tmp_path):
    return ReviewConfig(repo_root=str(tmp_path), skill_dir=SKILL_DIR)


@pytest.fixture
def skill_tree(tmp_path):
    """A checkout with SKILL.md and one reference file."""
    references = tmp_path / SKILL_DIR / "references"
    references.mkdir(parents=True)
    (tmp_path / SKILL_DIR / "SKILL.md").write_text(
        "---\nname: swift-concurrency\ndescription: Swift concurrency guidance\n---\n# Swift Concurrency\n",
        encoding="utf-8",
    )
    (references / "actors.md").write_text("# Actors\nUse actors to protect state.\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def event_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps({"pull_request": {"number": 42, "base": {"ref": "develop"}}}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def environ(event_file):
    return {
        "GITHUB_EVENT_PATH": str(event_file),
        "GITHUB_REPOSITORY": "octo-org/agent-skills",
        "GITHUB_TOKEN": "ghs_test_token",
    }
