"""
Stage 2: Collect Skill Diff — Skill Review Agent

PURPOSE:
    Run `git diff` between the PR's base branch and HEAD, restricted to the
    skill document and its references/ directory, and work out which files
    changed. The reviewer only comments on these changed lines, so the diff
    is requested with zero lines of context.

CALLED BY:
    review_pipeline_main.py — passes the base ref from Stage 1.

DEPENDS ON:
    - The `git` CLI being available in the runner (GitHub Actions has it by default)
    - A checkout with enough history to reach origin/<base_ref>
      (actions/checkout with fetch-depth: 0)

DESIGN DECISIONS:
    - An empty diff is NOT an error. It means the PR did not touch the skill,
      and the driver exits 0 without calling any API.
    - Deleted files show up as `+++ /dev/null`. We take their path from the
      `--- a/` header instead so Stage 3 can mark them as deleted rather than
      dropping them.
    - A pure rename has no `---`/`+++` headers at all, only `rename from`/
      `rename to` lines, so the new path is read from `rename to`.
    - git runs with core.quotePath=false so non-ASCII paths appear verbatim
      in the headers instead of as quoted octal escapes.
"""

import subprocess
from typing import List

from skill_review_agent.review_config import ReviewConfig
from skill_review_agent.review_errors import DiffCommandError, RequestTimeoutError
from skill_review_agent.review_logger import get_logger

logger = get_logger(__name__)

NEW_FILE_PREFIX = "+++ b/"
OLD_FILE_PREFIX = "--- a/"
DEV_NULL_MARKER = "+++ /dev/null"
RENAME_TO_PREFIX = "rename to "


def collect_skill_diff(base_ref: str, config: ReviewConfig) -> dict:
    """
    Compute the zero-context diff of the skill paths against origin/<base_ref>.

    Args:
        base_ref: Base branch name resolved in Stage 1 (e.g. "main").
        config: The ReviewConfig (skill paths, repo root, git timeout).

    Returns:
        dict with keys:
            - 'success' (bool)
            - 'diff_text' (str): stripped diff output, "" when nothing changed
            - 'changed_files' (list[str]): paths parsed from the diff headers
            - 'error' (DiffCommandError, RequestTimeoutError or None)
    """
    command = [
        "git", "-c", "core.quotePath=false",
        "diff", f"origin/{base_ref}...HEAD", "--unified=0", "--",
        config.skill_path, config.references_dir,
    ]

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=config.git_timeout_seconds,
            cwd=config.repo_root,
        )
    except subprocess.TimeoutExpired:
        return {
            "success": False,
            "diff_text": "",
            "changed_files": [],
            "error": RequestTimeoutError("git diff", config.git_timeout_seconds),
        }

    if result.returncode != 0:
        return {
            "success": False,
            "diff_text": "",
            "changed_files": [],
            "error": DiffCommandError(command, result.stderr),
        }

    diff_text = result.stdout.strip()
    changed_files = parse_changed_files(diff_text)

    logger.info(f"Diff against origin/{base_ref} touches {len(changed_files)} file(s)")

    return {
        "success": True,
        "diff_text": diff_text,
        "changed_files": changed_files,
        "error": None,
    }


def parse_changed_files(diff_text: str) -> List[str]:
    """
    Extract changed file paths from unified diff headers.

    Reads `+++ b/` headers, the `--- a/` header of deletions and the
    `rename to` line of renames. Order follows the diff; duplicates are dropped.
    """
    files = {}
    previous_old_path = None

    for line in diff_text.split("\n"):
        if line.startswith(OLD_FILE_PREFIX):
            previous_old_path = line[len(OLD_FILE_PREFIX):].strip()
        elif line.startswith(NEW_FILE_PREFIX):
            files[line[len(NEW_FILE_PREFIX):].strip()] = None
            previous_old_path = None
        elif line.startswith(DEV_NULL_MARKER):
            if previous_old_path:
                files[previous_old_path] = None
            previous_old_path = None
        elif line.startswith(RENAME_TO_PREFIX):
            files[line[len(RENAME_TO_PREFIX):].strip()] = None

    return list(files)
