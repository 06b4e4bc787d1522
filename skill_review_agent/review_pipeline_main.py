"""
Review Pipeline Main — Skill Review Agent

PURPOSE:
    Entry point run by .github/workflows/validate-skill.yml. Runs the six
    stages in order and turns the outcome into a process exit code:

        0  review posted, or the PR did not touch the skill (nothing to do)
        1  any fatal error after configuration (git, model, comment post)
        2  configuration error (missing token, payload or repository)

    Each stage returns a result dict. The first one with success=False ends
    the run; its error's exit_code decides the status. A degraded reference
    fetch in Stage 3 is not a failure and never changes the exit code.

USAGE:
    skill-review [--repo-root PATH] [--skill-dir DIR] [--base-ref REF] [--log-level LEVEL]
    python -m skill_review_agent ...
"""

import argparse
import os
import sys
from typing import Mapping, Optional

from skill_review_agent.review_config import ReviewConfig, load_review_config
from skill_review_agent.review_errors import SkillReviewError
from skill_review_agent.review_logger import get_logger, set_log_level
from skill_review_agent.stage_1_resolve_pr_context import resolve_pr_context
from skill_review_agent.stage_2_collect_skill_diff import collect_skill_diff
from skill_review_agent.stage_3_gather_review_context import gather_review_context
from skill_review_agent.stage_4_build_review_prompt import build_review_prompt
from skill_review_agent.stage_5_request_model_review import request_model_review
from skill_review_agent.stage_6_post_review_comment import post_review_comment

logger = get_logger(__name__)

EXIT_OK = 0


def run_review_pipeline(config: ReviewConfig, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run Resolve -> Diff -> Assemble -> Infer -> Publish and return an exit code.

    Args:
        config: The ReviewConfig built at process start
        environ: GitHub Actions environment; defaults to os.environ

    Returns:
        Process exit code (see module docstring).
    """
    if environ is None:
        environ = os.environ

    # -----------------------------------------------------------------------
    # STAGE 1: Resolve PR context (no network)
    # -----------------------------------------------------------------------

    resolved = resolve_pr_context(config, environ)
    if not resolved["success"]:
        return _fail("resolve", resolved["error"])
    pr_context = resolved["context"]

    # -----------------------------------------------------------------------
    # STAGE 2: Diff the skill paths. Empty diff means nothing to review.
    # -----------------------------------------------------------------------

    diff_result = collect_skill_diff(pr_context["base_ref"], config)
    if not diff_result["success"]:
        return _fail("diff", diff_result["error"])

    if not diff_result["diff_text"]:
        logger.info("No SKILL or reference changes found. Skipping validation.")
        return EXIT_OK

    # -----------------------------------------------------------------------
    # STAGES 3-4: Gather context and build the prompt
    # -----------------------------------------------------------------------

    review_context = gather_review_context(diff_result["changed_files"], config)
    prompt = build_review_prompt(pr_context, diff_result["diff_text"], review_context, config)

    # -----------------------------------------------------------------------
    # STAGE 5: Ask the model
    # -----------------------------------------------------------------------

    model_result = request_model_review(prompt, pr_context["token"], config)
    if not model_result["success"]:
        return _fail("model", model_result["error"])

    # -----------------------------------------------------------------------
    # STAGE 6: Publish the review
    # -----------------------------------------------------------------------

    comment_result = post_review_comment(model_result["review_text"], pr_context, config)
    if not comment_result["success"]:
        return _fail("publish", comment_result["error"])

    return EXIT_OK


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Review Agent Skill changes in a pull request and post the result as a PR comment."
    )
    parser.add_argument("--repo-root", help="Checkout to diff and read files from (default: cwd)")
    parser.add_argument("--skill-dir", help="Skill directory containing SKILL.md and references/")
    parser.add_argument("--base-ref", help="Base branch to diff against (overrides GITHUB_BASE_REF)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    environ = dict(os.environ)
    if args.base_ref:
        environ["GITHUB_BASE_REF"] = args.base_ref

    config = load_review_config(
        environ,
        repo_root=args.repo_root,
        skill_dir=args.skill_dir,
        log_level=args.log_level,
    )
    set_log_level(config.log_level)

    try:
        return run_review_pipeline(config, environ)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _fail(stage: str, error: SkillReviewError) -> int:
    logger.error(error.message, extra={"stage": stage, "error_kind": type(error).__name__})
    return error.exit_code


if __name__ == "__main__":
    sys.exit(main())
