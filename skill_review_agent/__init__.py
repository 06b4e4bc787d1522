# Skill Review Agent
#
# This package contains the pipeline that reviews pull requests touching an
# Agent Skill (SKILL.md plus its references/ directory). Each stage is in its
# own file following the one-function-per-file architecture pattern.
#
# The pipeline is orchestrated by review_pipeline_main.py and runs inside a
# GitHub Actions Ubuntu runner. It reads the GitHub event payload, runs
# `git diff`, calls external APIs (reference docs, GitHub Models) and writes
# back to GitHub (one PR comment).
#
# Stage flow:
#   1. Resolve PR Context -> 2. Collect Skill Diff -> 3. Gather Review Context
#   -> 4. Build Review Prompt -> 5. Request Model Review
#   -> 6. Post Review Comment

__version__ = "0.1.0"
