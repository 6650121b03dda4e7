"""Reviewer prompt — checks the finished codebase for critical and security issues."""

import os
from string import Template

_PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")


def _load_prompt(name):
    with open(os.path.join(_PROMPTS_DIR, f"{name}.txt"), encoding="utf-8") as f:
        return Template(f.read())


def build_review_prompt(plan_text: str, context: str) -> str:
    """Build the review instruction from the plan and the full codebase digest.

    The checklist is fixed: syntax errors, missing nonce/authorization checks,
    unsanitized input, unescaped output, broken references and unprepared
    database queries. The model answers with
    ``{"review_summary": ..., "suggestions": [...]}``.
    """
    return _load_prompt("review").safe_substitute({"plan": plan_text, "context": context})
