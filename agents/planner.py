"""Planner prompts — turn a feature request into a plugin plan."""

import os
from string import Template

_PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")


def _load_prompt(name):
    with open(os.path.join(_PROMPTS_DIR, f"{name}.txt"), encoding="utf-8") as f:
        return Template(f.read())


def build_simple_plan_prompt(features: str) -> str:
    """Plan for a single-file plugin: no project structure."""
    return _load_prompt("plan_simple").safe_substitute({"features": features})


def build_complex_plan_prompt(features: str) -> str:
    """Plan for a multi-file plugin, including user flows and project structure."""
    return _load_prompt("plan_complex").safe_substitute({"features": features})
