"""Generator prompts — plugin code for simple mode, one file at a time for complex mode."""

import os
from string import Template

_PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")


def _load_prompt(name):
    with open(os.path.join(_PROMPTS_DIR, f"{name}.txt"), encoding="utf-8") as f:
        return Template(f.read())


PLUGIN_AUTHOR = "WP-Autoplugin"
PLUGIN_AUTHOR_URI = "https://wp-autoplugin.com"

MAIN_FILE_RULE = "This is the main plugin file, so include the WordPress plugin header."
SUPPORTING_FILE_RULE = "This is a supporting file, so do not include the WordPress plugin header."


def _author_vars():
    return {"author": PLUGIN_AUTHOR, "author_uri": PLUGIN_AUTHOR_URI}


def build_plugin_code_prompt(plan_text: str) -> str:
    """Single self-contained PHP file implementing the whole plan."""
    return _load_prompt("plugin_code").safe_substitute({"plan": plan_text, **_author_vars()})


def build_php_file_prompt(file_path, file_description, plan_text, context, is_main_file) -> str:
    return _load_prompt("file_php").safe_substitute({
        "file_path": file_path,
        "file_description": file_description,
        "plan": plan_text,
        "context": context,
        "header_rule": MAIN_FILE_RULE if is_main_file else SUPPORTING_FILE_RULE,
        **_author_vars(),
    })


def build_css_file_prompt(file_path, file_description, plan_text, context) -> str:
    return _load_prompt("file_css").safe_substitute({
        "file_path": file_path,
        "file_description": file_description,
        "plan": plan_text,
        "context": context,
    })


def build_js_file_prompt(file_path, file_description, plan_text, context) -> str:
    return _load_prompt("file_js").safe_substitute({
        "file_path": file_path,
        "file_description": file_description,
        "plan": plan_text,
        "context": context,
    })
