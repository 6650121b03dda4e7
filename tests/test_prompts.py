"""Tests for the stage prompt builders in agents/."""

import pytest

from agents.generator import (
    MAIN_FILE_RULE,
    PLUGIN_AUTHOR,
    SUPPORTING_FILE_RULE,
    build_css_file_prompt,
    build_js_file_prompt,
    build_php_file_prompt,
    build_plugin_code_prompt,
)
from agents.planner import build_complex_plan_prompt, build_simple_plan_prompt
from agents.reviewer import build_review_prompt

PLAN = '{\n  "plugin_name": "Contact Form"\n}'
CONTEXT = "Project Structure:\nFiles:\n- contact-form.php (php): Main plugin file\n"


# --- Plan ---

def test_simple_plan_prompt():
    prompt = build_simple_plan_prompt("a contact form plugin")
    assert "a contact form plugin" in prompt
    assert "single PHP file" in prompt
    for key in ("plugin_name", "design_and_architecture", "detailed_feature_description",
                "user_interface", "security_considerations", "testing_plan"):
        assert key in prompt
    assert "project_structure" not in prompt
    assert "user_flows" not in prompt


def test_complex_plan_prompt():
    prompt = build_complex_plan_prompt("a contact form plugin")
    assert "a contact form plugin" in prompt
    assert "user_flows" in prompt
    assert "project_structure" in prompt
    assert "directories" in prompt
    assert "php, css or js" in prompt


def test_features_with_dollar_signs_pass_through():
    prompt = build_simple_plan_prompt("show $price and $plan in the footer")
    assert "show $price and $plan in the footer" in prompt


# --- Code ---

def test_plugin_code_prompt():
    prompt = build_plugin_code_prompt(PLAN)
    assert PLAN in prompt
    assert "current_user_can" in prompt
    assert "wp_verify_nonce" in prompt
    assert "$_POST / $_GET" in prompt
    assert '"?>"' in prompt
    assert PLUGIN_AUTHOR in prompt
    assert "placeholders" in prompt.lower()


def test_php_main_file_gets_header():
    prompt = build_php_file_prompt("contact-form.php", "Main plugin file", PLAN, CONTEXT,
                                   is_main_file=True)
    assert MAIN_FILE_RULE in prompt
    assert SUPPORTING_FILE_RULE not in prompt
    assert "File Path: contact-form.php" in prompt
    assert CONTEXT in prompt


def test_php_supporting_file_has_no_header():
    prompt = build_php_file_prompt("includes/class-helper.php", "Helpers", PLAN, CONTEXT,
                                   is_main_file=False)
    assert SUPPORTING_FILE_RULE in prompt
    assert MAIN_FILE_RULE not in prompt


def test_php_prompt_requires_prepared_queries():
    prompt = build_php_file_prompt("a.php", "", PLAN, CONTEXT, is_main_file=True)
    assert "$wpdb->prepare()" in prompt


def test_js_prompt_forbids_inner_html():
    prompt = build_js_file_prompt("assets/js/form.js", "Validation", PLAN, CONTEXT)
    assert "innerHTML" in prompt
    assert "textContent" in prompt
    assert "File Path: assets/js/form.js" in prompt


def test_css_prompt_requires_prefixed_selectors():
    prompt = build_css_file_prompt("assets/css/form.css", "Form styles", PLAN, CONTEXT)
    assert "Prefix every selector" in prompt
    assert CONTEXT in prompt


def test_context_with_php_variables_is_not_substituted():
    context = "File: a.php\nContent:\n```\n$context = $plan;\n```\n"
    prompt = build_css_file_prompt("a.css", "", PLAN, context)
    assert "$context = $plan;" in prompt


# --- Review ---

def test_review_prompt_embeds_security_checklist():
    context = CONTEXT + "File: contact-form.php\nContent:\n```\necho $_GET['name'];\n```\n"
    prompt = build_review_prompt(PLAN, context)
    assert "unescaped output" in prompt
    assert "missing authorization" in prompt
    assert "$wpdb->prepare()" in prompt
    assert '"review_summary"' in prompt
    assert '"suggestions"' in prompt
    assert "echo $_GET['name'];" in prompt


# --- Idempotence ---

@pytest.mark.parametrize("build", [
    lambda: build_simple_plan_prompt("a contact form plugin"),
    lambda: build_complex_plan_prompt("a contact form plugin"),
    lambda: build_plugin_code_prompt(PLAN),
    lambda: build_php_file_prompt("a.php", "x", PLAN, CONTEXT, is_main_file=True),
    lambda: build_css_file_prompt("a.css", "x", PLAN, CONTEXT),
    lambda: build_js_file_prompt("a.js", "x", PLAN, CONTEXT),
    lambda: build_review_prompt(PLAN, CONTEXT),
])
def test_builders_are_idempotent(build):
    assert build() == build()


@pytest.mark.parametrize("build", [
    lambda: build_simple_plan_prompt("a form"),
    lambda: build_php_file_prompt("a.php", "x", PLAN, CONTEXT, is_main_file=False),
    lambda: build_css_file_prompt("a.css", "x", PLAN, CONTEXT),
    lambda: build_js_file_prompt("a.js", "x", PLAN, CONTEXT),
    lambda: build_review_prompt(PLAN, CONTEXT),
])
def test_builders_fill_every_placeholder(build):
    prompt = build()
    for name in ("$features", "$plan", "$context", "$file_path", "$file_description",
                 "$header_rule", "$author"):
        assert name not in prompt
