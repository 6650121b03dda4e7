"""Default pipeline settings."""

import os

from core.state import Mode

DEFAULTS = {
    "plugin_mode": "simple",
    "model": "claude-sonnet-4-5-20250929",
    "max_tokens": 32768,
    # Context digest: once more than this many files exist, each one is capped
    # at the smaller line limit.
    "context_file_threshold": 5,
    "context_lines_few": 2000,
    "context_lines_many": 1000,
}

MODE_ENV_VAR = "AUTOPLUGIN_PLUGIN_MODE"
MODEL_ENV_VAR = "AUTOPLUGIN_MODEL"
MAX_TOKENS_ENV_VAR = "AUTOPLUGIN_MAX_TOKENS"


def load_mode(environ=None):
    """Return the process-wide plugin mode (env override, else default)."""
    environ = os.environ if environ is None else environ
    return Mode.parse(environ.get(MODE_ENV_VAR) or DEFAULTS["plugin_mode"])


def load_model(environ=None):
    environ = os.environ if environ is None else environ
    return environ.get(MODEL_ENV_VAR) or DEFAULTS["model"]


def load_max_tokens(environ=None):
    environ = os.environ if environ is None else environ
    raw = environ.get(MAX_TOKENS_ENV_VAR)
    if not raw:
        return DEFAULTS["max_tokens"]
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{MAX_TOKENS_ENV_VAR} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{MAX_TOKENS_ENV_VAR} must be positive, got {value}")
    return value
