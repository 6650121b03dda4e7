"""Context digest of the project structure and already generated files.

Embedded in later stage prompts so each new file is written consistently with
the ones before it. Each file's content is capped by line count; the cap
shrinks once many files exist. The digest as a whole is not capped.
"""

import logging

from config.defaults import DEFAULTS

logger = logging.getLogger(__name__)


def line_limit(artifact_count, defaults=DEFAULTS):
    """Per-file line cap for a digest covering ``artifact_count`` files."""
    if artifact_count > defaults["context_file_threshold"]:
        return defaults["context_lines_many"]
    return defaults["context_lines_few"]


def describe_structure(structure):
    parts = ["Project Structure:\n"]
    if structure is None:
        return "".join(parts)
    if structure.directories:
        parts.append(f"Directories: {', '.join(structure.directories)}\n")
    if structure.files:
        parts.append("Files:\n")
        for spec in structure.files:
            parts.append(f"- {spec.path} ({spec.type}): {spec.description}\n")
    return "".join(parts)


def describe_artifact(path, content, limit):
    lines = content.split("\n")
    if len(lines) > limit:
        shown = "\n".join(lines[:limit])
        return (
            f"File: {path}\n"
            f"Content (truncated):\n```\n{shown}\n```\n"
            f"Content truncated to first {limit} lines.\n"
        )
    return f"File: {path}\nContent:\n```\n{content}\n```\n"


def build_file_context(structure, artifacts):
    """Build the digest string for ``structure`` plus ``artifacts`` (an ArtifactSet).

    Deterministic: the same inputs always give the same string.
    """
    parts = [describe_structure(structure)]

    if len(artifacts):
        limit = line_limit(len(artifacts))
        parts.append("\nPreviously Generated Files:\n")
        for path, content in artifacts.items():
            parts.append(describe_artifact(path, content, limit))
        logger.debug("Context digest covers %d file(s), %d lines each at most",
                     len(artifacts), limit)

    return "".join(parts)
