"""Parse structured stage responses into typed records.

The stages themselves return raw text. Callers that need the plan or the
review as data run it through here; anything that does not match the
requested shape becomes a STRUCTURED_RESPONSE_PARSE_FAILURE.
"""

import json
import re

from core.errors import ErrorKind, StageResult
from core.state import (
    FileSpec, Mode, Plan, ProjectStructure, ReviewAction, ReviewResult, ReviewSuggestion,
)

_FENCE_OPEN_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")


def strip_code_fences(text):
    """Remove a single markdown fence wrapped around the whole response.

    Text without a fence is returned untouched, whitespace included.
    """
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return text
    cleaned = _FENCE_OPEN_RE.sub("", cleaned, count=1)
    return _FENCE_CLOSE_RE.sub("", cleaned, count=1)


def _parse_failure(message, cause=None):
    return StageResult.failure(ErrorKind.STRUCTURED_RESPONSE_PARSE_FAILURE, message, cause=cause)


def _load_json_object(text, what):
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        return None, _parse_failure(f"{what} is not valid JSON: {e}", cause=e)
    if not isinstance(data, dict):
        return None, _parse_failure(f"{what} must be a JSON object, got {type(data).__name__}")
    return data, None


def parse_structure(raw):
    """Build a ProjectStructure from the plan's ``project_structure`` value.

    Raises ValueError when the value does not have the expected shape.
    """
    if not isinstance(raw, dict):
        raise ValueError("project_structure must be an object")
    directories = raw.get("directories") or []
    files = raw.get("files")
    if not isinstance(directories, list) or not all(isinstance(d, str) for d in directories):
        raise ValueError("project_structure.directories must be a list of paths")
    if not isinstance(files, list) or not files:
        raise ValueError("project_structure.files must be a non-empty list")

    specs = []
    for entry in files:
        if not isinstance(entry, dict):
            raise ValueError("each project_structure file must be an object")
        path = entry.get("path")
        file_type = entry.get("type")
        if not isinstance(path, str) or not path.strip():
            raise ValueError("each project_structure file needs a path")
        if not isinstance(file_type, str):
            raise ValueError(f"file {path} needs a type")
        specs.append(FileSpec(
            path=path.strip(),
            type=file_type.strip(),
            description=str(entry.get("description", "")),
        ))
    # ProjectStructure raises on duplicate paths
    return ProjectStructure(directories=tuple(directories), files=tuple(specs))


def parse_plan(text, mode) -> StageResult:
    """Parse the plan stage response for ``mode``."""
    data, failure = _load_json_object(text, "Plan")
    if failure:
        return failure

    if Mode.parse(mode) is Mode.SIMPLE:
        sections = {k: v for k, v in data.items() if k != "project_structure"}
        return StageResult.success(Plan(sections=sections))

    if "project_structure" not in data:
        return _parse_failure("Complex plan has no project_structure")
    try:
        structure = parse_structure(data["project_structure"])
    except ValueError as e:
        return _parse_failure(f"Invalid project_structure: {e}", cause=e)
    return StageResult.success(Plan(sections=data, structure=structure))


def parse_review(text) -> StageResult:
    """Parse the review stage response into a ReviewResult."""
    data, failure = _load_json_object(text, "Review")
    if failure:
        return failure

    summary = data.get("review_summary")
    raw_suggestions = data.get("suggestions", [])
    if not isinstance(summary, str):
        return _parse_failure("Review has no review_summary string")
    if not isinstance(raw_suggestions, list):
        return _parse_failure("Review suggestions must be a list")

    suggestions = []
    for item in raw_suggestions:
        if not isinstance(item, dict):
            return _parse_failure("Each review suggestion must be an object")
        try:
            action = ReviewAction(str(item.get("action", "")).strip().upper())
        except ValueError as e:
            return _parse_failure(f"Unknown review action: {item.get('action')!r}", cause=e)
        suggestions.append(ReviewSuggestion(
            action=action,
            file_path=str(item.get("file_path", "")),
            file_type=str(item.get("file_type", "")),
            reason=str(item.get("reason", "")),
            description=str(item.get("description", "")),
        ))

    return StageResult.success(ReviewResult(review_summary=summary, suggestions=tuple(suggestions)))
