"""Main pipeline orchestrator — plan → structure → per-file generation → review."""

import logging

from agents.generator import (
    build_css_file_prompt,
    build_js_file_prompt,
    build_php_file_prompt,
    build_plugin_code_prompt,
)
from agents.planner import build_complex_plan_prompt, build_simple_plan_prompt
from agents.reviewer import build_review_prompt
from config.defaults import load_mode
from core.context import build_file_context
from core.errors import ErrorKind, StageResult
from core.parsing import parse_plan, parse_review, strip_code_fences
from core.state import (
    ArtifactSet, FileType, GeneratedArtifact, Mode, PipelineState,
)
from utils.llm import CompletionClient
from utils.naming import plugin_file_name

logger = logging.getLogger(__name__)


def _php_prompt(spec, plan_text, context):
    return build_php_file_prompt(spec.path, spec.description, plan_text, context,
                                 is_main_file=spec.is_main_file)


def _css_prompt(spec, plan_text, context):
    return build_css_file_prompt(spec.path, spec.description, plan_text, context)


def _js_prompt(spec, plan_text, context):
    return build_js_file_prompt(spec.path, spec.description, plan_text, context)


FILE_PROMPT_BUILDERS = {
    FileType.SOURCE: _php_prompt,
    FileType.STYLE: _css_prompt,
    FileType.SCRIPT: _js_prompt,
}


class Orchestrator:
    """Runs the generation stages against one completion client.

    The plugin mode is bound at construction and never re-read, so every
    stage of a run sees the same mode. Stage methods return a StageResult;
    client failures are handed back untouched and nothing is retried here.
    """

    def __init__(self, client=None, mode=None):
        self.client = client if client is not None else CompletionClient()
        self.mode = Mode.parse(mode) if mode is not None else load_mode()

    def _require_mode(self, mode, operation):
        if self.mode is mode:
            return None
        return StageResult.failure(
            ErrorKind.MODE_MISMATCH,
            f"{operation} needs {mode.value} mode, but the plugin mode is {self.mode.value}",
        )

    # --- stages ----------------------------------------------------------

    def generate_plan(self, request) -> StageResult:
        """Ask for the plugin plan. The result value is the raw JSON text."""
        if self.mode is Mode.COMPLEX:
            prompt = build_complex_plan_prompt(request.description)
        else:
            prompt = build_simple_plan_prompt(request.description)

        options = {"response_format": "json"}
        if request.images:
            options["attachments"] = list(request.images)

        logger.info("Planning %s plugin (%d image(s) attached)",
                    self.mode.value, len(request.images))
        return self.client.send(prompt, "", options)

    def generate_single_artifact(self, plan) -> StageResult:
        """Generate the whole plugin as one PHP file (simple mode only)."""
        mismatch = self._require_mode(Mode.SIMPLE, "Single-file generation")
        if mismatch:
            return mismatch

        logger.info("Generating single-file plugin %r", plan.name)
        result = self.client.send(build_plugin_code_prompt(plan.to_prompt_text()))
        if not result.ok:
            return result
        return StageResult.success(GeneratedArtifact(
            path=plugin_file_name(plan.name),
            content=strip_code_fences(result.value),
        ))

    def generate_file(self, file_spec, plan, structure, artifacts) -> StageResult:
        """Generate one file of a complex plugin.

        ``artifacts`` holds the files generated so far; it is read, not
        modified. Adding the new artifact is up to the caller.
        """
        mismatch = self._require_mode(Mode.COMPLEX, "Per-file generation")
        if mismatch:
            return mismatch

        builder = FILE_PROMPT_BUILDERS.get(file_spec.kind)
        if builder is None:
            return StageResult.failure(
                ErrorKind.UNSUPPORTED_ARTIFACT_TYPE,
                f"Unsupported file type: {file_spec.type} ({file_spec.path})",
            )

        context = build_file_context(structure, artifacts)
        prompt = builder(file_spec, plan.to_prompt_text(), context)

        logger.info("Generating %s (%s, %d file(s) in context)",
                    file_spec.path, file_spec.kind.value, len(artifacts))
        result = self.client.send(prompt)
        if not result.ok:
            return result
        return StageResult.success(GeneratedArtifact(
            path=file_spec.path,
            content=strip_code_fences(result.value),
        ))

    def review(self, plan, structure, artifacts) -> StageResult:
        """Review the complete codebase. The result value is the raw JSON text."""
        mismatch = self._require_mode(Mode.COMPLEX, "Code review")
        if mismatch:
            return mismatch

        context = build_file_context(structure, artifacts)
        logger.info("Reviewing %d generated file(s)", len(artifacts))
        return self.client.send(
            build_review_prompt(plan.to_prompt_text(), context),
            "",
            {"response_format": "json"},
        )

    # --- drivers ---------------------------------------------------------

    def generate_files(self, plan, artifacts=None, on_file=None) -> StageResult:
        """Generate every file of the plan's structure, one at a time, in order.

        Each file sees all files generated before it. Paths already present in
        ``artifacts`` are skipped, so a failed run can be resumed with the set
        it left behind. On failure the error is returned and ``artifacts``
        keeps whatever was generated.

        Args:
            plan: Parsed complex-mode plan.
            artifacts: ArtifactSet to fill (a new one if None).
            on_file: Optional callback(artifact) after each generated file.
        """
        mismatch = self._require_mode(Mode.COMPLEX, "Per-file generation")
        if mismatch:
            return mismatch

        structure = plan.structure
        if structure is None:
            return StageResult.failure(
                ErrorKind.STRUCTURED_RESPONSE_PARSE_FAILURE,
                "Per-file generation needs a plan with a project structure",
            )
        artifacts = ArtifactSet() if artifacts is None else artifacts
        for spec in structure.files:
            if spec.path in artifacts:
                logger.debug("Skipping %s, already generated", spec.path)
                continue
            result = self.generate_file(spec, plan, structure, artifacts)
            if not result.ok:
                logger.warning("Generation stopped at %s: %s", spec.path, result.error)
                return result
            artifacts.add(result.value)
            if on_file:
                on_file(result.value)
        return StageResult.success(artifacts)

    def run_full(self, request, review=True, on_file=None) -> PipelineState:
        """Run the whole pipeline for ``request``.

        Simple mode: plan → single file. Complex mode: plan → every file in
        the project structure → review. Stops at the first failing stage with
        ``status == "failed"`` and the StageError in ``state.error``.
        """
        state = PipelineState(request=request, mode=self.mode)

        result = self.generate_plan(request)
        if result.ok:
            result = parse_plan(result.value, self.mode)
        if not result.ok:
            return self._fail(state, result)
        state.plan = result.value

        state.status = "generating"
        if self.mode is Mode.SIMPLE:
            result = self.generate_single_artifact(state.plan)
            if not result.ok:
                return self._fail(state, result)
            state.artifacts.add(result.value)
            if on_file:
                on_file(result.value)
            state.status = "done"
            return state

        result = self.generate_files(state.plan, state.artifacts, on_file=on_file)
        if not result.ok:
            return self._fail(state, result)

        if review:
            state.status = "reviewing"
            result = self.review(state.plan, state.structure, state.artifacts)
            if result.ok:
                result = parse_review(result.value)
            if not result.ok:
                return self._fail(state, result)
            state.review = result.value

        state.status = "done"
        return state

    def _fail(self, state, result):
        logger.error("Pipeline failed while %s: %s", state.status, result.error)
        state.status = "failed"
        state.error = result.error
        return state
