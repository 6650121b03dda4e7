#!/usr/bin/env python3
"""WP-Autoplugin - WordPress plugin generation pipeline.

Usage:
    python main.py plan --prompt "a contact form plugin"                    # plan only
    python main.py build --prompt "a contact form plugin"                   # simple mode
    python main.py build --prompt "..." --mode complex                      # multi-file plugin
    python main.py build --prompt "..." --mode complex --no-review --json   # full run as JSON
    python main.py build --prompt "..." --image mockup.png                  # attach a screenshot
    python main.py build --prompt "..." --verbose                           # debug logs, print file contents
"""

import argparse
import json
import logging
import sys

from core.errors import StageFailed
from core.orchestrator import Orchestrator
from core.parsing import parse_plan
from core.state import GenerationRequest, ImageAttachment
from utils.logging_config import setup_logging

logger = logging.getLogger("autoplugin")


def _state_to_dict(state):
    """Serialize PipelineState to a JSON-safe dict."""
    review = None
    if state.review:
        review = {
            "review_summary": state.review.review_summary,
            "suggestions": [
                {
                    "action": s.action.value,
                    "file_path": s.file_path,
                    "file_type": s.file_type,
                    "reason": s.reason,
                    "description": s.description,
                }
                for s in state.review.suggestions
            ],
        }
    return {
        "mode": state.mode.value,
        "status": state.status,
        "plan": state.plan.sections if state.plan else None,
        "files": [{"path": a.path, "content": a.content} for a in state.artifacts],
        "review": review,
        "error": {"kind": state.error.kind.value, "message": state.error.message}
        if state.error else None,
    }


def _format_review(review):
    lines = [f"Review: {review.review_summary}"]
    for s in review.suggestions:
        lines.append(f"  [{s.action.value}] {s.file_path} ({s.file_type}): {s.reason}")
        if s.description:
            lines.append(f"           Fix: {s.description}")
    return "\n".join(lines)


def _build_request(args):
    images = tuple(ImageAttachment.from_path(p) for p in args.image or ())
    return GenerationRequest(description=args.prompt, images=images)


def cmd_plan(args):
    """Run the plan stage only and print the plan JSON."""
    orchestrator = Orchestrator(mode=args.mode)
    result = orchestrator.generate_plan(_build_request(args))
    if result.ok:
        result = parse_plan(result.value, orchestrator.mode)
    plan = result.unwrap()
    print(json.dumps(plan.sections, indent=2, ensure_ascii=False))


def cmd_build(args):
    """Run the full pipeline and print what was generated."""
    orchestrator = Orchestrator(mode=args.mode)

    def _on_file(artifact):
        if not args.json:
            print(f"  generated {artifact.path} ({len(artifact.content.splitlines())} lines)")

    state = orchestrator.run_full(
        _build_request(args), review=not args.no_review, on_file=_on_file,
    )

    if args.json:
        print(json.dumps(_state_to_dict(state), indent=2, ensure_ascii=False))
    else:
        print(f"\nMode:   {state.mode.value}")
        print(f"Plugin: {state.plan.name if state.plan else '-'}")
        print(f"Status: {state.status}")
        print(f"\nGenerated {len(state.artifacts)} file(s):")
        for path in state.artifacts.paths():
            print(f"  {path}")
        if state.review:
            print()
            print(_format_review(state.review))
        if args.verbose:
            for artifact in state.artifacts:
                print(f"\n--- {artifact.path} ---\n{artifact.content}")

    if state.status == "failed":
        raise StageFailed(state.error)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="autoplugin",
        description="Generate WordPress plugins with a staged LLM pipeline",
    )
    subparsers = parser.add_subparsers(dest="command")

    def _add_common(sub):
        sub.add_argument("--prompt", required=True, help="Plugin feature description")
        sub.add_argument("--mode", choices=["simple", "complex"],
                         help="Plugin mode (default: $AUTOPLUGIN_PLUGIN_MODE or simple)")
        sub.add_argument("--image", action="append", metavar="PATH",
                         help="Image to attach to the plan request (repeatable)")
        sub.add_argument("--verbose", action="store_true",
                         help="Debug logging, print generated file contents")

    plan_parser = subparsers.add_parser("plan", help="Generate the plugin plan only")
    _add_common(plan_parser)

    build_parser = subparsers.add_parser("build", help="Run the full generation pipeline")
    _add_common(build_parser)
    build_parser.add_argument("--no-review", action="store_true",
                              help="Skip the review stage (complex mode)")
    build_parser.add_argument("--json", action="store_true",
                              help="Print the whole run as JSON")

    args = parser.parse_args(argv)
    setup_logging(verbose=getattr(args, "verbose", False))

    try:
        if args.command == "plan":
            cmd_plan(args)
        elif args.command == "build":
            cmd_build(args)
        else:
            parser.print_help()
            sys.exit(1)
    except (StageFailed, RuntimeError, ValueError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
