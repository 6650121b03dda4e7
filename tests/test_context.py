"""Tests for core.context — structure digest and per-file line caps."""

from core.context import build_file_context, describe_artifact, line_limit
from core.state import ArtifactSet, FileSpec, GeneratedArtifact, ProjectStructure

STRUCTURE = ProjectStructure(
    directories=["includes/", "assets/js/"],
    files=[
        FileSpec(path="contact-form.php", type="php", description="Main plugin file"),
        FileSpec(path="assets/js/form.js", type="js", description="Client-side validation"),
    ],
)


def _lines(name, count):
    return [f"{name}-{i:04d}" for i in range(count)]


def _artifacts(count, line_count):
    return ArtifactSet(
        GeneratedArtifact(path=f"file{n}.php", content="\n".join(_lines(f"f{n}", line_count)))
        for n in range(count)
    )


def test_structure_digest():
    context = build_file_context(STRUCTURE, ArtifactSet())
    assert context.startswith("Project Structure:\n")
    assert "Directories: includes/, assets/js/\n" in context
    assert "- contact-form.php (php): Main plugin file\n" in context
    assert "- assets/js/form.js (js): Client-side validation\n" in context
    assert "Previously Generated Files" not in context


def test_line_limit_shrinks_past_five_files():
    assert line_limit(0) == 2000
    assert line_limit(5) == 2000
    assert line_limit(6) == 1000


def test_six_long_files_are_cut_to_1000_lines():
    artifacts = _artifacts(6, 1500)
    context = build_file_context(STRUCTURE, artifacts)

    assert context.count("Content truncated to first 1000 lines.") == 6
    for n in range(6):
        kept = "\n".join(_lines(f"f{n}", 1000))
        assert f"File: file{n}.php\nContent (truncated):\n```\n{kept}\n```\n" in context
        assert f"f{n}-1000" not in context


def test_three_long_files_are_kept_whole():
    artifacts = _artifacts(3, 1500)
    context = build_file_context(STRUCTURE, artifacts)

    assert "truncated" not in context
    for n in range(3):
        full = "\n".join(_lines(f"f{n}", 1500))
        assert f"File: file{n}.php\nContent:\n```\n{full}\n```\n" in context


def test_file_at_the_cap_is_not_truncated():
    content = "\n".join(_lines("x", 2000))
    assert "truncated" not in describe_artifact("x.php", content, 2000)
    assert "Content truncated to first 2000 lines." in describe_artifact(
        "x.php", content + "\nextra", 2000)


def test_files_listed_in_generation_order():
    artifacts = ArtifactSet([
        GeneratedArtifact(path="z.php", content="z"),
        GeneratedArtifact(path="a.css", content="a"),
    ])
    context = build_file_context(STRUCTURE, artifacts)
    assert context.index("File: z.php") < context.index("File: a.css")


def test_digest_is_deterministic():
    first = build_file_context(STRUCTURE, _artifacts(7, 1200))
    second = build_file_context(STRUCTURE, _artifacts(7, 1200))
    assert first == second


def test_no_structure():
    context = build_file_context(None, ArtifactSet([GeneratedArtifact("a.php", "<?php")]))
    assert context.startswith("Project Structure:\n")
    assert "File: a.php" in context
