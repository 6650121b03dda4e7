"""Pipeline state models shared across all stages."""

from __future__ import annotations

import json
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Mode(str, Enum):
    SIMPLE = "simple"       # single-file plugin
    COMPLEX = "complex"     # multi-file plugin with a project structure

    @classmethod
    def parse(cls, value) -> Mode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown plugin mode {value!r} (expected one of: {allowed})")


class FileType(str, Enum):
    SOURCE = "php"
    STYLE = "css"
    SCRIPT = "js"

    @classmethod
    def parse(cls, value) -> FileType | None:
        """Resolve a declared file type, or None if it is not supported."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _FILE_TYPE_ALIASES.get(value.strip().lower())


_FILE_TYPE_ALIASES = {
    "php": FileType.SOURCE,
    "source": FileType.SOURCE,
    "css": FileType.STYLE,
    "style": FileType.STYLE,
    "stylesheet": FileType.STYLE,
    "js": FileType.SCRIPT,
    "script": FileType.SCRIPT,
    "javascript": FileType.SCRIPT,
}

SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


@dataclass(frozen=True)
class ImageAttachment:
    data: bytes
    mime_type: str

    def __post_init__(self):
        if self.mime_type not in SUPPORTED_IMAGE_TYPES:
            raise ValueError(f"Unsupported image type: {self.mime_type}")

    @classmethod
    def from_path(cls, path) -> ImageAttachment:
        mime_type, _ = mimetypes.guess_type(str(path))
        if mime_type not in SUPPORTED_IMAGE_TYPES:
            raise ValueError(f"Unsupported image file: {path}")
        with open(path, "rb") as f:
            return cls(data=f.read(), mime_type=mime_type)


@dataclass(frozen=True)
class GenerationRequest:
    description: str                            # free-text feature description
    images: tuple[ImageAttachment, ...] = ()

    def __post_init__(self):
        if not self.description or not self.description.strip():
            raise ValueError("Generation request needs a feature description")
        object.__setattr__(self, "images", tuple(self.images or ()))


@dataclass(frozen=True)
class FileSpec:
    path: str           # relative to plugin root e.g. "includes/class-admin.php"
    type: str           # as declared by the plan; see FileType
    description: str = ""

    @property
    def kind(self) -> FileType | None:
        return FileType.parse(self.type)

    @property
    def is_main_file(self) -> bool:
        """The main plugin file is a PHP file at the plugin root."""
        return self.path.endswith(".php") and "/" not in self.path


@dataclass(frozen=True)
class ProjectStructure:
    directories: tuple[str, ...] = ()
    files: tuple[FileSpec, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "directories", tuple(self.directories))
        object.__setattr__(self, "files", tuple(self.files))
        seen = set()
        for spec in self.files:
            if spec.path in seen:
                raise ValueError(f"Duplicate file path in project structure: {spec.path}")
            seen.add(spec.path)


@dataclass(frozen=True)
class Plan:
    """Plan stage output: the named plan sections in the order the model gave them."""

    sections: dict[str, Any]
    structure: ProjectStructure | None = None

    @property
    def name(self) -> str:
        return str(self.sections.get("plugin_name", "")).strip()

    def to_prompt_text(self) -> str:
        return json.dumps(self.sections, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class GeneratedArtifact:
    path: str
    content: str


class ArtifactSet:
    """Append-only mapping of path -> content, in generation order."""

    def __init__(self, artifacts=()):
        self._files: dict[str, str] = {}
        for artifact in artifacts:
            self.add(artifact)

    def add(self, artifact: GeneratedArtifact):
        if artifact.path in self._files:
            raise ValueError(f"Artifact already generated: {artifact.path}")
        self._files[artifact.path] = artifact.content

    def get(self, path, default=None):
        return self._files.get(path, default)

    def items(self):
        return list(self._files.items())

    def paths(self) -> list[str]:
        return list(self._files)

    def __contains__(self, path):
        return path in self._files

    def __len__(self):
        return len(self._files)

    def __iter__(self):
        for path, content in self._files.items():
            yield GeneratedArtifact(path=path, content=content)

    def __repr__(self):
        return f"ArtifactSet({self.paths()!r})"


class ReviewAction(str, Enum):
    UPDATE = "UPDATE"


@dataclass(frozen=True)
class ReviewSuggestion:
    action: ReviewAction
    file_path: str
    file_type: str
    reason: str
    description: str


@dataclass(frozen=True)
class ReviewResult:
    review_summary: str
    suggestions: tuple[ReviewSuggestion, ...] = ()


@dataclass
class PipelineState:
    request: GenerationRequest
    mode: Mode = Mode.SIMPLE
    status: str = "planning"            # planning|generating|reviewing|done|failed
    plan: Plan | None = None
    artifacts: ArtifactSet = field(default_factory=ArtifactSet)
    review: ReviewResult | None = None
    error: Any = None                   # StageError of the stage that failed

    @property
    def structure(self) -> ProjectStructure | None:
        return self.plan.structure if self.plan else None
