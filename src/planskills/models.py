"""planskills data models — registry schema and load results as Pydantic models.

The registry file declares:
  - skills: identifier -> descriptor (path, advisory max_lines, tags)
  - inference.rules: keyword patterns that point at a skill
  - defaults.always_load: skills prepended to every non-minimal plan
  - limits: the per-plan budget (skill count and total lines)
"""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_SKILLS = 5
DEFAULT_MAX_LINES = 1000


class SkipReason(str, enum.Enum):
    """Why a selected skill did not make it into the injection block."""

    NOT_FOUND = "not_found"
    FILE_MISSING = "file_missing"
    LIMIT_COUNT = "limit_count"
    LIMIT_SIZE = "limit_size"


class SkillDescriptor(BaseModel):
    """One loadable skill as declared in the registry.

    The identifier is the key the descriptor is stored under, not a field.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str = Field(description="Path of the skill file, relative to the skills directory")
    max_lines: Optional[int] = Field(
        default=None, description="Declared size; advisory, never enforced on read"
    )
    tags: list[str] = Field(default_factory=list, description="Free-form labels")
    description: str = Field(default="", description="Human-readable summary")


class InferenceRule(BaseModel):
    """Keyword rule: the target skill applies when any pattern occurs in the text."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    skill: str = Field(description="Target skill identifier")
    patterns: list[str] = Field(default_factory=list, description="Case-insensitive substrings")


class InferenceConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    rules: list[InferenceRule] = Field(default_factory=list)


class Defaults(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    always_load: list[str] = Field(default_factory=list)


class Limits(BaseModel):
    """Budget for a single plan."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    max_skills_per_plan: int = Field(default=DEFAULT_MAX_SKILLS, ge=0)
    max_total_lines: int = Field(default=DEFAULT_MAX_LINES, ge=0)


class Registry(BaseModel):
    """The skill catalog, parsed from registry.json.

    Immutable once loaded. ``base_dir`` is where the file was found; skill
    paths resolve against it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: str = Field(default="", description="Registry format/content version")
    description: str = Field(default="")
    skills: dict[str, SkillDescriptor] = Field(default_factory=dict)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    defaults: Defaults = Field(default_factory=Defaults)
    limits: Limits = Field(default_factory=Limits)
    base_dir: Path = Field(default=Path("."), exclude=True)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str:
        """Accept numeric versions such as ``1.0``."""
        return "" if v is None else str(v)

    @property
    def rules(self) -> list[InferenceRule]:
        return self.inference.rules

    def skill_path(self, skill_id: str) -> Optional[Path]:
        """Absolute location of a skill's file, or None for unknown identifiers."""
        descriptor = self.skills.get(skill_id)
        if descriptor is None:
            return None
        return self.base_dir / descriptor.path


class PlanDescriptor(BaseModel):
    """What a plan's header asks for. Recomputed on every call."""

    skills: list[str] = Field(default_factory=list)
    skills_mode: Optional[str] = None

    @property
    def is_minimal(self) -> bool:
        return self.skills_mode == "minimal"


class LoadedSkill(BaseModel):
    """A skill read from disk and ready for injection."""

    id: str
    content: str
    lines: int
    max_lines: Optional[int] = None

    @property
    def over_declared_limit(self) -> bool:
        """True when the file is longer than the registry says. Informational only."""
        return self.max_lines is not None and self.lines > self.max_lines


class LoadOutcome(BaseModel):
    """The fate of one selected identifier: loaded, or skipped for a reason."""

    id: str
    loaded: bool
    reason: Optional[SkipReason] = None
    lines: int = 0


class LoadResult(BaseModel):
    """Everything a load pass produced, in selection order."""

    selected: list[str] = Field(default_factory=list)
    skills: list[LoadedSkill] = Field(default_factory=list)
    outcomes: list[LoadOutcome] = Field(default_factory=list)
    block: str = ""

    @property
    def loaded_ids(self) -> list[str]:
        return [s.id for s in self.skills]

    @property
    def total_lines(self) -> int:
        return sum(s.lines for s in self.skills)

    @property
    def skipped(self) -> list[LoadOutcome]:
        return [o for o in self.outcomes if not o.loaded]


def parse_registry_file(path: Path) -> Registry:
    """Parse a registry.json (or registry.yaml) file into a Registry.

    Args:
        path: Path to the registry file.

    Returns:
        Registry: The parsed registry, rooted at the file's directory.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the document is not a mapping or fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Skills registry not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Skills registry could not be parsed: {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Skills registry must be a mapping, got {type(raw).__name__}")

    return Registry.model_validate({**raw, "base_dir": path.parent})
