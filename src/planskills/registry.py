"""planskills Registry — locate and load the skill catalog.

Resolution order for the skills directory:
    $PLANSKILLS_HOME            # explicit override
    <cwd>/.claude/skills/       # project-local install
    ~/.claude/skills/           # user-level install
    <repo>/skills/              # development fallback next to the sources

The first directory that exists wins. Inside it:
    registry.json               # catalog, limits, defaults, inference rules
    <skill paths from the catalog>
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from . import REGISTRY_FILENAMES, SKILLS_DIRNAME
from .models import Registry, SkillDescriptor, parse_registry_file

logger = logging.getLogger("planskills.registry")

DEV_SKILLS_DIR = Path(__file__).resolve().parent.parent.parent / "skills"


class RegistryMissing(FileNotFoundError):
    """No skills directory could be resolved, or its registry is unusable."""


def candidate_locations(cwd: Optional[Path] = None, home: Optional[Path] = None) -> list[Path]:
    """List skills directories in the order they are tried.

    Args:
        cwd: Project directory (default: current working directory).
        home: User home (default: ``Path.home()``).

    Returns:
        list[Path]: Candidate directories, highest priority first.
    """
    candidates: list[Path] = []
    env = os.environ.get("PLANSKILLS_HOME")
    if env:
        candidates.append(Path(env).expanduser())
    candidates.append((cwd or Path.cwd()) / SKILLS_DIRNAME)
    candidates.append((home or Path.home()) / SKILLS_DIRNAME)
    candidates.append(DEV_SKILLS_DIR)
    return candidates


def find_registry_location(
    cwd: Optional[Path] = None, home: Optional[Path] = None
) -> Optional[Path]:
    """Resolve the skills directory.

    Returns:
        Path of the first existing candidate directory, or None.
    """
    for candidate in candidate_locations(cwd, home):
        if candidate.is_dir():
            logger.debug("Using skills directory: %s", candidate)
            return candidate
    return None


def registry_file(location: Path) -> Optional[Path]:
    """Return the registry file inside a skills directory, if any."""
    for name in REGISTRY_FILENAMES:
        path = location / name
        if path.is_file():
            return path
    return None


def require_registry(location: Optional[Path] = None) -> Registry:
    """Load the registry, raising when it can't be used.

    Args:
        location: Skills directory (default: resolved via find_registry_location).

    Returns:
        Registry: The parsed, immutable registry.

    Raises:
        RegistryMissing: If no directory resolves, the registry file is absent,
            or the file can't be parsed/validated.
    """
    location = location or find_registry_location()
    if location is None:
        raise RegistryMissing("Skills directory not found")

    path = registry_file(location)
    if path is None:
        raise RegistryMissing(f"Skills registry not found in {location}")

    try:
        registry = parse_registry_file(path)
    except (OSError, ValueError) as exc:
        raise RegistryMissing(str(exc)) from exc

    for problem in dangling_references(registry):
        logger.warning("Registry references unknown skill: %s", problem)
    return registry


def load_registry(location: Optional[Path] = None) -> Optional[Registry]:
    """Load the registry, or None when there is nothing usable.

    Missing skills must never block the caller's workflow, so every failure
    is logged and turned into None.
    """
    try:
        return require_registry(location)
    except RegistryMissing as exc:
        logger.error("%s", exc)
        return None


def dangling_references(registry: Registry) -> list[str]:
    """Identify rule targets and defaults that point at undeclared skills.

    Returns:
        list[str]: Human-readable descriptions, e.g. ``"defaults: core"``.
    """
    problems: list[str] = []
    for rule in registry.rules:
        if rule.skill not in registry.skills:
            problems.append(f"inference rule: {rule.skill}")
    for skill_id in registry.defaults.always_load:
        if skill_id not in registry.skills:
            problems.append(f"defaults: {skill_id}")
    return problems


def search_skills(registry: Registry, query: str) -> dict[str, SkillDescriptor]:
    """Filter registry skills by identifier, description, or tags.

    Args:
        registry: The loaded registry.
        query: Case-insensitive search string.

    Returns:
        dict[str, SkillDescriptor]: Matching skills in registry order.
    """
    q = query.lower()
    return {
        skill_id: skill
        for skill_id, skill in registry.skills.items()
        if q in skill_id.lower()
        or q in skill.description.lower()
        or any(q in t.lower() for t in skill.tags)
    }
