"""planskills Loader — read selected skills under the plan budget.

Architecture:
    parse_plan -> select_skills -> load_skills -> format_skills_block
    load_skills walks the selection in order (first-fit) and stops for good
    as soon as the count or line budget would be exceeded. Every selected
    identifier gets exactly one LoadOutcome.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .models import LoadedSkill, LoadOutcome, LoadResult, Registry, SkipReason
from .plan import parse_plan, read_plan
from .registry import load_registry
from .selector import select_skills

logger = logging.getLogger("planskills.loader")

BLOCK_OPEN = "<skills>"
BLOCK_CLOSE = "</skills>"


def count_lines(content: str) -> int:
    """Line count as the budget sees it: newline-separated segments."""
    return len(content.split("\n"))


def read_skill(skill_id: str, registry: Registry) -> Optional[LoadedSkill]:
    """Read one skill's file.

    Args:
        skill_id: Registry identifier (must be declared).
        registry: The loaded registry.

    Returns:
        LoadedSkill, or None if the file is missing or unreadable.
    """
    descriptor = registry.skills[skill_id]
    path = registry.base_dir / descriptor.path
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skill file not found: %s (%s)", path, exc.__class__.__name__)
        return None

    skill = LoadedSkill(
        id=skill_id,
        content=content,
        lines=count_lines(content),
        max_lines=descriptor.max_lines,
    )
    if skill.over_declared_limit:
        logger.debug(
            "Skill %s is %d lines, declared max %d", skill_id, skill.lines, skill.max_lines
        )
    return skill


def load_skills(skill_ids: list[str], registry: Registry) -> LoadResult:
    """Load skills in order until the budget runs out.

    Unknown identifiers and missing files are skipped and the pass continues.
    Hitting either limit ends the pass: the triggering identifier and all
    later ones are skipped, even if a later one would fit. Skills are never
    truncated.

    Args:
        skill_ids: Ordered selection (see select_skills).
        registry: The loaded registry.

    Returns:
        LoadResult: Loaded skills plus one outcome per identifier.
    """
    limits = registry.limits
    loaded: list[LoadedSkill] = []
    outcomes: list[LoadOutcome] = []
    total = 0
    stop_reason: Optional[SkipReason] = None

    for skill_id in skill_ids:
        if stop_reason is not None:
            outcomes.append(LoadOutcome(id=skill_id, loaded=False, reason=stop_reason))
            continue

        if len(loaded) >= limits.max_skills_per_plan:
            logger.warning(
                "Max skills reached (%d), skipping: %s", limits.max_skills_per_plan, skill_id
            )
            stop_reason = SkipReason.LIMIT_COUNT
            outcomes.append(LoadOutcome(id=skill_id, loaded=False, reason=stop_reason))
            continue

        if skill_id not in registry.skills:
            logger.warning("Skill not found in registry: %s", skill_id)
            outcomes.append(LoadOutcome(id=skill_id, loaded=False, reason=SkipReason.NOT_FOUND))
            continue

        skill = read_skill(skill_id, registry)
        if skill is None:
            outcomes.append(
                LoadOutcome(id=skill_id, loaded=False, reason=SkipReason.FILE_MISSING)
            )
            continue

        if total + skill.lines > limits.max_total_lines:
            logger.warning(
                "Line limit reached (%d), skipping: %s", limits.max_total_lines, skill_id
            )
            stop_reason = SkipReason.LIMIT_SIZE
            outcomes.append(
                LoadOutcome(id=skill_id, loaded=False, reason=stop_reason, lines=skill.lines)
            )
            continue

        loaded.append(skill)
        total += skill.lines
        outcomes.append(LoadOutcome(id=skill_id, loaded=True, lines=skill.lines))

    if stop_reason is not None:
        dropped = [o.id for o in outcomes if o.reason == stop_reason]
        logger.info("Dropped %d skill(s) for %s: %s", len(dropped), stop_reason.value, dropped)

    return LoadResult(selected=list(skill_ids), skills=loaded, outcomes=outcomes)


def format_skills_block(skills: list[LoadedSkill]) -> str:
    """Render loaded skills as one block for context injection.

    Returns an empty string when nothing was loaded.
    """
    if not skills:
        return ""

    total = sum(s.lines for s in skills)
    parts = [BLOCK_OPEN + "\n", f"<!-- {len(skills)} skill(s) loaded, {total} total lines -->\n\n"]
    for skill in skills:
        parts.append(f"<!-- Skill: {skill.id} ({skill.lines} lines) -->\n")
        parts.append(skill.content)
        parts.append("\n\n")
    parts.append(BLOCK_CLOSE)
    return "".join(parts)


def select_and_load(
    plan_path: Path,
    infer_text: Optional[str] = None,
    registry: Optional[Registry] = None,
    location: Optional[Path] = None,
) -> LoadResult:
    """Select, load, and format the skills for one plan.

    Args:
        plan_path: Plan document; missing plans read as empty.
        infer_text: Text to infer from when the plan names no skills.
        registry: Pre-loaded registry (default: load from ``location``).
        location: Skills directory (default: resolved automatically).

    Returns:
        LoadResult: Empty when no registry is available.
    """
    if registry is None:
        registry = load_registry(location)
    if registry is None:
        return LoadResult()

    plan_text = read_plan(Path(plan_path))
    plan = parse_plan(plan_text)
    selected = select_skills(plan, registry, plan_text=plan_text, infer_text=infer_text)

    result = load_skills(selected, registry)
    result.block = format_skills_block(result.skills)
    logger.info(
        "Loaded %d/%d skills for %s (%d lines)",
        len(result.skills),
        len(selected),
        plan_path,
        result.total_lines,
    )
    return result
