"""Skill selection: merge explicit, inferred, and default skills."""

from __future__ import annotations

import logging
from typing import Optional

from .inference import infer_skills
from .models import PlanDescriptor, Registry

logger = logging.getLogger("planskills.selector")


def select_skills(
    plan: PlanDescriptor,
    registry: Registry,
    plan_text: str = "",
    infer_text: Optional[str] = None,
) -> list[str]:
    """Decide which skills to try loading, in order.

    Explicit header skills win outright and inference is skipped. Without
    them, rules run against ``infer_text`` if given, else the plan text.
    Unless the plan is minimal, registry defaults go first in their declared
    order, including any the plan also names. The result never repeats an
    identifier.

    Args:
        plan: Parsed plan header.
        registry: The loaded registry.
        plan_text: Full plan text, used for inference.
        infer_text: Alternate text to infer from (e.g. phase content).

    Returns:
        list[str]: Ordered, deduplicated skill identifiers.
    """
    if plan.skills:
        base = list(plan.skills)
        logger.debug("Explicit skills: %s", base)
    else:
        source = infer_text if infer_text is not None else plan_text
        base = infer_skills(source, registry)
        logger.debug("Inferred skills: %s", base)

    merged: list[str] = []
    if not plan.is_minimal:
        merged.extend(registry.defaults.always_load)
    merged.extend(base)

    return list(dict.fromkeys(merged))
