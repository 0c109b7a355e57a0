"""Keyword inference — map free-form text to skills via the registry's rules."""

from __future__ import annotations

from .models import Registry


def infer_skills(text: str, registry: Registry) -> list[str]:
    """Find the skills whose rules fire on ``text``.

    A rule fires when any of its patterns occurs in the text, ignoring case.
    Rules are evaluated in registry order and the first matching pattern is
    enough, so the result is deduplicated and ordered by first-firing rule.

    Args:
        text: Plan or phase content to scan.
        registry: The loaded registry.

    Returns:
        list[str]: Inferred skill identifiers.
    """
    haystack = (text or "").lower()
    inferred: list[str] = []
    if not haystack:
        return inferred

    for rule in registry.rules:
        if rule.skill in inferred:
            continue
        if any(p and p.lower() in haystack for p in rule.patterns):
            inferred.append(rule.skill)
    return inferred
