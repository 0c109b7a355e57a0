"""Plan header parsing — which skills a plan asks for, and in what mode.

A plan opts in with a leading header block::

    ---
    phase: 02-auth
    skills:
      - testing-discipline
      - api-design
    skills_mode: minimal
    ---

Anything missing or malformed just means "no explicit skills".
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from .models import PlanDescriptor

logger = logging.getLogger("planskills.plan")

HEADER_MARKER = "---"

_LIST_ITEM = re.compile(r"^\s*-\s*(.*?)\s*$")
_KEY = re.compile(r"^(\w+):\s*(.*?)\s*$")


def extract_header(text: str) -> Optional[str]:
    """Return the body of the leading ``---`` block, or None if there isn't one."""
    lines = text.splitlines()
    if not lines or lines[0].strip() != HEADER_MARKER:
        return None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == HEADER_MARKER:
            return "\n".join(lines[1:i])
    return None


def _clean_ids(items: Any) -> list[str]:
    if isinstance(items, str):
        items = [items]
    if not isinstance(items, list):
        return []
    ids = []
    for item in items:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            ids.append(text)
    return ids


def _scan_header(header: str) -> dict[str, Any]:
    """Line-oriented fallback for headers YAML can't parse."""
    result: dict[str, Any] = {}
    current: Optional[str] = None
    for line in header.splitlines():
        item = _LIST_ITEM.match(line)
        if item and current == "skills":
            result.setdefault("skills", []).append(item.group(1))
            continue
        key = _KEY.match(line)
        if key:
            current = key.group(1)
            if current == "skills_mode" and key.group(2):
                result["skills_mode"] = key.group(2).split()[0]
        elif line.strip():
            current = None
    return result


def parse_plan(text: str) -> PlanDescriptor:
    """Parse a plan's header into a PlanDescriptor.

    Args:
        text: Full plan document.

    Returns:
        PlanDescriptor: Explicit skills and mode; empty defaults when absent.
    """
    header = extract_header(text or "")
    if header is None:
        return PlanDescriptor()

    try:
        # BaseLoader keeps every scalar a string: ids like "on" or "010" stay as written.
        data = yaml.load(header, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        logger.debug("Malformed plan header, scanning lines instead: %s", exc)
        data = _scan_header(header)

    if not isinstance(data, dict):
        return PlanDescriptor()

    mode = data.get("skills_mode")
    return PlanDescriptor(
        skills=_clean_ids(data.get("skills")),
        skills_mode=str(mode).strip() if mode not in (None, "") else None,
    )


def read_plan(path: Path) -> str:
    """Read a plan document; a missing or unreadable plan reads as empty."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Plan not found: %s", path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read plan %s: %s", path, exc)
    return ""
