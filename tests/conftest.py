"""Shared fixtures: build a skills directory with a registry on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from planskills import registry as registry_module


def write_skill(skills_dir: Path, skill_id: str, lines: int) -> str:
    """Write a skill file with exactly ``lines`` newline-separated segments."""
    rel = f"{skill_id}/SKILL.md"
    path = skills_dir / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    body = [f"# {skill_id}"] + [f"line {i}" for i in range(2, lines + 1)]
    path.write_text("\n".join(body))
    return rel


@pytest.fixture
def make_skills_dir(tmp_path: Path) -> Callable[..., Path]:
    """Factory: skills dir with the given {id: line count} files and registry.

    Skill ids listed in ``unwritten`` are declared in the registry but get no file.
    """

    def _make(
        skills: dict[str, int],
        rules: list[dict[str, Any]] | None = None,
        defaults: list[str] | None = None,
        limits: dict[str, int] | None = None,
        unwritten: tuple[str, ...] = (),
        name: str = "skills",
    ) -> Path:
        skills_dir = tmp_path / name
        skills_dir.mkdir(parents=True, exist_ok=True)
        entries = {}
        for skill_id, lines in skills.items():
            if skill_id in unwritten:
                rel = f"{skill_id}/SKILL.md"
            else:
                rel = write_skill(skills_dir, skill_id, lines)
            entries[skill_id] = {"path": rel, "max_lines": lines, "tags": [skill_id]}
        data = {
            "version": "1.0",
            "skills": entries,
            "inference": {"rules": rules or []},
            "defaults": {"always_load": defaults or []},
            "limits": limits or {"max_skills_per_plan": 5, "max_total_lines": 1000},
        }
        (skills_dir / "registry.json").write_text(json.dumps(data, indent=2))
        return skills_dir

    return _make


@pytest.fixture
def isolated_locations(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point cwd, home and the dev fallback at empty temp dirs."""
    work = tmp_path / "work"
    home = tmp_path / "home"
    work.mkdir()
    home.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("PLANSKILLS_HOME", raising=False)
    monkeypatch.delenv("PLANSKILLS_LOG_DIR", raising=False)
    monkeypatch.setattr(registry_module, "DEV_SKILLS_DIR", tmp_path / "no-dev-skills")
    return work
