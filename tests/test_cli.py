"""Tests for the planskills CLI: load, infer, list, check."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from planskills.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def skills_dir(make_skills_dir):
    return make_skills_dir(
        {"core": 3, "testing": 4, "api": 5},
        rules=[
            {"skill": "testing", "patterns": ["pytest"]},
            {"skill": "api", "patterns": ["endpoint"]},
        ],
        defaults=["core"],
    )


@pytest.fixture
def plan(tmp_path: Path) -> Path:
    path = tmp_path / "PLAN.md"
    path.write_text("---\nskills:\n  - api\n---\n# Plan\n")
    return path


class TestLoadCommand:
    def test_load_reports_and_logs(self, runner, skills_dir, plan, tmp_path):
        log_dir = tmp_path / "logs"
        result = runner.invoke(main, [
            "load", str(plan), "--skills-dir", str(skills_dir), "--log-dir", str(log_dir),
        ])
        assert result.exit_code == 0
        assert "Skills loaded: core, api" in result.output
        assert "Total lines: 8" in result.output
        assert len(list(log_dir.glob("skills_*.log"))) == 1

    def test_load_output_prints_block(self, runner, skills_dir, plan):
        result = runner.invoke(main, [
            "load", str(plan), "--skills-dir", str(skills_dir), "--no-log", "--output",
        ])
        assert result.exit_code == 0
        assert "--- Skills Block ---" in result.output
        assert "<skills>" in result.output
        assert "<!-- Skill: api (5 lines) -->" in result.output
        assert "</skills>" in result.output

    def test_no_log_writes_nothing(self, runner, skills_dir, plan, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["load", str(plan), "--skills-dir", str(skills_dir), "--no-log"])
        assert result.exit_code == 0
        assert not (tmp_path / ".planning").exists()

    def test_infer_text_option(self, runner, skills_dir, tmp_path):
        result = runner.invoke(main, [
            "load", str(tmp_path / "none.md"), "--skills-dir", str(skills_dir),
            "--no-log", "--infer-text", "add pytest cases",
        ])
        assert result.exit_code == 0
        assert "Skills loaded: core, testing" in result.output

    def test_missing_plan_argument_is_usage_error(self, runner):
        result = runner.invoke(main, ["load"])
        assert result.exit_code != 0
        assert "PLAN_PATH" in result.output

    def test_missing_registry_degrades(self, runner, plan, tmp_path):
        result = runner.invoke(main, [
            "load", str(plan), "--skills-dir", str(tmp_path / "nowhere"), "--output",
        ])
        assert result.exit_code == 0
        assert "Skills loaded: none" in result.output
        assert "Total lines: 0" in result.output

    def test_no_skills_dir_anywhere(self, runner, plan, isolated_locations):
        result = runner.invoke(main, ["load", str(plan)])
        assert result.exit_code == 0
        assert "Skills loaded: none" in result.output

    def test_env_home_used(self, runner, skills_dir, plan, isolated_locations):
        result = runner.invoke(
            main, ["load", str(plan), "--no-log"], env={"PLANSKILLS_HOME": str(skills_dir)}
        )
        assert result.exit_code == 0
        assert "Skills loaded: core, api" in result.output

    def test_summary_lines_not_wrapped(self, runner, make_skills_dir, tmp_path):
        """Long ids stay on one summary line, brackets included."""
        ids = [f"skill-with-a-fairly-long-identifier-{i}" for i in range(3)] + ["tagged-[x]"]
        long_dir = make_skills_dir({i: 2 for i in ids}, name="long")
        plan = tmp_path / "LONG.md"
        plan.write_text("---\nskills:\n" + "".join(f"  - \"{i}\"\n" for i in ids) + "---\n")
        result = runner.invoke(main, ["load", str(plan), "--skills-dir", str(long_dir), "--no-log"])
        assert result.exit_code == 0
        assert f"Skills loaded: {', '.join(ids)}\n" in result.output
        assert "Total lines: 8\n" in result.output


class TestInferCommand:
    def test_infer(self, runner, skills_dir):
        result = runner.invoke(main, [
            "infer", "--skills-dir", str(skills_dir), "new", "endpoint", "with", "pytest",
        ])
        assert result.exit_code == 0
        assert "Inferred skills: testing, api" in result.output

    def test_infer_nothing(self, runner, skills_dir):
        result = runner.invoke(main, ["infer", "--skills-dir", str(skills_dir), "refactor"])
        assert result.exit_code == 0
        assert "Inferred skills: none" in result.output


class TestListCommand:
    def test_list(self, runner, skills_dir):
        result = runner.invoke(main, ["list", "--skills-dir", str(skills_dir)])
        assert result.exit_code == 0
        for skill_id in ("core", "testing", "api"):
            assert skill_id in result.output
        assert "Limits: 5 skills, 1000 lines per plan" in result.output

    def test_list_filtered(self, runner, skills_dir):
        result = runner.invoke(main, ["list", "--skills-dir", str(skills_dir), "--tag", "test"])
        assert result.exit_code == 0
        assert "testing" in result.output
        assert "api" not in result.output

    def test_list_without_registry(self, runner, tmp_path):
        result = runner.invoke(main, ["list", "--skills-dir", str(tmp_path)])
        assert result.exit_code == 0


class TestCheckCommand:
    def test_clean(self, runner, skills_dir):
        result = runner.invoke(main, ["check", "--skills-dir", str(skills_dir)])
        assert result.exit_code == 0
        assert "Registry OK" in result.output

    def test_reports_problems(self, runner, make_skills_dir):
        broken = make_skills_dir(
            {"core": 2, "gone": 2},
            defaults=["core", "ghost"],
            unwritten=("gone",),
            name="broken",
        )
        result = runner.invoke(main, ["check", "--skills-dir", str(broken)])
        assert result.exit_code == 0
        assert "defaults: ghost" in result.output
        assert "Skill file missing:" in result.output
        assert "gone" in result.output


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "planskills" in result.output
