"""planskills CLI — load, infer, and inspect skills from the terminal.

Commands:
    load        Select and load skills for a plan, print a summary
    infer       Show which skills some text would infer
    list        Show registry entries
    check       Report rule/default references to undeclared skills

Only a missing required argument is a hard failure. Everything else prints
a diagnostic to stderr and exits 0 with whatever could be loaded.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .inference import infer_skills
from .loader import select_and_load
from .models import LoadResult
from .recorder import record_load
from .registry import dangling_references, find_registry_location, load_registry, search_skills

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _registry_location(skills_dir: Optional[str]) -> Optional[Path]:
    if skills_dir:
        return Path(skills_dir)
    location = find_registry_location()
    if location is None:
        err_console.print("[red]Skills directory not found[/red]")
    return location


@click.group()
@click.version_option(__version__, prog_name="planskills")
@click.option("--verbose", "-v", is_flag=True, help="Show debug diagnostics on stderr.")
def main(verbose: bool) -> None:
    """planskills — budgeted skill injection for agent task plans.

    Picks skills from a plan's header (or infers them from its text), loads
    them within the registry's limits, and renders an injection block.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("plan_path", type=click.Path())
@click.option("--infer-text", default=None, help="Infer from this text instead of the plan.")
@click.option("--output", is_flag=True, help="Also print the formatted skills block.")
@click.option("--no-log", is_flag=True, help="Don't write a load record.")
@click.option("--skills-dir", default=None, help="Skills directory (default: auto-detect).")
@click.option("--log-dir", default=None, help="Directory for load records.")
def load(
    plan_path: str,
    infer_text: str | None,
    output: bool,
    no_log: bool,
    skills_dir: str | None,
    log_dir: str | None,
) -> None:
    """Load skills for PLAN_PATH and report what was loaded."""
    location = _registry_location(skills_dir)
    registry = load_registry(location) if location else None
    if registry is None:
        err_console.print("[yellow]No skills registry available; nothing loaded.[/yellow]")

    result = LoadResult()
    if registry is not None:
        result = select_and_load(Path(plan_path), infer_text=infer_text, registry=registry)

    click.echo(f"Skills loaded: {', '.join(result.loaded_ids) or 'none'}")
    click.echo(f"Total lines: {result.total_lines}")
    for outcome in result.skipped:
        err_console.print(f"[dim]Skipped {outcome.id}: {outcome.reason.value}[/dim]")

    if not no_log and registry is not None:
        log_file = record_load(
            plan_path,
            result.loaded_ids,
            result.total_lines,
            log_dir=Path(log_dir) if log_dir else None,
            max_total_lines=registry.limits.max_total_lines,
        )
        if log_file is None:
            err_console.print("[yellow]Could not write skills log.[/yellow]")

    if output:
        console.print("\n--- Skills Block ---\n")
        click.echo(result.block)


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--skills-dir", default=None, help="Skills directory (default: auto-detect).")
def infer(text: tuple[str, ...], skills_dir: str | None) -> None:
    """Show the skills inferred from TEXT."""
    location = _registry_location(skills_dir)
    registry = load_registry(location) if location else None
    if registry is None:
        return

    inferred = infer_skills(" ".join(text), registry)
    click.echo(f"Inferred skills: {', '.join(inferred) or 'none'}")


@main.command("list")
@click.option("--tag", default=None, help="Only show skills matching this id, tag, or text.")
@click.option("--skills-dir", default=None, help="Skills directory (default: auto-detect).")
def list_skills(tag: str | None, skills_dir: str | None) -> None:
    """Show skills declared in the registry."""
    location = _registry_location(skills_dir)
    registry = load_registry(location) if location else None
    if registry is None:
        return

    skills = search_skills(registry, tag) if tag else dict(registry.skills)
    if not skills:
        console.print("[dim]No skills found.[/dim]")
        return

    table = Table(title="Available Skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Path")
    table.add_column("Tags", style="yellow")
    table.add_column("Max lines", justify="right")
    table.add_column("Default", style="green")

    defaults = set(registry.defaults.always_load)
    for skill_id, skill in skills.items():
        table.add_row(
            skill_id,
            skill.path,
            ", ".join(skill.tags) or "-",
            str(skill.max_lines) if skill.max_lines is not None else "-",
            "yes" if skill_id in defaults else "",
        )

    console.print(table)
    limits = registry.limits
    console.print(
        f"[dim]Limits: {limits.max_skills_per_plan} skills, "
        f"{limits.max_total_lines} lines per plan[/dim]"
    )


@main.command()
@click.option("--skills-dir", default=None, help="Skills directory (default: auto-detect).")
def check(skills_dir: str | None) -> None:
    """Report registry references to skills that aren't declared."""
    location = _registry_location(skills_dir)
    registry = load_registry(location) if location else None
    if registry is None:
        return

    problems = dangling_references(registry)
    missing_files = [
        skill_id
        for skill_id in registry.skills
        if not (registry.base_dir / registry.skills[skill_id].path).is_file()
    ]

    if not problems and not missing_files:
        console.print(f"[green]Registry OK:[/green] {len(registry.skills)} skills")
        return

    for problem in problems:
        err_console.print(f"[yellow]Unknown skill referenced by {problem}[/yellow]")
    for skill_id in missing_files:
        err_console.print(f"[yellow]Skill file missing:[/yellow] {skill_id}")


if __name__ == "__main__":
    main()
