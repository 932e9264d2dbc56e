"""
devboot — CLI entrypoint.

Usage:
    devboot                # provision this machine
    devboot apply --json
    devboot detect
    devboot status
    python -m devboot --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devboot import __version__
from devboot.core.observability.logging_config import (
    resolve_console_level,
    setup_from_environment,
)

_OUTCOME_STYLE: dict[str, tuple[str, str]] = {
    "already-present": ("✓", "green"),
    "noop": ("✓", "green"),
    "installed": ("+", "cyan"),
    "applied": ("+", "cyan"),
    "linked": ("+", "cyan"),
    "copied": ("+", "cyan"),
    "manual-step-queued": ("!", "yellow"),
    "missing-source": ("!", "yellow"),
    "skipped": ("⊘", "white"),
    "failed": ("✗", "red"),
    "fatal": ("✗", "red"),
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="devboot")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: $DEVBOOT_CONFIG or ~/.config/devboot/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devboot — set up a development environment, safely re-runnable.

    Without a sub-command, provisions this machine (same as ``apply``).
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_environment(
        resolve_console_level(debug=debug, verbose=verbose, quiet=quiet, environ=os.environ),
        os.environ,
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(apply)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(ctx: click.Context, as_json: bool) -> None:
    """Install tools and configuration on this machine."""
    from devboot.core.use_cases.apply import run_apply

    quiet = ctx.obj.get("quiet", False)

    def _progress(phase: str, step: str, outcome: str) -> None:
        if as_json or quiet:
            return
        icon, color = _OUTCOME_STYLE.get(outcome, ("•", "white"))
        click.secho(f"   {icon} {step} ", fg=color, nl=False)
        click.echo(f"({outcome})")

    if not as_json:
        click.secho("\n🚀 devboot — provisioning this machine", fg="cyan", bold=True)

    result = run_apply(config_path=ctx.obj.get("config_path"), on_progress=_progress)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None  # guaranteed after error check above

    click.echo()
    counts = report.counts()
    summary = ", ".join(f"{n} {outcome}" for outcome, n in sorted(counts.items()))
    click.secho(f"   Platform: {result.platform}", fg="white", bold=True)
    click.echo(f"   Steps: {len(report.steps)} ({summary})")

    if report.backup_dir:
        click.echo()
        click.secho(f"   💾 Backups saved to: {report.backup_dir}", fg="cyan")

    if report.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warning in report.warnings:
            click.echo(f"   • {warning}")

    if report.manual_steps:
        click.echo()
        click.secho("📋 Manual steps required:", fg="yellow", bold=True)
        for i, instruction in enumerate(report.manual_steps, 1):
            click.echo(f"   {i}. {instruction}")

    if result.recommended_steps and not quiet:
        click.echo()
        click.secho("💡 Recommended next steps:", fg="white", bold=True)
        for i, step in enumerate(result.recommended_steps, 1):
            click.echo(f"   {i}. {step}")

    click.echo()
    click.secho("✅ Setup complete", fg="green", bold=True)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(as_json: bool) -> None:
    """Detect the platform and its package manager."""
    from devboot.core.use_cases.detect import run_detect

    result = run_detect()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n🔍 Platform: {result.platform}", fg="cyan", bold=True)
    if result.package_manager is None:
        click.echo("   Package manager: none (tools are cloned, scripted or listed as manual steps)")
    elif result.package_manager_found:
        click.secho(f"   ✓ {result.package_manager}", fg="green")
    else:
        color = "red" if result.package_manager_required else "yellow"
        click.secho(f"   ✗ {result.package_manager} (not installed)", fg=color)
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show which tools are already installed (changes nothing)."""
    from devboot.core.use_cases.status import get_status

    result = get_status(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"\n📋 Tools on {result.platform}", fg="cyan", bold=True)
    for tool in result.tools:
        if not tool.applies:
            click.secho(f"   ⊘ {tool.label} ", fg="white", nl=False)
            click.echo("(not applicable)")
        elif tool.present:
            click.secho(f"   ✓ {tool.label}", fg="green")
        else:
            click.secho(f"   ✗ {tool.label} ", fg="red", nl=False)
            click.echo(f"→ {tool.strategy}")

    click.echo()
    missing = len(result.missing)
    if missing:
        click.secho(f"   {missing} tool(s) missing; run 'devboot apply'", fg="yellow")
    else:
        click.secho("   Everything is installed", fg="green")
    click.echo()


if __name__ == "__main__":
    cli()
