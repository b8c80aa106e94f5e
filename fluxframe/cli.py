"""Command line interface for the FluxFrame bootstrap."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Dict, Optional

import typer

from fluxframe.config import load_config, resolve_project_root
from fluxframe.errors import BootstrapError
from fluxframe.ledgers import render_decisions_document
from fluxframe.server import create_server
from fluxframe.services import BootstrapServices

app = typer.Typer(help="CLI for the FluxFrame bootstrap workflow")

decisions_app = typer.Typer(help="Commands for the decisions ledger")
app.add_typer(decisions_app, name="decisions")


def _services(ctx: typer.Context) -> BootstrapServices:
    return ctx.obj


def _run(call: Awaitable[Any]) -> Any:
    try:
        return asyncio.run(call)
    except BootstrapError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
        for key, value in e.details.items():
            typer.echo(f"  {key}: {value}")
        raise typer.Exit(code=1)


def _echo_json(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Optional[Path] = typer.Option(
        None, "--project-root", help="Project being bootstrapped (default: current dir)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to fluxframe.yaml"),
) -> None:
    """FluxFrame bootstrap CLI entry point."""
    root = resolve_project_root(project_root)
    loaded = load_config(str(config) if config else None, project_root=root)
    # stdout carries the MCP stream when serving, so logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, loaded.log_level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = BootstrapServices.create(root, loaded)


@app.command("serve")
def serve(ctx: typer.Context) -> None:
    """
    Run the bootstrap MCP server over stdio.

    Point the AI assistant's MCP configuration at this command for the
    duration of the bootstrap; finalize prints how to switch to the
    project's own server afterwards.

    Example:
        fluxframe --project-root ~/code/my-app serve
    """
    create_server(_services(ctx)).run()


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show bootstrap progress and collected information."""
    payload = _run(_services(ctx).engine.get_state())
    current = payload["current"]
    progress = payload["progress"]
    typer.echo(
        f"Bootstrap {payload['status']}: {progress['completedSteps']}/{progress['totalSteps']} "
        f"steps ({progress['percentComplete']}%)"
    )
    typer.echo(f"Current: {current['stepId']} {current['step']} ({current['phase']})")
    if payload["scenario"]:
        typer.echo(f"Scenario: {payload['scenario']}")
    for key, value in payload["collectedInfo"].items():
        typer.echo(f"- {key}: {value}")


@app.command("next")
def next_step(ctx: typer.Context) -> None:
    """Show the current step and its instructions."""
    _echo_json(_run(_services(ctx).engine.get_next_step()))


@app.command("overview")
def overview(ctx: typer.Context) -> None:
    """List every phase and step of the bootstrap workflow."""
    workflow = _services(ctx).engine.workflow
    for phase in workflow.phases:
        typer.echo(f"{phase.id}: {phase.name}")
        for step in phase.steps:
            required = f" [requires: {', '.join(step.required_info)}]" if step.required_info else ""
            typer.echo(f"  {step.id} {step.name}{required}")


@app.command("reset")
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Confirm the reset"),
) -> None:
    """
    Reset the bootstrap state and start over.

    Clears all progress, collected information and ledgers. Requires --yes.
    """
    _run(_services(ctx).engine.reset(confirm=yes))
    typer.echo("Bootstrap state reset to initial state")


@decisions_app.command("show")
def decisions_show(ctx: typer.Context) -> None:
    """Print the rendered decisions document."""
    state = _run(_services(ctx).store.load())
    typer.echo(render_decisions_document(state))


@decisions_app.command("sync")
def decisions_sync(
    ctx: typer.Context,
    docs_dir: Optional[str] = typer.Option(None, "--docs-dir", help="Documentation directory"),
) -> None:
    """Regenerate the decisions document in the documentation directory."""
    payload = _run(_services(ctx).decisions.sync_document(docs_dir))
    typer.echo(f"Wrote {payload['decisionCount']} decisions to {payload['path']}")


@app.command("finalize")
def finalize(
    ctx: typer.Context,
    keep_state: bool = typer.Option(False, "--keep-state", help="Keep the bootstrap state file"),
) -> None:
    """
    Activate staged rules, remove templates and regenerate README.md.

    Safe to run again after a partial failure. Exits with code 1 when any
    action failed.
    """
    result = _run(_services(ctx).finalizer.finalize(keep_state=keep_state))
    for action in result.actions:
        typer.echo(f"✔ {action}")
    for warning in result.warnings:
        typer.secho(f"! {warning}", fg=typer.colors.YELLOW)
    for error in result.errors:
        typer.secho(f"✘ {error}", fg=typer.colors.RED)
    if result.swap_guide:
        guide = result.swap_guide
        typer.echo(f"\nProject MCP server: {guide.entry_point}")
        typer.echo(guide.config_snippet)
        for tool in guide.tools:
            location = tool.config_file or "(unknown location)"
            typer.echo(f"- {tool.display_name}: {location}")
            typer.echo(f"  {tool.restart_instruction}")
    if not result.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
