"""MCP tool surface for the FluxFrame bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .constants import SERVER_NAME
from .errors import BootstrapError
from .services import BootstrapServices

logger = logging.getLogger(__name__)


async def _guard(call: Awaitable[Dict[str, Any]]) -> Dict[str, Any]:
    """Await ``call`` and turn recoverable failures into error payloads."""
    try:
        return await call
    except BootstrapError as e:
        logger.info(f"Bootstrap tool call rejected: {e.message}")
        return e.to_payload()


def setup_bootstrap_tools(mcp: FastMCP, services: BootstrapServices) -> None:
    """Register the workflow, ledger and finalization tools on ``mcp``."""

    engine = services.engine

    @mcp.tool()
    async def get_bootstrap_state() -> Dict[str, Any]:
        """Get current bootstrap progress: phase/step pointer, completed steps
        and collected information."""
        return await _guard(engine.get_state())

    @mcp.tool()
    async def get_next_step() -> Dict[str, Any]:
        """Get the current step with instructions and the information it requires."""
        return await _guard(engine.get_next_step())

    @mcp.tool()
    async def complete_step(
        stepId: str,
        collectedInfo: Optional[Dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Mark the current step complete and save the information collected for it.

        Only call this after the step has been fully executed. Fails without
        changing anything if the step is not current or required info is missing.

        Args:
            stepId: Step ID, e.g. '1.1' or '2.3'.
            collectedInfo: Information collected during this step.
            notes: Optional notes about the step completion.
        """
        return await _guard(engine.complete_step(stepId, collectedInfo, notes))

    @mcp.tool()
    async def validate_step(stepId: str) -> Dict[str, Any]:
        """Check whether a step's required information is already collected."""
        return await _guard(engine.validate_step(stepId))

    @mcp.tool()
    async def update_bootstrap_info(info: Dict[str, Any]) -> Dict[str, Any]:
        """Merge information into the collected info without completing a step."""
        return await _guard(engine.update_info(info))

    @mcp.tool()
    async def get_workflow_overview() -> Dict[str, Any]:
        """Get every phase and step of the bootstrap workflow."""
        return await _guard(engine.get_workflow_overview())

    @mcp.tool()
    async def reset_bootstrap(confirm: bool = False) -> Dict[str, Any]:
        """Reset bootstrap state and start over. Clears all progress and ledgers.

        Args:
            confirm: Must be true to reset.
        """
        return await _guard(engine.reset(confirm))

    @mcp.tool()
    async def log_decision(
        category: str,
        decision: str,
        reasoning: str,
        alternatives: Optional[List[str]] = None,
        implications: Optional[str] = None,
        stepId: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record a configuration decision and why it was made.

        Args:
            category: e.g. project_basics, ai_tools, documentation, infrastructure,
                configuration, architecture, scenario, migration, custom.
            decision: What was decided.
            reasoning: Why.
            alternatives: Options that were considered and rejected.
            implications: Consequences worth remembering.
            stepId: Originating step; defaults to the current step.
        """
        return await _guard(
            services.decisions.record(
                category, decision, reasoning, alternatives, implications, stepId
            )
        )

    @mcp.tool()
    async def get_decisions(category: Optional[str] = None) -> Dict[str, Any]:
        """List logged decisions grouped by category, optionally filtered by one."""
        return await _guard(services.decisions.query(category))

    @mcp.tool()
    async def sync_decisions_document(docsDir: Optional[str] = None) -> Dict[str, Any]:
        """Regenerate the bootstrap decisions document in the docs directory."""
        return await _guard(services.decisions.sync_document(docsDir))

    @mcp.tool()
    async def log_future_item(
        tier: str,
        category: str,
        intention: str,
        timeframe: Optional[str] = None,
        fluxframeImpact: Optional[str] = None,
        placeholder: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record an intention that is not implemented yet.

        Args:
            tier: 'planned' (placeholders prepared now) or 'aspirational'
                (documentation only).
            category: Free-form category such as environments or features.
            intention: What is intended.
            timeframe: Defaults to 'soon' for planned and 'someday' for aspirational.
            fluxframeImpact: How the intention shapes the generated setup.
            placeholder: Placeholder created for a planned item.
        """
        return await _guard(
            services.future_state.record(
                tier, category, intention, timeframe, fluxframeImpact, placeholder
            )
        )

    @mcp.tool()
    async def get_future_state(tier: Optional[str] = None) -> Dict[str, Any]:
        """List future-state items for one tier, or both tiers with counts."""
        return await _guard(services.future_state.query(tier))

    @mcp.tool()
    async def finalize_bootstrap(keepState: bool = False) -> Dict[str, Any]:
        """Activate staged rules, remove templates and the bootstrap state,
        regenerate README.md and return the guide for switching to the
        project MCP server.

        Safe to call again after a partial failure.
        """

        async def _finalize() -> Dict[str, Any]:
            result = await services.finalizer.finalize(keep_state=keepState)
            return result.to_payload()

        return await _guard(_finalize())

    @mcp.tool()
    async def start_change_request(
        description: str,
        changeType: str,
        affectedFeature: str,
        severity: str = "medium",
    ) -> Dict[str, Any]:
        """Open a change request (bug, refinement, requirement_change,
        misinterpretation or alteration) and return its ID."""
        return await _guard(
            services.changes.start(description, changeType, affectedFeature, severity)
        )

    @mcp.tool()
    async def mark_change_resolved(changeId: str) -> Dict[str, Any]:
        """Record that the user confirmed the change works; returns the documentation checklist."""
        return await _guard(services.changes.mark_resolved(changeId))

    @mcp.tool()
    async def close_change_request(changeId: str, documentationFile: str) -> Dict[str, Any]:
        """Close a documented change request."""
        return await _guard(services.changes.close(changeId, documentationFile))

    @mcp.tool()
    async def get_change_request(changeId: str) -> Dict[str, Any]:
        """Get one change request by ID."""
        return await _guard(services.changes.get(changeId))

    @mcp.tool()
    async def list_change_requests(status: Optional[str] = None) -> Dict[str, Any]:
        """List change requests, optionally filtered by status."""
        return await _guard(services.changes.list(status))


def create_server(services: Optional[BootstrapServices] = None) -> FastMCP:
    """Build the bootstrap MCP server for a project root."""
    services = services or BootstrapServices.create()
    mcp = FastMCP(SERVER_NAME)
    setup_bootstrap_tools(mcp, services)
    logger.info(f"Bootstrap server ready for {services.project_root}")
    return mcp
