import json

import pytest

from fluxframe.errors import StepNotCurrentError
from fluxframe.server import _guard, create_server

EXPECTED_TOOLS = {
    "get_bootstrap_state",
    "get_next_step",
    "complete_step",
    "validate_step",
    "update_bootstrap_info",
    "get_workflow_overview",
    "reset_bootstrap",
    "log_decision",
    "get_decisions",
    "sync_decisions_document",
    "log_future_item",
    "get_future_state",
    "finalize_bootstrap",
    "start_change_request",
    "mark_change_resolved",
    "close_change_request",
    "get_change_request",
    "list_change_requests",
}


@pytest.mark.asyncio
async def test_server_registers_every_tool(services):
    server = create_server(services)

    tools = await server.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS
    complete = next(tool for tool in tools if tool.name == "complete_step")
    assert "stepId" in complete.inputSchema["properties"]


@pytest.mark.asyncio
async def test_guard_turns_bootstrap_errors_into_payloads():
    async def rejected():
        raise StepNotCurrentError("2.1", "0.1")

    payload = await _guard(rejected())

    assert payload == {
        "success": False,
        "error": "Cannot complete step - not current step",
        "currentStep": "0.1",
        "attemptedStep": "2.1",
    }


@pytest.mark.asyncio
async def test_guard_lets_unexpected_errors_through():
    async def broken():
        raise RuntimeError("disk on fire")

    with pytest.raises(RuntimeError):
        await _guard(broken())


@pytest.mark.asyncio
async def test_guard_passes_results_through(services):
    payload = await _guard(services.engine.validate_step("2.1"))

    assert payload["success"] is True
    assert payload["missingInfo"] == ["project_name", "project_purpose", "tech_stack"]


def _tool_payload(result):
    """Decode a FastMCP ``call_tool`` result into the tool's dict."""
    if isinstance(result, tuple):
        content, structured = result
        if isinstance(structured, dict) and "success" in structured:
            return structured
        result = content
    if isinstance(result, dict):
        return result
    return json.loads(result[0].text)


@pytest.mark.asyncio
async def test_complete_step_tool_rejects_non_current_step(services):
    server = create_server(services)

    result = await server.call_tool(
        "complete_step", {"stepId": "2.1", "collectedInfo": {"project_name": "Acme"}}
    )

    payload = _tool_payload(result)
    assert payload["success"] is False
    assert payload["currentStep"] == "0.1"
    assert payload["attemptedStep"] == "2.1"
    assert not await services.store.exists()


@pytest.mark.asyncio
async def test_complete_step_tool_advances(services):
    server = create_server(services)

    payload = _tool_payload(
        await server.call_tool("complete_step", {"stepId": "0.1", "notes": "Tools visible"})
    )

    assert payload["success"] is True
    assert payload["nextStep"]["id"] == "0.2"


@pytest.mark.asyncio
async def test_finalize_tool_returns_camel_case_result(services):
    (services.project_root / "bootstrap").mkdir()
    server = create_server(services)

    payload = _tool_payload(await server.call_tool("finalize_bootstrap", {"keepState": False}))

    assert payload["success"] is True
    assert "Removed bootstrap" in payload["actions"]
    assert payload["errors"] == []
    assert payload["swapGuide"]["serverName"].endswith("-docs")
    assert "configSnippet" in payload["swapGuide"]


@pytest.mark.asyncio
async def test_change_request_tools_round_trip(services):
    server = create_server(services)

    started = _tool_payload(
        await server.call_tool(
            "start_change_request",
            {"description": "Totals wrong", "changeType": "bug", "affectedFeature": "Billing"},
        )
    )
    fetched = _tool_payload(
        await server.call_tool("get_change_request", {"changeId": started["change"]["id"]})
    )
    missing = _tool_payload(await server.call_tool("get_change_request", {"changeId": "CHANGE-404"}))

    assert fetched["change"]["status"] == "investigating"
    assert missing == {
        "success": False,
        "error": "No change request with ID CHANGE-404",
        "changeId": "CHANGE-404",
    }
