"""Decision ledger tests."""

from datetime import datetime, timezone

import pytest

from fluxframe.errors import PathOutsideProjectError
from fluxframe.ledgers.decisions import category_title, render_decisions_document
from fluxframe.persistence import BootstrapState, DecisionEntry


def _entry(n: int, category: str, **kwargs) -> DecisionEntry:
    return DecisionEntry(
        id=f"DEC-{n:03d}",
        timestamp=datetime(2026, 3, n, tzinfo=timezone.utc),
        step_id=kwargs.pop("step_id", "2.1"),
        category=category,
        decision=f"Decision {n}",
        reasoning=f"Reason {n}",
        **kwargs,
    )


def _state_with(*entries: DecisionEntry) -> BootstrapState:
    state = BootstrapState.initial()
    state.decisions = list(entries)
    return state


@pytest.mark.asyncio
async def test_record_defaults_step_to_current(services, complete_steps):
    await complete_steps(services, 3)

    result = await services.decisions.record(
        "scenario", "Greenfield", "No existing docs", alternatives=["Migration"]
    )
    assert result["decision"]["id"] == "DEC-001"
    assert result["decision"]["stepId"] == "1.2"
    assert result["decision"]["alternatives"] == ["Migration"]

    second = await services.decisions.record("custom", "x", "y", step_id="0.1")
    assert second["decision"]["id"] == "DEC-002"
    assert second["decision"]["stepId"] == "0.1"
    assert second["totalDecisions"] == 2


@pytest.mark.asyncio
async def test_query_filters_and_groups(services):
    await services.decisions.record("ai_tools", "Claude Code", "Team standard")
    await services.decisions.record("team_norms", "Pairing", "Onboarding")
    await services.decisions.record("ai_tools", "Roo Code", "Second opinion")

    everything = await services.decisions.query()
    assert list(everything["byCategory"]) == ["ai_tools", "team_norms"]
    assert [d["decision"] for d in everything["byCategory"]["ai_tools"]] == ["Claude Code", "Roo Code"]

    filtered = await services.decisions.query("ai_tools")
    assert filtered["totalDecisions"] == 2
    assert list(filtered["byCategory"]) == ["ai_tools"]

    assert (await services.decisions.query("AI_TOOLS"))["totalDecisions"] == 0


def test_render_orders_known_categories_first():
    state = _state_with(
        _entry(1, "zeta_custom"),
        _entry(2, "architecture"),
        _entry(3, "alpha-notes"),
        _entry(4, "project_basics"),
        _entry(5, "architecture"),
    )

    text = render_decisions_document(state)

    headings = [line for line in text.splitlines() if line.startswith("## ")]
    assert headings == [
        "## Project Basics",
        "## Architecture",
        "## Zeta Custom",
        "## Alpha Notes",
        "## Summary",
    ]
    assert text.index("### Decision 2") < text.index("### Decision 5")
    assert "- **Total decisions:** 5" in text
    assert "- **Categories:** zeta_custom, architecture, alpha-notes, project_basics" in text


def test_render_entry_layout():
    state = _state_with(
        _entry(7, "infrastructure", step_id="2.4", alternatives=["Terraform", "Pulumi"], implications="CI needs creds"),
        _entry(8, "infrastructure"),
    )
    state.collected_info["project_name"] = "Acme"

    text = render_decisions_document(state)

    assert "**Project:** Acme" in text
    assert "- **Step:** 2.4" in text
    assert "- **Logged:** 2026-03-07" in text
    assert "- **Reasoning:** Reason 7" in text
    assert "**Alternatives considered:**\n\n- Terraform\n- Pulumi" in text
    assert "**Implications:** CI needs creds" in text
    entry_8 = text.split("### Decision 8")[1]
    assert "Alternatives" not in entry_8.split("---")[0]
    assert text.count("---") == 2


def test_render_is_deterministic():
    state = _state_with(_entry(1, "custom"), _entry(2, "odd_one"), _entry(3, "scenario"))
    assert render_decisions_document(state) == render_decisions_document(state.model_copy(deep=True))


def test_render_empty_ledger():
    text = render_decisions_document(BootstrapState.initial())
    assert "_No decisions have been logged yet._" in text
    assert "- **Categories:** none" in text


def test_category_titles():
    assert category_title("ai_tools") == "AI Tool Selection"
    assert category_title("deployment_targets") == "Deployment Targets"
    assert category_title("ci-cd") == "Ci Cd"


@pytest.mark.asyncio
async def test_sync_writes_under_collected_docs_location(services):
    await services.engine.update_info({"docs_location": "docs/project"})
    await services.decisions.record("documentation", "Keep docs in docs/project", "Existing layout")

    result = await services.decisions.sync_document()

    target = services.project_root / "docs" / "project" / "bootstrap_decisions.md"
    assert result["path"] == str(target)
    assert result["decisionCount"] == 1
    assert "## Documentation Location" in target.read_text()


@pytest.mark.asyncio
async def test_sync_regenerates_fully(services):
    await services.decisions.record("custom", "First", "r")
    first = await services.decisions.sync_document("notes")
    await services.engine.reset(confirm=True)
    await services.decisions.record("custom", "Second", "r")
    await services.decisions.sync_document("notes")

    content = (services.project_root / "notes" / "bootstrap_decisions.md").read_text()
    assert "Second" in content
    assert "First" not in content
    assert first["path"].endswith("notes/bootstrap_decisions.md")


@pytest.mark.asyncio
@pytest.mark.parametrize("docs_dir", ["ABSOLUTE", "../outside", "docs/../../outside"])
async def test_sync_refuses_locations_outside_the_project(services, tmp_path, docs_dir):
    if docs_dir == "ABSOLUTE":
        docs_dir = str(tmp_path.parent / "elsewhere")

    with pytest.raises(PathOutsideProjectError) as exc_info:
        await services.decisions.sync_document(docs_dir)

    assert exc_info.value.details["path"] == docs_dir
    assert not (tmp_path.parent / "outside").exists()
    assert not (tmp_path.parent / "elsewhere").exists()


@pytest.mark.asyncio
async def test_sync_refuses_collected_location_outside_the_project(services, tmp_path):
    await services.engine.update_info({"docs_location": str(tmp_path.parent / "shared_docs")})

    with pytest.raises(PathOutsideProjectError):
        await services.decisions.sync_document()
    assert not (tmp_path.parent / "shared_docs").exists()
