"""Append-only ledger of configuration decisions and their reasoning."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import anyio

from ..constants import DECISION_CATEGORIES, DECISIONS_FILENAME
from ..errors import PathOutsideProjectError
from ..persistence import BootstrapState, DecisionEntry, StateStore

logger = logging.getLogger(__name__)


def category_title(category: str) -> str:
    """Display title for ``category``; unknown ones are title-cased."""
    if category in DECISION_CATEGORIES:
        return DECISION_CATEGORIES[category]
    words = category.replace("_", " ").replace("-", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words) or category


def group_by_category(decisions: List[DecisionEntry]) -> Dict[str, List[DecisionEntry]]:
    """Group decisions by category, keeping encounter order everywhere."""
    groups: Dict[str, List[DecisionEntry]] = {}
    for entry in decisions:
        groups.setdefault(entry.category, []).append(entry)
    return groups


def _render_entry(entry: DecisionEntry) -> List[str]:
    lines = [
        f"### {entry.decision}",
        "",
        f"- **Step:** {entry.step_id}",
        f"- **Logged:** {entry.timestamp.date().isoformat()}",
        f"- **Reasoning:** {entry.reasoning}",
    ]
    if entry.alternatives:
        lines += ["", "**Alternatives considered:**", ""]
        lines += [f"- {alternative}" for alternative in entry.alternatives]
    if entry.implications:
        lines += ["", f"**Implications:** {entry.implications}"]
    lines += ["", "---", ""]
    return lines


def render_decisions_document(state: BootstrapState) -> str:
    """Render the decisions ledger as markdown.

    Known categories come first in their curated order, then any other
    category in first-seen order. The output depends only on ``state`` so
    rendering the same ledger twice gives identical text.
    """
    groups = group_by_category(state.decisions)
    project_name = state.collected_info.get("project_name")

    lines = ["# Bootstrap Decisions", ""]
    if project_name:
        lines += [f"**Project:** {project_name}", ""]
    lines += [
        "This document records what was decided while bootstrapping the project "
        "and why. It is regenerated from the bootstrap state on every sync.",
        "",
    ]

    if not groups:
        lines += ["_No decisions have been logged yet._", ""]

    ordered = [c for c in DECISION_CATEGORIES if c in groups]
    ordered += [c for c in groups if c not in DECISION_CATEGORIES]
    for category in ordered:
        lines += [f"## {category_title(category)}", ""]
        for entry in groups[category]:
            lines += _render_entry(entry)

    lines += [
        "## Summary",
        "",
        f"- **Total decisions:** {len(state.decisions)}",
        f"- **Categories:** {', '.join(groups) if groups else 'none'}",
        "",
    ]
    return "\n".join(lines)


class DecisionLedger:
    """Records decisions into the state document and renders them."""

    def __init__(self, store: StateStore, project_root: str | Path, default_docs_location: str) -> None:
        self._store = store
        self._root = Path(project_root)
        self._default_docs_location = default_docs_location

    async def record(
        self,
        category: str,
        decision: str,
        reasoning: str,
        alternatives: Optional[List[str]] = None,
        implications: Optional[str] = None,
        step_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        state = await self._store.load()
        entry = DecisionEntry(
            id=f"DEC-{len(state.decisions) + 1:03d}",
            step_id=step_id or state.current_step,
            category=category,
            decision=decision,
            reasoning=reasoning,
            alternatives=alternatives or [],
            implications=implications,
        )
        state.decisions.append(entry)
        await self._store.save(state)
        logger.info(f"Logged decision {entry.id} in category '{category}'")
        return {
            "success": True,
            "decision": entry.to_payload(),
            "totalDecisions": len(state.decisions),
        }

    async def query(self, category: Optional[str] = None) -> Dict[str, Any]:
        state = await self._store.load()
        decisions = state.decisions
        if category is not None:
            decisions = [d for d in decisions if d.category == category]
        groups = group_by_category(decisions)
        return {
            "success": True,
            "filter": category,
            "totalDecisions": len(decisions),
            "decisions": [entry.to_payload() for entry in decisions],
            "byCategory": {
                name: [entry.to_payload() for entry in entries]
                for name, entries in groups.items()
            },
        }

    async def sync_document(self, docs_dir: Optional[str] = None) -> Dict[str, Any]:
        """Regenerate the decisions document beneath the docs directory."""
        state = await self._store.load()
        location = (
            docs_dir
            or state.collected_info.get("docs_location")
            or self._default_docs_location
        )
        root = self._root.resolve()
        docs = (root / str(location)).resolve()
        if not docs.is_relative_to(root):
            raise PathOutsideProjectError(str(location), str(root))

        target = anyio.Path(docs / DECISIONS_FILENAME)
        await target.parent.mkdir(parents=True, exist_ok=True)
        await target.write_text(render_decisions_document(state), encoding="utf-8")
        logger.info(f"Wrote {len(state.decisions)} decisions to {target}")
        return {
            "success": True,
            "path": str(target),
            "decisionCount": len(state.decisions),
        }
