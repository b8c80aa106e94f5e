"""Shared constants for the FluxFrame bootstrap engine."""

from __future__ import annotations

STATE_VERSION = "1.0.0"

# Sentinel stored in ``currentStep``/``currentPhase`` once every step is done.
COMPLETE = "COMPLETE"

DEFAULT_STATE_FILE = ".fluxframe-bootstrap-state.json"
DEFAULT_CONFIG_FILE = "fluxframe.yaml"
DEFAULT_DOCS_LOCATION = "project_docs"
DECISIONS_FILENAME = "bootstrap_decisions.md"
README_FILENAME = "README.md"

SERVER_NAME = "fluxframe-bootstrap"

TIER_PLANNED = "planned"
TIER_ASPIRATIONAL = "aspirational"
FUTURE_TIERS = (TIER_PLANNED, TIER_ASPIRATIONAL)

DEFAULT_TIMEFRAMES = {
    TIER_PLANNED: "soon",
    TIER_ASPIRATIONAL: "someday",
}

TIER_DESCRIPTIONS = {
    TIER_PLANNED: (
        "Near-term intentions. Placeholders and scaffolding are prepared now "
        "so the feature can be picked up without restructuring."
    ),
    TIER_ASPIRATIONAL: (
        "Long-term ideas. Documented for context only; nothing is scaffolded."
    ),
}

# Curated display order for the decisions document. Categories missing from
# this table are appended after these, title-cased, in first-seen order.
DECISION_CATEGORIES: dict[str, str] = {
    "project_basics": "Project Basics",
    "ai_tools": "AI Tool Selection",
    "documentation": "Documentation Location",
    "infrastructure": "Infrastructure",
    "configuration": "Configuration Management",
    "architecture": "Architecture",
    "scenario": "Scenario Classification",
    "migration": "Migration & Merge Decisions",
    "custom": "Custom Decisions",
}

CHANGE_TYPES = (
    "bug",
    "refinement",
    "requirement_change",
    "misinterpretation",
    "alteration",
)
CHANGE_SEVERITIES = ("low", "medium", "high", "critical")

CHANGE_INVESTIGATING = "investigating"
CHANGE_DOCUMENTING = "documenting"
CHANGE_COMPLETE = "complete"
