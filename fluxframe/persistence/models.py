"""Data models for the persisted bootstrap state document."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..constants import COMPLETE, STATE_VERSION
from ..workflow import BOOTSTRAP_WORKFLOW, Workflow


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Document(BaseModel):
    """Base for models stored in the JSON document under camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StepNote(_Document):
    step_id: str
    timestamp: datetime = Field(default_factory=utcnow)
    note: str


class DecisionEntry(_Document):
    """One logged configuration decision and the reasoning behind it."""

    id: str
    timestamp: datetime = Field(default_factory=utcnow)
    step_id: str
    category: str
    decision: str
    reasoning: str
    alternatives: list[str] = Field(default_factory=list)
    implications: Optional[str] = None


class FutureItem(_Document):
    """An intention recorded for later implementation."""

    id: str
    timestamp: datetime = Field(default_factory=utcnow)
    step_id: str
    tier: Literal["planned", "aspirational"]
    category: str
    intention: str
    timeframe: str
    fluxframe_impact: Optional[str] = None
    placeholder: Optional[str] = None


class FutureState(_Document):
    planned: list[FutureItem] = Field(default_factory=list)
    aspirational: list[FutureItem] = Field(default_factory=list)


class ChangeRequest(_Document):
    """A tracked change request, addressed by id on every call."""

    id: str
    description: str
    change_type: str
    affected_feature: str
    severity: str
    status: Literal["investigating", "documenting", "complete"] = "investigating"
    started_at: datetime = Field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None
    archive_date: Optional[str] = None
    documentation_file: Optional[str] = None


class BootstrapState(_Document):
    """Session-spanning bootstrap progress; the single unit of persistence."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    version: str = STATE_VERSION
    started_at: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)
    current_phase: str
    current_step: str
    scenario: Optional[str] = None
    completed_steps: list[str] = Field(default_factory=list)
    collected_info: dict[str, Any] = Field(default_factory=dict)
    notes: list[StepNote] = Field(default_factory=list)
    decisions: list[DecisionEntry] = Field(default_factory=list)
    future_state: FutureState = Field(default_factory=FutureState)
    change_requests: list[ChangeRequest] = Field(default_factory=list)
    completed_at: Optional[datetime] = None

    @classmethod
    def initial(cls, workflow: Workflow = BOOTSTRAP_WORKFLOW) -> "BootstrapState":
        """Return a fresh document pointing at the first step of the catalog."""
        first = workflow.first_step()
        return cls(current_phase=first.phase.id, current_step=first.step.id)

    @property
    def is_complete(self) -> bool:
        return self.current_step == COMPLETE

    def merge_info(self, info: dict[str, Any] | None) -> None:
        """Merge ``info`` into ``collected_info``; later keys win."""
        if not info:
            return
        self.collected_info = {**self.collected_info, **info}
        if info.get("scenario"):
            self.scenario = str(info["scenario"])
