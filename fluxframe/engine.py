"""Step validation and progression for the bootstrap workflow."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .constants import COMPLETE
from .errors import (
    ResetNotConfirmedError,
    StepNotCurrentError,
    StepValidationError,
    UnknownStepError,
    WorkflowCompleteError,
)
from .persistence import BootstrapState, StateStore, StepNote
from .persistence.models import utcnow
from .workflow import BOOTSTRAP_WORKFLOW, Workflow, step_instructions

logger = logging.getLogger(__name__)


def validate_step_info(
    step_id: str,
    state: BootstrapState,
    supplied: Optional[Dict[str, Any]] = None,
    workflow: Workflow = BOOTSTRAP_WORKFLOW,
) -> Dict[str, Any]:
    """Check the step's required keys against collected plus supplied info.

    A key counts as present when its value is truthy. Steps without required
    keys always pass.
    """
    location = workflow.find_step(step_id)
    if location is None:
        raise UnknownStepError(step_id)

    step = location.step
    merged = {**state.collected_info, **(supplied or {})}
    present = [key for key in step.required_info if merged.get(key)]
    missing = [key for key in step.required_info if not merged.get(key)]
    return {
        "canComplete": not missing,
        "stepId": step.id,
        "stepName": step.name,
        "requiredInfo": list(step.required_info),
        "collectedInfo": present,
        "missingInfo": missing,
        "validation": step.validation,
    }


class BootstrapEngine:
    """Drives the phase/step state machine over a :class:`StateStore`."""

    def __init__(self, store: StateStore, workflow: Workflow = BOOTSTRAP_WORKFLOW) -> None:
        self._store = store
        self.workflow = workflow

    def _progress(self, state: BootstrapState) -> Dict[str, Any]:
        total = self.workflow.total_steps
        done = len(state.completed_steps)
        return {
            "totalSteps": total,
            "completedSteps": done,
            "percentComplete": round(done / total * 100) if total else 100,
        }

    async def get_state(self) -> Dict[str, Any]:
        """Summarize progress, the current pointer and collected information."""
        state = await self._store.load()
        location = self.workflow.find_step(state.current_step)
        document = state.to_payload()
        return {
            "success": True,
            "status": "complete" if state.is_complete else "active",
            "progress": self._progress(state),
            "current": {
                "phase": location.phase.name if location else state.current_phase,
                "phaseId": state.current_phase,
                "step": location.step.name if location else state.current_step,
                "stepId": state.current_step,
            },
            "scenario": state.scenario,
            "collectedInfo": state.collected_info,
            "completedSteps": state.completed_steps,
            "decisionCount": len(state.decisions),
            "futureItemCount": len(state.future_state.planned)
            + len(state.future_state.aspirational),
            "startedAt": document["startedAt"],
            "lastUpdated": document["lastUpdated"],
            "completedAt": document["completedAt"],
        }

    async def get_next_step(self) -> Dict[str, Any]:
        """Describe the current step with instructions for the calling agent."""
        state = await self._store.load()
        if state.is_complete:
            return {
                "success": True,
                "complete": True,
                "message": "Bootstrap complete. Run finalize_bootstrap to activate the project configuration.",
                "completedAt": state.to_payload()["completedAt"],
            }

        location = self.workflow.find_step(state.current_step)
        if location is None:
            raise UnknownStepError(state.current_step)

        return {
            "success": True,
            "complete": False,
            "phase": {
                "id": location.phase.id,
                "name": location.phase.name,
                "description": location.phase.description,
            },
            "step": location.step.model_dump(by_alias=True),
            "instructions": step_instructions(location.step.id),
            "collectedInfo": state.collected_info,
        }

    async def validate_step(self, step_id: str) -> Dict[str, Any]:
        """Dry-run validation against already collected info only."""
        state = await self._store.load()
        return {"success": True, **validate_step_info(step_id, state, workflow=self.workflow)}

    async def complete_step(
        self,
        step_id: str,
        collected_info: Optional[Dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Complete the current step and advance the pointer.

        Raises:
            WorkflowCompleteError: The workflow already reached ``COMPLETE``.
            StepNotCurrentError: ``step_id`` is not the current step.
            StepValidationError: Required information is still missing.

        Nothing is written when any of these is raised.
        """
        state = await self._store.load()
        if state.is_complete:
            raise WorkflowCompleteError(step_id, state.current_step)
        if state.current_step != step_id:
            raise StepNotCurrentError(step_id, state.current_step)

        validation = validate_step_info(step_id, state, collected_info, self.workflow)
        if not validation["canComplete"]:
            raise StepValidationError(step_id, validation["missingInfo"], validation)

        state.completed_steps.append(step_id)
        state.merge_info(collected_info)
        if notes:
            state.notes.append(StepNote(step_id=step_id, note=notes))

        next_location = self.workflow.next_after(step_id)
        if next_location is not None:
            state.current_step = next_location.step.id
            state.current_phase = next_location.phase.id
            next_step = {
                "id": next_location.step.id,
                "name": next_location.step.name,
                "phase": next_location.phase.name,
            }
        else:
            state.current_step = COMPLETE
            state.current_phase = COMPLETE
            state.completed_at = utcnow()
            next_step = {"id": COMPLETE, "name": "Bootstrap Complete!"}

        await self._store.save(state)
        logger.info(f"Completed bootstrap step {step_id}; next is {state.current_step}")
        return {
            "success": True,
            "completedStep": step_id,
            "nextStep": next_step,
            "totalCompleted": len(state.completed_steps),
        }

    async def update_info(self, info: Dict[str, Any]) -> Dict[str, Any]:
        """Merge auxiliary collected info without completing a step."""
        state = await self._store.load()
        state.merge_info(info)
        await self._store.save(state)
        return {
            "success": True,
            "updatedInfo": info,
            "allCollectedInfo": state.collected_info,
        }

    async def get_workflow_overview(self) -> Dict[str, Any]:
        return {
            "success": True,
            "workflow": self.workflow.model_dump(by_alias=True),
            "totalPhases": len(self.workflow.phases),
            "totalSteps": self.workflow.total_steps,
            "description": "FluxFrame bootstrap process with state management and validation",
        }

    async def reset(self, confirm: bool = False) -> Dict[str, Any]:
        """Replace the whole state document with a fresh default.

        This is the only operation allowed to move ``currentStep`` backwards
        or out of ``COMPLETE``.
        """
        if confirm is not True:
            raise ResetNotConfirmedError()

        new_state = BootstrapState.initial(self.workflow)
        await self._store.save(new_state)
        logger.warning(f"Bootstrap state reset at {self._store.location}")
        return {
            "success": True,
            "message": "Bootstrap state reset to initial state",
            "newState": new_state.to_payload(),
        }
