"""Error taxonomy for the bootstrap engine.

Every condition a caller can recover from is a :class:`BootstrapError`. The
tool surface turns these into ``success: false`` payloads instead of letting
them escape, so the calling agent can show them to the operator and retry.
"""

from __future__ import annotations

from typing import Any


class BootstrapError(Exception):
    """Base class for recoverable bootstrap failures."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        """Return a structured error payload for the tool surface."""
        return {"success": False, "error": self.message, **self.details}


class StepNotCurrentError(BootstrapError):
    """Completion was attempted for a step other than the current one."""

    def __init__(self, attempted_step: str, current_step: str) -> None:
        super().__init__(
            "Cannot complete step - not current step",
            currentStep=current_step,
            attemptedStep=attempted_step,
        )


class StepValidationError(BootstrapError):
    """Required information for a step is missing."""

    def __init__(self, step_id: str, missing_info: list[str], validation: dict[str, Any]) -> None:
        super().__init__(
            "Step validation failed",
            stepId=step_id,
            missingInfo=missing_info,
            validation=validation,
        )
        self.missing_info = missing_info


class UnknownStepError(BootstrapError):
    def __init__(self, step_id: str) -> None:
        super().__init__("Step not found", stepId=step_id)


class WorkflowCompleteError(BootstrapError):
    def __init__(self, attempted_step: str, current_step: str) -> None:
        super().__init__(
            "Bootstrap already complete - run finalize_bootstrap or reset",
            currentStep=current_step,
            attemptedStep=attempted_step,
        )


class ResetNotConfirmedError(BootstrapError):
    def __init__(self) -> None:
        super().__init__(
            "Reset not confirmed. Set confirm: true to reset bootstrap state."
        )


class InvalidTierError(BootstrapError):
    def __init__(self, tier: str, allowed: tuple[str, ...]) -> None:
        super().__init__(
            f"Invalid tier '{tier}'",
            tier=tier,
            allowedTiers=list(allowed),
        )


class StateCorruptedError(BootstrapError):
    """The persisted state document exists but cannot be parsed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(
            "Bootstrap state document is unreadable; fix or reset it",
            location=location,
            reason=reason,
        )


class UnknownChangeRequestError(BootstrapError):
    def __init__(self, change_id: str) -> None:
        super().__init__(
            f"No change request with ID {change_id}",
            changeId=change_id,
        )


class ChangeRequestStateError(BootstrapError):
    def __init__(self, change_id: str, status: str, expected: str) -> None:
        super().__init__(
            f"Change request {change_id} is '{status}', expected '{expected}'",
            changeId=change_id,
            status=status,
            expectedStatus=expected,
        )


class InvalidArgumentError(BootstrapError):
    def __init__(self, argument: str, value: Any, allowed: tuple[str, ...]) -> None:
        super().__init__(
            f"Invalid {argument} '{value}'",
            argument=argument,
            allowed=list(allowed),
        )


class PathOutsideProjectError(BootstrapError):
    """A requested output location resolves outside the project root."""

    def __init__(self, path: str, project_root: str) -> None:
        super().__init__(
            "Path must stay inside the project root",
            path=path,
            projectRoot=project_root,
        )
