"""Change-request tracking persisted in the state document.

Each request has its own id and moves through ``investigating`` →
``documenting`` → ``complete``. Callers pass the id on every call, so any
number of requests can be open at once.
"""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import Any, Dict, List, Optional

from ..constants import (
    CHANGE_COMPLETE,
    CHANGE_DOCUMENTING,
    CHANGE_INVESTIGATING,
    CHANGE_SEVERITIES,
    CHANGE_TYPES,
)
from ..errors import (
    ChangeRequestStateError,
    InvalidArgumentError,
    UnknownChangeRequestError,
)
from ..persistence import BootstrapState, ChangeRequest, StateStore
from ..persistence.models import utcnow

logger = logging.getLogger(__name__)

ARCHIVE_AFTER = timedelta(days=30)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def suggested_documentation_file(change: ChangeRequest) -> str:
    """``bugs/<feature>_<first three words of the description>.md``."""
    issue = _slug(" ".join(change.description.split()[:3]))
    return f"bugs/{_slug(change.affected_feature)}_{issue}.md"


def _find(state: BootstrapState, change_id: str) -> ChangeRequest:
    for change in state.change_requests:
        if change.id == change_id:
            return change
    raise UnknownChangeRequestError(change_id)


class ChangeRequestLog:
    def __init__(self, store: StateStore) -> None:
        self._store = store

    async def start(
        self,
        description: str,
        change_type: str,
        affected_feature: str,
        severity: str = "medium",
    ) -> Dict[str, Any]:
        if change_type not in CHANGE_TYPES:
            raise InvalidArgumentError("change_type", change_type, CHANGE_TYPES)
        if severity not in CHANGE_SEVERITIES:
            raise InvalidArgumentError("severity", severity, CHANGE_SEVERITIES)

        state = await self._store.load()
        change = ChangeRequest(
            id=f"CHANGE-{len(state.change_requests) + 1:03d}",
            description=description,
            change_type=change_type,
            affected_feature=affected_feature,
            severity=severity,
        )
        state.change_requests.append(change)
        await self._store.save(state)
        logger.info(f"Started change request {change.id} ({change_type})")
        return {
            "success": True,
            "change": change.to_payload(),
            "nextSteps": [
                "Check whether this is a pattern violation before changing code.",
                "Investigate the root cause without making changes yet.",
                "Do not document anything until the user confirms the fix works.",
            ],
        }

    async def mark_resolved(self, change_id: str) -> Dict[str, Any]:
        """Move an investigating request to ``documenting`` once the fix is confirmed."""
        state = await self._store.load()
        change = _find(state, change_id)
        if change.status != CHANGE_INVESTIGATING:
            raise ChangeRequestStateError(change_id, change.status, CHANGE_INVESTIGATING)

        now = utcnow()
        change.status = CHANGE_DOCUMENTING
        change.resolved_at = now
        change.archive_date = (now + ARCHIVE_AFTER).date().isoformat()
        await self._store.save(state)

        documentation_file = suggested_documentation_file(change)
        return {
            "success": True,
            "change": change.to_payload(),
            "suggestedFile": documentation_file,
            "checklist": {
                "required": [
                    f"Create change documentation: {documentation_file}",
                    "Update technical_status.md (Recently Fixed/Changed)",
                ],
                "conditional": [
                    "Update the pattern library if the change revealed or fixed a pattern",
                    "Update workflow docs if user-facing logic changed",
                ],
            },
        }

    async def close(self, change_id: str, documentation_file: str) -> Dict[str, Any]:
        state = await self._store.load()
        change = _find(state, change_id)
        if change.status != CHANGE_DOCUMENTING:
            raise ChangeRequestStateError(change_id, change.status, CHANGE_DOCUMENTING)

        change.status = CHANGE_COMPLETE
        change.documentation_file = documentation_file
        await self._store.save(state)
        logger.info(f"Closed change request {change_id}")

        duration = (change.resolved_at or utcnow()).date() - change.started_at.date()
        return {
            "success": True,
            "change": change.to_payload(),
            "durationDays": duration.days,
        }

    async def get(self, change_id: str) -> Dict[str, Any]:
        state = await self._store.load()
        return {"success": True, "change": _find(state, change_id).to_payload()}

    async def list(self, status: Optional[str] = None) -> Dict[str, Any]:
        state = await self._store.load()
        changes: List[ChangeRequest] = [
            c for c in state.change_requests if status is None or c.status == status
        ]
        return {
            "success": True,
            "count": len(changes),
            "changes": [c.to_payload() for c in changes],
        }
