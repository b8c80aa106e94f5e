"""In-memory implementation of the state store."""

from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError

from ..errors import StateCorruptedError
from .models import BootstrapState, utcnow
from .repository import StateStore


class InMemoryStateStore(StateStore):
    """Store the state document in local memory.

    Useful for tests or dry runs. The document is kept serialized so that
    callers never share a live reference across a load/save cycle.
    """

    def __init__(self, document: Optional[str] = None) -> None:
        self._document = document

    @property
    def location(self) -> str:
        return "memory"

    @property
    def raw(self) -> Optional[str]:
        return self._document

    async def exists(self) -> bool:
        return self._document is not None

    async def load(self) -> BootstrapState:
        if self._document is None:
            return BootstrapState.initial()
        try:
            return BootstrapState.model_validate(json.loads(self._document))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StateCorruptedError(self.location, str(e)) from e

    async def save(self, state: BootstrapState) -> None:
        state.last_updated = utcnow()
        self._document = json.dumps(state.to_payload(), indent=2)

    async def delete(self) -> bool:
        existed = self._document is not None
        self._document = None
        return existed
