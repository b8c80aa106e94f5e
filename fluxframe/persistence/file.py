"""JSON file implementation of the state store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import anyio
from pydantic import ValidationError

from ..errors import StateCorruptedError
from .models import BootstrapState, utcnow
from .repository import StateStore

logger = logging.getLogger(__name__)


class JsonFileStateStore(StateStore):
    """Persist the bootstrap state as a single JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = anyio.Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    async def exists(self) -> bool:
        return await self.path.is_file()

    async def load(self) -> BootstrapState:
        try:
            data = await self.path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"No bootstrap state at {self.path}; starting fresh")
            return BootstrapState.initial()

        try:
            return BootstrapState.model_validate(json.loads(data.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Unreadable bootstrap state at {self.path}: {e}")
            raise StateCorruptedError(self.location, str(e)) from e

    async def save(self, state: BootstrapState) -> None:
        state.last_updated = utcnow()
        await self.path.parent.mkdir(parents=True, exist_ok=True)
        await self.path.write_text(
            json.dumps(state.to_payload(), indent=2), encoding="utf-8"
        )

    async def delete(self) -> bool:
        try:
            await self.path.unlink()
        except FileNotFoundError:
            return False
        return True
