"""Store abstraction for the bootstrap state document."""

from __future__ import annotations

from typing import Protocol

from .models import BootstrapState


class StateStore(Protocol):
    """Protocol for bootstrap state persistence backends.

    Every mutation in the engine is load-entire, mutate in memory,
    save-entire. Backends never persist individual fields and do no locking;
    concurrent callers race and the last ``save`` wins.
    """

    @property
    def location(self) -> str:
        """Human-readable location of the document."""

    async def exists(self) -> bool:
        """Return ``True`` when a document has been saved before."""

    async def load(self) -> BootstrapState:
        """Return the stored document, or a fresh default if none exists."""

    async def save(self, state: BootstrapState) -> None:
        """Stamp ``lastUpdated`` and persist the full document."""

    async def delete(self) -> bool:
        """Remove the document. Returns ``False`` if there was nothing to remove."""
