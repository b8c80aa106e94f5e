"""Persistence layer for the bootstrap state document."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from ..config import FluxFrameConfig, load_config, resolve_project_root
from .file import JsonFileStateStore
from .inmemory import InMemoryStateStore
from .models import (
    BootstrapState,
    ChangeRequest,
    DecisionEntry,
    FutureItem,
    FutureState,
    StepNote,
)
from .repository import StateStore


def get_state_store(
    project_root: Optional[str | Path] = None,
    config: Optional[FluxFrameConfig] = None,
    backend: Optional[str] = None,
) -> StateStore:
    """Factory function to obtain the state store for a project.

    The backend is selected from ``backend``, the ``FLUXFRAME_STATE_BACKEND``
    environment variable, or loaded configuration. The file backend keeps the
    document at ``<project root>/<state_file>``.
    """

    root = resolve_project_root(project_root)
    config = config or load_config(project_root=root)
    backend = (
        backend or os.getenv("FLUXFRAME_STATE_BACKEND") or config.state_backend
    ).lower()

    if backend == "inmemory":
        return InMemoryStateStore()
    elif backend == "file":
        return JsonFileStateStore(root / config.state_file)
    else:
        raise ValueError(f"Unsupported state backend: {backend}")


__all__ = [
    "BootstrapState",
    "ChangeRequest",
    "DecisionEntry",
    "FutureItem",
    "FutureState",
    "StepNote",
    "StateStore",
    "JsonFileStateStore",
    "InMemoryStateStore",
    "get_state_store",
]
