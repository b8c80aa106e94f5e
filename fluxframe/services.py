"""Wiring of the bootstrap components for one project root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import FluxFrameConfig, load_config, resolve_project_root
from .engine import BootstrapEngine
from .finalize import Finalizer
from .ledgers import ChangeRequestLog, DecisionLedger, FutureStateLedger
from .persistence import StateStore, get_state_store


@dataclass
class BootstrapServices:
    """Every component shares the same store; none keeps state between calls."""

    project_root: Path
    config: FluxFrameConfig
    store: StateStore
    engine: BootstrapEngine
    decisions: DecisionLedger
    future_state: FutureStateLedger
    changes: ChangeRequestLog
    finalizer: Finalizer

    @classmethod
    def create(
        cls,
        project_root: Optional[str | Path] = None,
        config: Optional[FluxFrameConfig] = None,
        store: Optional[StateStore] = None,
    ) -> "BootstrapServices":
        root = resolve_project_root(project_root)
        config = config or load_config(project_root=root)
        store = store or get_state_store(root, config)
        return cls(
            project_root=root,
            config=config,
            store=store,
            engine=BootstrapEngine(store),
            decisions=DecisionLedger(store, root, config.docs_location),
            future_state=FutureStateLedger(store),
            changes=ChangeRequestLog(store),
            finalizer=Finalizer(store, root, config),
        )
