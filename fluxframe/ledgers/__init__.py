"""Append-only ledgers stored inside the bootstrap state document."""

from .changes import ChangeRequestLog
from .decisions import DecisionLedger, render_decisions_document
from .future_state import FutureStateLedger

__all__ = [
    "ChangeRequestLog",
    "DecisionLedger",
    "FutureStateLedger",
    "render_decisions_document",
]
