"""FluxFrame bootstrap: guided, multi-session setup of AI-assistance scaffolding."""

from .config import FluxFrameConfig, load_config
from .engine import BootstrapEngine, validate_step_info
from .errors import BootstrapError
from .finalize import FinalizationResult, Finalizer
from .ledgers import ChangeRequestLog, DecisionLedger, FutureStateLedger
from .persistence import BootstrapState, get_state_store
from .services import BootstrapServices
from .workflow import BOOTSTRAP_WORKFLOW, Workflow

__version__ = "0.1.0"
__all__ = [
    "BOOTSTRAP_WORKFLOW",
    "BootstrapEngine",
    "BootstrapError",
    "BootstrapServices",
    "BootstrapState",
    "ChangeRequestLog",
    "DecisionLedger",
    "FinalizationResult",
    "Finalizer",
    "FluxFrameConfig",
    "FutureStateLedger",
    "Workflow",
    "get_state_store",
    "load_config",
    "validate_step_info",
]
