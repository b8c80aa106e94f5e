import pytest

from fluxframe.config import FluxFrameConfig
from fluxframe.services import BootstrapServices
from fluxframe.workflow import BOOTSTRAP_WORKFLOW

# Smallest info that satisfies each gated step of the catalog.
MINIMAL_INFO = {
    "1.2": {"scenario": "GREENFIELD"},
    "1.3": {"detected_files": ["package.json"]},
    "2.1": {
        "project_name": "Acme Portal",
        "project_purpose": "Customer self-service portal",
        "tech_stack": ["Python", "FastAPI"],
    },
    "2.2": {"ai_tools": ["Claude Code"]},
    "2.3": {"docs_location": "project_docs"},
    "2.4": {"environments": ["dev", "prod"]},
    "2.5": {"optional_features": ["log_access"]},
}


@pytest.fixture
def minimal_info() -> dict:
    return MINIMAL_INFO


@pytest.fixture
def services(tmp_path) -> BootstrapServices:
    return BootstrapServices.create(tmp_path, FluxFrameConfig())


@pytest.fixture
def complete_steps():
    """Return a coroutine function completing the first ``count`` steps in order."""

    async def _complete(services: BootstrapServices, count: int) -> list[str]:
        step_ids = BOOTSTRAP_WORKFLOW.step_ids()[:count]
        for step_id in step_ids:
            await services.engine.complete_step(step_id, MINIMAL_INFO.get(step_id))
        return step_ids

    return _complete
