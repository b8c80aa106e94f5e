from __future__ import annotations

import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_CONFIG_FILE, DEFAULT_DOCS_LOCATION, DEFAULT_STATE_FILE


class ProjectServerConfig(BaseModel):
    """How the finished project's own MCP server is launched."""

    command: str = "node"
    entry_point: str = "mcp-server.js"
    name_suffix: str = "-docs"


class FinalizationConfig(BaseModel):
    """Paths touched by the finalization transaction."""

    staging_dir: str = ".fluxframe-pending"
    template_dirs: List[str] = Field(
        default_factory=lambda: ["bootstrap", "ai-rules", "doc-templates"]
    )
    auxiliary_files: List[str] = Field(
        default_factory=lambda: [
            "BOOTSTRAP_INSTRUCTIONS.md",
            "RESTRUCTURING_NOTES.md",
            "fluxframe_methodology.md",
        ]
    )


class FluxFrameConfig(BaseModel):
    """Top-level configuration model."""

    state_backend: Literal["file", "inmemory"] = "file"
    state_file: str = DEFAULT_STATE_FILE
    docs_location: str = DEFAULT_DOCS_LOCATION
    log_level: str = "INFO"
    finalization: FinalizationConfig = FinalizationConfig()
    project_server: ProjectServerConfig = ProjectServerConfig()


def resolve_project_root(project_root: Optional[str | Path] = None) -> Path:
    """Return the project root the bootstrap operates on.

    Falls back to ``FLUXFRAME_PROJECT_ROOT`` and then the current working
    directory, which is where older setups kept the state file.
    """

    root = project_root or os.getenv("FLUXFRAME_PROJECT_ROOT") or Path.cwd()
    return Path(root).expanduser().resolve()


def load_config(
    path: Optional[str] = None, project_root: Optional[str | Path] = None
) -> FluxFrameConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FLUXFRAME_CONFIG env
            variable or 'fluxframe.yaml' in the project root.
        project_root: Directory searched for the default config file.
    """

    config_path = path or os.getenv("FLUXFRAME_CONFIG")
    if not config_path:
        config_path = str(resolve_project_root(project_root) / DEFAULT_CONFIG_FILE)
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = FluxFrameConfig(**data)
    else:
        config = FluxFrameConfig()

    env_state_file = os.getenv("FLUXFRAME_STATE_FILE")
    if env_state_file:
        config.state_file = env_state_file
    env_log_level = os.getenv("FLUXFRAME_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level.upper()
    return config
