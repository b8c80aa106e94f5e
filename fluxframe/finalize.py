"""Finalization: activate staged configuration and retire the bootstrap.

The storage offers no multi-file transaction, so finalization is an ordered
sequence of independent actions. Each one reports success as an action line,
failure as an error line, and "nothing to do" as a skip. A failing action
never stops the ones after it, and a second run only finds skips for the work
the first run already did.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, List, Optional

import anyio
from anyio import to_thread
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import FluxFrameConfig
from .constants import DEFAULT_DOCS_LOCATION, DECISIONS_FILENAME, README_FILENAME
from .persistence import StateStore
from .swap_guide import AI_TOOLS, SwapGuide, build_swap_guide

logger = logging.getLogger(__name__)

# Rule/config artifacts generated into the staging directory during bootstrap.
STAGED_ARTIFACTS: tuple[str, ...] = ("AGENTS.md",) + tuple(
    artifact for profile in AI_TOOLS.values() for artifact in profile.artifacts
)


class FinalizationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    actions: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    activated: List[str] = Field(default_factory=list)
    swap_guide: Optional[SwapGuide] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _format_tech_stack(tech_stack: Any) -> List[str]:
    if not tech_stack:
        return []
    if isinstance(tech_stack, (list, tuple)):
        items = [f"- {item}" for item in tech_stack]
    elif isinstance(tech_stack, dict):
        items = [f"- **{key}:** {value}" for key, value in tech_stack.items()]
    else:
        items = [str(tech_stack)]
    return ["## Tech Stack", "", *items, ""]


def render_project_readme(
    project_name: str,
    project_purpose: Optional[str] = None,
    docs_location: str = DEFAULT_DOCS_LOCATION,
    tech_stack: Any = None,
) -> str:
    """Build the post-bootstrap README from collected project information."""
    docs = docs_location.strip("/") or DEFAULT_DOCS_LOCATION
    lines = [f"# {project_name}", ""]
    if project_purpose:
        lines += [str(project_purpose), ""]
    lines += [
        "## Documentation",
        "",
        f"Project documentation lives in [`{docs}/`](./{docs}/).",
        "",
        f"- [`context_master_guide.md`](./{docs}/context_master_guide.md): where to start",
        f"- [`technical_status.md`](./{docs}/technical_status.md): current implementation state",
        f"- [`implementation_plan.md`](./{docs}/implementation_plan.md): planned cycles",
        f"- [`{DECISIONS_FILENAME}`](./{docs}/{DECISIONS_FILENAME}): decisions made during setup",
        "",
    ]
    lines += _format_tech_stack(tech_stack)
    lines += [
        "## AI-Assisted Development",
        "",
        "This project follows the FluxFrame methodology. AI assistants load the "
        "rules in `AGENTS.md` and query project documentation through the "
        "project MCP server.",
        "",
    ]
    return "\n".join(lines)


class Finalizer:
    """Runs the finalization action sequence for one project root."""

    def __init__(self, store: StateStore, project_root: str | Path, config: FluxFrameConfig) -> None:
        self._store = store
        self._root = Path(project_root)
        self._config = config

    def _rel(self, path: Path) -> str:
        try:
            return str(path.relative_to(self._root))
        except ValueError:
            return str(path)

    async def _remove_path(self, path: anyio.Path) -> None:
        if await path.is_dir() and not await path.is_symlink():
            await to_thread.run_sync(shutil.rmtree, Path(path))
        else:
            await path.unlink()

    async def _activate(self, name: str, result: FinalizationResult) -> None:
        staging = self._root / self._config.finalization.staging_dir
        source = anyio.Path(staging / name)
        target = anyio.Path(self._root / name)
        if not await source.exists():
            result.skipped.append(f"{name}: nothing staged")
            return
        try:
            if await target.exists() or await target.is_symlink():
                await self._remove_path(target)
            await source.replace(target)
        except OSError as e:
            logger.error(f"Failed to activate {name}: {e}")
            result.errors.append(f"Failed to activate {name}: {e}")
            return
        result.activated.append(name)
        result.actions.append(f"Activated {name} from {self._rel(staging)}/")

    async def _remove(self, path: Path, result: FinalizationResult, best_effort: bool = False) -> None:
        target = anyio.Path(path)
        label = self._rel(path)
        if not await target.exists() and not await target.is_symlink():
            result.skipped.append(f"{label}: already absent")
            return
        try:
            await self._remove_path(target)
        except OSError as e:
            if best_effort:
                logger.warning(f"Could not remove {label}: {e}")
                result.warnings.append(f"Could not remove {label}: {e}")
            else:
                logger.error(f"Failed to remove {label}: {e}")
                result.errors.append(f"Failed to remove {label}: {e}")
            return
        result.actions.append(f"Removed {label}")

    async def finalize(self, keep_state: bool = False) -> FinalizationResult:
        """Activate staged artifacts, remove scaffolding and regenerate the README."""
        settings = self._config.finalization
        result = FinalizationResult()

        state_existed = await self._store.exists()
        state = await self._store.load()
        info = state.collected_info
        if state_existed and not state.is_complete:
            result.warnings.append(
                f"Bootstrap is not complete (current step {state.current_step}); finalizing anyway"
            )

        for name in STAGED_ARTIFACTS:
            await self._activate(name, result)

        for template_dir in settings.template_dirs:
            await self._remove(self._root / template_dir, result)

        await self._remove(self._root / settings.staging_dir, result)

        if keep_state:
            result.skipped.append(f"bootstrap state: kept at {self._store.location}")
        else:
            try:
                if await self._store.delete():
                    result.actions.append(f"Removed bootstrap state at {self._store.location}")
                else:
                    result.skipped.append("bootstrap state: already absent")
            except OSError as e:
                logger.error(f"Failed to remove bootstrap state: {e}")
                result.errors.append(f"Failed to remove bootstrap state: {e}")

        for aux_file in settings.auxiliary_files:
            await self._remove(self._root / aux_file, result, best_effort=True)

        readme = anyio.Path(self._root / README_FILENAME)
        project_name = info.get("project_name") or self._root.name
        if not state_existed and await readme.exists():
            result.skipped.append(f"{README_FILENAME}: no bootstrap state, existing README kept")
        else:
            content = render_project_readme(
                str(project_name),
                info.get("project_purpose"),
                str(info.get("docs_location") or self._config.docs_location),
                info.get("tech_stack"),
            )
            try:
                if await readme.exists() and await readme.read_bytes() == content.encode("utf-8"):
                    result.skipped.append(f"{README_FILENAME}: already up to date")
                else:
                    await readme.write_text(content, encoding="utf-8")
                    result.actions.append(f"Regenerated {README_FILENAME} for {project_name}")
            except OSError as e:
                logger.error(f"Failed to write {README_FILENAME}: {e}")
                result.errors.append(f"Failed to write {README_FILENAME}: {e}")

        result.swap_guide = build_swap_guide(
            self._root,
            info.get("project_name"),
            self._config.project_server,
            result.activated,
            info.get("ai_tools"),
        )
        result.success = not result.errors
        logger.info(
            f"Finalization finished with {len(result.actions)} actions and {len(result.errors)} errors"
        )
        return result
