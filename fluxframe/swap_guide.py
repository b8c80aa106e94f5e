"""Guidance for pointing an AI tool at the finished project's MCP server.

Everything here is a pure function of its arguments: the finalizer passes in
which staged artifacts were activated and the tool selection collected during
bootstrap, and gets back advisory data to show the operator.
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .config import ProjectServerConfig


class ToolProfile(NamedTuple):
    display_name: str
    artifacts: tuple[str, ...]
    aliases: tuple[str, ...]


# Single source for tool identity. Config locations are resolved separately
# because some depend on the project root and others on the user's home.
AI_TOOLS: Dict[str, ToolProfile] = {
    "claude_code": ToolProfile(
        "Claude Code", ("CLAUDE.md", ".claude"), ("claude", "claude code", "claude-code", "claude_code")
    ),
    "roo_code": ToolProfile(
        "Roo Code", (".roo", ".roomodes"), ("roo", "roo code", "roo-code", "roo_code", "roocode")
    ),
    "cline": ToolProfile("Cline", (".clinerules",), ("cline",)),
    "antigravity": ToolProfile("Antigravity", (".agent",), ("antigravity", "google antigravity")),
}


class _GuideModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ToolConfigGuide(_GuideModel):
    tool: str
    display_name: str
    recognized: bool
    config_file: Optional[str] = None
    config_directory: Optional[str] = None
    restart_instruction: str


class SwapGuide(_GuideModel):
    entry_point: str
    server_name: str
    config_snippet: str
    tools: List[ToolConfigGuide]


def _normalize_tool_names(collected: Any) -> List[str]:
    if not collected:
        return []
    if isinstance(collected, str):
        raw = re.split(r",|/|\band\b", collected)
    elif isinstance(collected, dict):
        raw = [name for name, enabled in collected.items() if enabled]
    else:
        raw = [str(item) for item in collected]
    return [name.strip() for name in raw if name and name.strip()]


def _match_alias(name: str) -> Optional[str]:
    lowered = name.lower()
    for key, profile in AI_TOOLS.items():
        if lowered == key or lowered in profile.aliases:
            return key
    return None


def detect_ai_tools(activated: Iterable[str], collected_tools: Any = None) -> List[str]:
    """Return the tools to guide, in table order.

    Activated artifacts decide when any of them belongs to a known tool.
    Otherwise the collected ``ai_tools`` answer is used; names that match no
    known tool are returned verbatim so the guide can flag them.
    """
    activated = set(activated)
    detected = [
        key
        for key, profile in AI_TOOLS.items()
        if any(artifact in activated for artifact in profile.artifacts)
    ]
    if detected:
        return detected

    tools: List[str] = []
    for name in _normalize_tool_names(collected_tools):
        key = _match_alias(name) or name
        if key not in tools:
            tools.append(key)
    return tools


def _vscode_global_storage(home: Path, platform: str) -> Path:
    if platform == "darwin":
        user_dir = home / "Library" / "Application Support" / "Code" / "User"
    elif platform.startswith("win"):
        user_dir = home / "AppData" / "Roaming" / "Code" / "User"
    else:
        user_dir = home / ".config" / "Code" / "User"
    return user_dir / "globalStorage"


def tool_config_guide(
    tool: str, project_root: Path, home: Path, platform: str
) -> ToolConfigGuide:
    """Config file location and restart instruction for one tool."""
    if tool == "claude_code":
        config_file = project_root / ".mcp.json"
        restart = "Exit Claude Code and start it again from the project directory; approve the project server when prompted."
    elif tool == "roo_code":
        config_file = project_root / ".roo" / "mcp.json"
        restart = "Run 'Developer: Reload Window' in VS Code so Roo Code reloads its MCP servers."
    elif tool == "cline":
        config_file = (
            _vscode_global_storage(home, platform)
            / "saoudrizwan.claude-dev"
            / "settings"
            / "cline_mcp_settings.json"
        )
        restart = "Save the settings file, then toggle the server off and on in Cline's MCP Servers panel (or reload VS Code)."
    elif tool == "antigravity":
        config_file = home / ".gemini" / "antigravity" / "mcp_config.json"
        restart = "Restart Antigravity so it picks up the new MCP configuration."
    else:
        return ToolConfigGuide(
            tool=tool,
            display_name=tool,
            recognized=False,
            restart_instruction=(
                f"'{tool}' is not a recognized tool. Find where it configures MCP "
                "servers, replace the bootstrap server entry with the snippet above, "
                "then restart it."
            ),
        )

    return ToolConfigGuide(
        tool=tool,
        display_name=AI_TOOLS[tool].display_name,
        recognized=True,
        config_file=str(config_file),
        config_directory=str(config_file.parent),
        restart_instruction=restart,
    )


def server_name_for(project_name: Optional[str], server: ProjectServerConfig) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (project_name or "project").lower()).strip("-")
    return f"{slug or 'project'}{server.name_suffix}"


def build_swap_guide(
    project_root: Path,
    project_name: Optional[str],
    server: ProjectServerConfig,
    activated: Iterable[str],
    collected_tools: Any = None,
    home: Optional[Path] = None,
    platform: Optional[str] = None,
) -> SwapGuide:
    """Describe how to replace the bootstrap server with the project server."""
    entry_point = project_root / server.entry_point
    name = server_name_for(project_name, server)
    snippet = {"mcpServers": {name: {"command": server.command, "args": [str(entry_point)]}}}
    tools = detect_ai_tools(activated, collected_tools)
    return SwapGuide(
        entry_point=str(entry_point),
        server_name=name,
        config_snippet=json.dumps(snippet, indent=2),
        tools=[
            tool_config_guide(tool, project_root, home or Path.home(), platform or sys.platform)
            for tool in tools
        ],
    )
