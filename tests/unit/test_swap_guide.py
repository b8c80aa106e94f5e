import json
from pathlib import Path

from fluxframe.config import ProjectServerConfig
from fluxframe.swap_guide import (
    build_swap_guide,
    detect_ai_tools,
    server_name_for,
    tool_config_guide,
)

HOME = Path("/home/dev")
ROOT = Path("/work/acme")


def test_activated_artifacts_take_precedence():
    tools = detect_ai_tools(["AGENTS.md", ".clinerules", "CLAUDE.md"], ["Roo Code"])
    assert tools == ["claude_code", "cline"]


def test_collected_names_used_when_nothing_activated():
    assert detect_ai_tools([], ["Claude Code", "roo", "claude"]) == ["claude_code", "roo_code"]
    assert detect_ai_tools(["AGENTS.md"], "Cline and Antigravity") == ["cline", "antigravity"]
    assert detect_ai_tools([], {"cline": True, "roo_code": False}) == ["cline"]
    assert detect_ai_tools([], None) == []


def test_unknown_tool_kept_verbatim_and_flagged():
    assert detect_ai_tools([], ["Cursor"]) == ["Cursor"]

    guide = tool_config_guide("Cursor", ROOT, HOME, "linux")
    assert guide.recognized is False
    assert guide.config_file is None
    assert "not a recognized tool" in guide.restart_instruction


def test_config_locations_per_tool():
    claude = tool_config_guide("claude_code", ROOT, HOME, "linux")
    assert claude.config_file == str(ROOT / ".mcp.json")
    assert claude.display_name == "Claude Code"

    roo = tool_config_guide("roo_code", ROOT, HOME, "linux")
    assert roo.config_directory == str(ROOT / ".roo")

    antigravity = tool_config_guide("antigravity", ROOT, HOME, "linux")
    assert antigravity.config_file == str(HOME / ".gemini" / "antigravity" / "mcp_config.json")


def test_cline_location_depends_on_platform():
    linux = tool_config_guide("cline", ROOT, HOME, "linux").config_file
    mac = tool_config_guide("cline", ROOT, HOME, "darwin").config_file
    windows = tool_config_guide("cline", ROOT, HOME, "win32").config_file

    assert linux.startswith(str(HOME / ".config" / "Code" / "User"))
    assert "Library/Application Support" in mac
    assert "AppData" in windows
    assert all(path.endswith("cline_mcp_settings.json") for path in (linux, mac, windows))


def test_server_name_slug():
    server = ProjectServerConfig()
    assert server_name_for("Acme Portal!", server) == "acme-portal-docs"
    assert server_name_for(None, server) == "project-docs"
    assert server_name_for("***", server) == "project-docs"


def test_build_swap_guide_snippet():
    guide = build_swap_guide(
        ROOT, "Acme Portal", ProjectServerConfig(), [], ["Claude Code"], home=HOME, platform="linux"
    )

    assert guide.entry_point == str(ROOT / "mcp-server.js")
    assert guide.server_name == "acme-portal-docs"
    snippet = json.loads(guide.config_snippet)
    assert snippet == {
        "mcpServers": {"acme-portal-docs": {"command": "node", "args": [str(ROOT / "mcp-server.js")]}}
    }
    assert [tool.tool for tool in guide.tools] == ["claude_code"]
    assert guide.model_dump(by_alias=True)["serverName"] == "acme-portal-docs"
