"""Tests for configuration loading."""

from fluxframe.config import load_config, resolve_project_root
from fluxframe.persistence import InMemoryStateStore, JsonFileStateStore, get_state_store


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "fluxframe.yaml"
    config_path.write_text(
        """
state_file: .bootstrap.json
docs_location: docs
finalization:
  staging_dir: .staged
  template_dirs: [templates]
project_server:
  command: python
  entry_point: server.py
"""
    )
    monkeypatch.setenv("FLUXFRAME_CONFIG", str(config_path))

    config = load_config()
    assert config.state_file == ".bootstrap.json"
    assert config.docs_location == "docs"
    assert config.finalization.staging_dir == ".staged"
    assert config.finalization.template_dirs == ["templates"]
    assert config.finalization.auxiliary_files  # defaults kept
    assert config.project_server.command == "python"


def test_load_config_defaults_from_project_root(tmp_path, monkeypatch):
    monkeypatch.delenv("FLUXFRAME_CONFIG", raising=False)
    monkeypatch.delenv("FLUXFRAME_STATE_FILE", raising=False)
    (tmp_path / "fluxframe.yaml").write_text("log_level: DEBUG\n")

    config = load_config(project_root=tmp_path)
    assert config.log_level == "DEBUG"
    assert config.state_file == ".fluxframe-bootstrap-state.json"


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.delenv("FLUXFRAME_CONFIG", raising=False)
    monkeypatch.setenv("FLUXFRAME_STATE_FILE", "custom-state.json")
    monkeypatch.setenv("FLUXFRAME_LOG_LEVEL", "warning")

    config = load_config(project_root=tmp_path)
    assert config.state_file == "custom-state.json"
    assert config.log_level == "WARNING"


def test_project_root_falls_back_to_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("FLUXFRAME_PROJECT_ROOT", raising=False)
    monkeypatch.chdir(tmp_path)
    assert resolve_project_root() == tmp_path.resolve()

    monkeypatch.setenv("FLUXFRAME_PROJECT_ROOT", str(tmp_path / "elsewhere"))
    assert resolve_project_root() == (tmp_path / "elsewhere").resolve()


def test_get_state_store_uses_config(tmp_path, monkeypatch):
    monkeypatch.delenv("FLUXFRAME_CONFIG", raising=False)
    monkeypatch.delenv("FLUXFRAME_STATE_FILE", raising=False)
    monkeypatch.delenv("FLUXFRAME_STATE_BACKEND", raising=False)

    store = get_state_store(tmp_path)
    assert isinstance(store, JsonFileStateStore)
    assert store.location == str(tmp_path.resolve() / ".fluxframe-bootstrap-state.json")

    monkeypatch.setenv("FLUXFRAME_STATE_BACKEND", "inmemory")
    assert isinstance(get_state_store(tmp_path), InMemoryStateStore)
