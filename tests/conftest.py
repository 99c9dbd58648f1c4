from pathlib import Path

import pytest

from hyprspace.generator import WindowRule, render
from hyprspace.script_store import ScriptStore


@pytest.fixture
def store(tmp_path: Path) -> ScriptStore:
    directory = tmp_path / "hyprspace"
    directory.mkdir()
    return ScriptStore(directory)


@pytest.fixture
def kitty_rule() -> WindowRule:
    return WindowRule(width="50%", height="50%", x="25%", y="25%", command="kitty")


def write_script(store: ScriptStore, name: str, content: str, mode: int = 0o755) -> Path:
    path = store.resolve_path(name)
    path.write_text(content)
    path.chmod(mode)
    return path


def write_layout(store: ScriptStore, name: str, workspace_number: int) -> Path:
    return write_script(store, name, render(workspace_number, []))
