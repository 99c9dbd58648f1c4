"""Tests for startup checks and exit codes."""

from pathlib import Path

import pytest

import hyprspace.main as main_module
from hyprspace.main import EXIT_OK, EXIT_STARTUP_FAILURE, main


class FakeApp:
    instances: list["FakeApp"] = []

    def __init__(self, store, settings, report):
        self.store = store
        self.settings = settings
        self.report = report
        FakeApp.instances.append(self)

    def run(self):
        return None


@pytest.fixture
def fake_app(monkeypatch):
    FakeApp.instances = []
    monkeypatch.setattr(main_module, "SelectorApp", FakeApp)
    return FakeApp


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


def test_normal_quit(tmp_path: Path, fake_app):
    scripts_dir = tmp_path / "scripts"
    config = write_config(tmp_path, f'[storage]\ndirectory = "{scripts_dir}"\n')

    assert main(config, log_dir=tmp_path / "logs") == EXIT_OK
    assert scripts_dir.is_dir()
    assert fake_app.instances[0].store.directory == scripts_dir
    assert (tmp_path / "logs" / "hyprspace.jsonl").exists()


def test_invalid_config(tmp_path: Path, fake_app, capsys):
    config = write_config(tmp_path, "[storage\n")

    assert main(config, log_dir=tmp_path / "logs") == EXIT_STARTUP_FAILURE
    assert fake_app.instances == []
    assert "invalid config" in capsys.readouterr().err


def test_inaccessible_storage(tmp_path: Path, fake_app, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    config = write_config(tmp_path, f'[storage]\ndirectory = "{blocker}"\n')

    assert main(config, log_dir=tmp_path / "logs") == EXIT_STARTUP_FAILURE
    assert fake_app.instances == []
    assert "Cannot create workspace directory" in capsys.readouterr().err


@pytest.mark.parametrize(
    "text",
    [
        "[logging]\nlevel = 5\nconsole = true\n",
        '[logging]\nlevel = "LOUD"\n',
        "[storage]\ndirectory = 5\n",
        'storage = "x"\n',
    ],
)
def test_mistyped_config_value(tmp_path: Path, fake_app, capsys, text: str):
    config = write_config(tmp_path, text)

    assert main(config, log_dir=tmp_path / "logs") == EXIT_STARTUP_FAILURE
    assert fake_app.instances == []
    assert "invalid config" in capsys.readouterr().err
