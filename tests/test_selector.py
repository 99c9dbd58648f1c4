"""Tests for the selector TUI using the Textual Pilot API."""

import copy

import pytest

from conftest import write_layout
from hyprspace.config_loader import DEFAULT_CONFIG
from hyprspace.dialogs import WizardScreen
from hyprspace.errors import Error, ErrorType, Result
from hyprspace.script_store import ScriptStore, WorkspaceScript
from hyprspace.selector import CREATE_LABEL, SelectorApp, SelectorScreen, SelectorState


class RecordingLauncher:
    def __init__(self, result: Result[int] | None = None):
        self.launched: list[WorkspaceScript] = []
        self.result = result if result is not None else Result.ok(0)

    def __call__(self, script: WorkspaceScript) -> Result[int]:
        self.launched.append(script)
        return self.result


def make_app(store: ScriptStore, launcher=None, **launcher_settings) -> SelectorApp:
    settings = copy.deepcopy(DEFAULT_CONFIG)
    settings["launcher"].update(launcher_settings)
    return SelectorApp(store=store, settings=settings, launcher=launcher or RecordingLauncher())


def selector(app: SelectorApp) -> SelectorScreen:
    screen = app.screen
    assert isinstance(screen, SelectorScreen)
    return screen


class TestSelectorState:
    def scripts(self, store: ScriptStore, count: int) -> list[WorkspaceScript]:
        return [WorkspaceScript(name=f"s{i}", path=store.resolve_path(f"s{i}")) for i in range(count)]

    def test_empty_store_has_only_create_entry(self):
        state = SelectorState()
        assert state.total_items == 1
        assert state.create_selected
        assert state.labels() == [CREATE_LABEL]
        assert state.title() == "Hyprspace • 0 configuration(s) found"

    def test_clamps_at_both_ends(self, store: ScriptStore):
        state = SelectorState(scripts=self.scripts(store, 2))
        state.move_up()
        assert state.selected == 0
        for _ in range(5):
            state.move_down()
        assert state.selected == 2
        assert state.create_selected
        assert state.selected_script is None

    def test_replace_keeps_selection_in_range(self, store: ScriptStore):
        state = SelectorState(scripts=self.scripts(store, 3), selected=3)
        state.replace(self.scripts(store, 1))
        assert state.selected == 1

    def test_labels_are_numbered(self, store: ScriptStore):
        write_layout(store, "dash", 3)
        state = SelectorState(scripts=store.list())
        assert state.labels() == ["1. [ws 3] dash (workspace-dash.sh)", CREATE_LABEL]


@pytest.mark.asyncio
async def test_lists_scripts_on_start(store: ScriptStore):
    write_layout(store, "backend", 1)
    write_layout(store, "dash", 3)
    app = make_app(store)

    async with app.run_test() as pilot:
        await pilot.pause()
        state = selector(app).state
        assert [s.name for s in state.scripts] == ["backend", "dash"]
        assert state.selected == 0


@pytest.mark.asyncio
async def test_navigation_and_launch(store: ScriptStore):
    write_layout(store, "backend", 1)
    write_layout(store, "dash", 3)
    launcher = RecordingLauncher()
    app = make_app(store, launcher)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("j", "down", "k")
        await pilot.press("enter")
        await pilot.pause()

        assert [s.name for s in launcher.launched] == ["dash"]
        assert isinstance(app.screen, SelectorScreen)


@pytest.mark.asyncio
async def test_up_clamps_at_top(store: ScriptStore):
    write_layout(store, "backend", 1)
    launcher = RecordingLauncher()
    app = make_app(store, launcher)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("up", "up", "enter")
        await pilot.pause()
        assert [s.name for s in launcher.launched] == ["backend"]


@pytest.mark.asyncio
async def test_launch_failure_keeps_selector_running(store: ScriptStore):
    write_layout(store, "dash", 3)
    failure = Result.err(Error(error_type=ErrorType.LAUNCH_FAILURE, message="boom"))
    launcher = RecordingLauncher(failure)
    app = make_app(store, launcher)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("enter")
        await pilot.pause()
        assert isinstance(app.screen, SelectorScreen)
        assert app.is_running
        assert app.report.warnings[0].message == "boom"


@pytest.mark.asyncio
async def test_exit_after_launch(store: ScriptStore):
    write_layout(store, "dash", 3)
    app = make_app(store, exit_after_launch=True)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("enter")
        await pilot.pause()

    assert app.return_value == 0


@pytest.mark.asyncio
async def test_quit(store: ScriptStore):
    app = make_app(store)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("q")
        await pilot.pause()

    assert app.return_value == 0


@pytest.mark.asyncio
async def test_wizard_creates_script_and_refreshes(store: ScriptStore):
    write_layout(store, "backend", 1)
    launcher = RecordingLauncher()
    app = make_app(store, launcher)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("down", "enter")
        await pilot.pause()
        assert isinstance(app.screen, WizardScreen)

        await pilot.press("4", "enter")
        await pilot.press(*"media", "enter")
        await pilot.press("enter")
        for answer in ("50", "50", "25", "25", "kitty"):
            await pilot.press(*answer, "enter")
        await pilot.press("n", "enter")
        await pilot.press("y", "enter")
        await pilot.pause()
        await pilot.pause()

        assert isinstance(app.screen, SelectorScreen)
        assert [(s.name, s.workspace_number) for s in selector(app).state.scripts] == [
            ("backend", 1),
            ("media", 4),
        ]
        assert launcher.launched == []

    text = store.resolve_path("media").read_text()
    assert 'rule_exec "workspace 4 silent; float; size 50 50; move 25 25" \\' in text
    assert "  kitty\n" in text


@pytest.mark.asyncio
async def test_wizard_rejects_taken_name(store: ScriptStore):
    write_layout(store, "media", 2)
    app = make_app(store)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("down", "enter")
        await pilot.pause()
        await pilot.press("4", "enter")
        await pilot.press(*"media", "enter")
        await pilot.pause()

        screen = app.screen
        assert isinstance(screen, WizardScreen)
        assert screen.session.name is None
        assert screen.query_one("#message").has_class("error")


@pytest.mark.asyncio
async def test_wizard_escape_writes_nothing(store: ScriptStore):
    app = make_app(store)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("enter")
        await pilot.pause()
        assert isinstance(app.screen, WizardScreen)

        await pilot.press("7", "enter")
        await pilot.press(*"draft", "enter")
        await pilot.press("escape")
        await pilot.pause()

        assert isinstance(app.screen, SelectorScreen)
        assert selector(app).state.scripts == []

    assert list(store.directory.iterdir()) == []


@pytest.mark.asyncio
async def test_click_moves_highlight_before_enter(store: ScriptStore):
    write_layout(store, "alpha", 1)
    write_layout(store, "beta", 2)
    launcher = RecordingLauncher()
    app = make_app(store, launcher)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.click("#item-1")
        await pilot.pause()

        assert selector(app).state.selected == 1
        assert launcher.launched == []

        await pilot.press("enter")
        await pilot.pause()

        assert [s.name for s in launcher.launched] == ["beta"]


@pytest.mark.asyncio
async def test_unreadable_directory_is_reported(store: ScriptStore, monkeypatch):
    def failing_scan():
        return Result.err(Error(error_type=ErrorType.IO_ERROR, message="Cannot read directory"))

    monkeypatch.setattr(store, "scan", failing_scan)
    app = make_app(store)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert selector(app).state.scripts == []
        assert app.report.errors[0].error_type is ErrorType.IO_ERROR
        assert app.is_running
