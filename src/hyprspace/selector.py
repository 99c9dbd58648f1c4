# =============================================================================
# Workspace Selector (Textual TUI)
# =============================================================================

from dataclasses import dataclass, field
from typing import Callable
from uuid import uuid4

from loguru import logger
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Label, ListItem, ListView, Static

from hyprspace.dialogs import WizardScreen
from hyprspace.errors import ErrorReport, ErrorType, Result
from hyprspace.launcher import launch
from hyprspace.script_store import ScriptStore, WorkspaceScript
from hyprspace.setup_wizard import WizardResult, WizardSession, commit_wizard

CREATE_LABEL = "➕ Create new workspace script…"
HIGHLIGHT_SYMBOL = "➤ "


@dataclass
class SelectorState:
    """
    Highlight position over the scripts plus the trailing "create" entry.

    Movement clamps at both ends.
    """

    scripts: list[WorkspaceScript] = field(default_factory=list)
    selected: int = 0

    @property
    def total_items(self) -> int:
        return len(self.scripts) + 1

    @property
    def create_selected(self) -> bool:
        return self.selected >= len(self.scripts)

    @property
    def selected_script(self) -> WorkspaceScript | None:
        if self.create_selected:
            return None
        return self.scripts[self.selected]

    def move_up(self) -> None:
        self.selected = max(self.selected - 1, 0)

    def move_down(self) -> None:
        self.selected = min(self.selected + 1, self.total_items - 1)

    def replace(self, scripts: list[WorkspaceScript]) -> None:
        """Swap in a fresh listing, keeping the highlight in range."""
        self.scripts = scripts
        self.selected = min(self.selected, self.total_items - 1)

    def labels(self) -> list[str]:
        lines = [f"{idx}. {script.display}" for idx, script in enumerate(self.scripts, 1)]
        lines.append(CREATE_LABEL)
        return lines

    def title(self) -> str:
        return f"Hyprspace • {len(self.scripts)} configuration(s) found"


class SelectorScreen(Screen):
    """
    List of workspace scripts with a "create new" entry at the end.

    Keyboard shortcuts:
    - ↑/k, ↓/j: Move highlight
    - Enter: Launch script / start wizard
    - q, Esc: Quit
    """

    BINDINGS = [
        Binding("up,k", "cursor_up", "Up", show=False, priority=True),
        Binding("down,j", "cursor_down", "Down", show=False, priority=True),
        Binding("enter", "confirm", "Select", priority=True),
        Binding("q,escape", "quit_selector", "Quit", priority=True),
    ]

    def __init__(self):
        super().__init__()
        self.state = SelectorState()

    def compose(self) -> ComposeResult:
        yield Static("", id="title", classes="title")
        yield ListView(id="scripts")
        yield Footer()

    async def on_mount(self) -> None:
        await self.refresh_scripts()

    async def refresh_scripts(self) -> None:
        """Re-read the store and redraw the list."""
        scanned = self.app.store.scan()
        if not self.app.report.collect_result(scanned):
            self.notify(scanned.error.message, title="Cannot list scripts", severity="error")
        self.state.replace(scanned.value if scanned.is_ok() else [])

        self.query_one("#title", Static).update(self.state.title())

        list_view = self.query_one("#scripts", ListView)
        await list_view.clear()
        await list_view.extend(
            ListItem(Label(text, markup=False), id=f"item-{idx}")
            for idx, text in enumerate(self.state.labels())
        )
        self._sync_highlight()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._follow_cursor(event.list_view)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        # A click only moves the highlight; Enter launches
        event.stop()
        self._follow_cursor(event.list_view)

    def _follow_cursor(self, list_view: ListView) -> None:
        """Adopt a cursor position set on the ListView itself (mouse clicks)."""
        index = list_view.index
        if index is None or index == self.state.selected:
            return
        if 0 <= index < self.state.total_items:
            self.state.selected = index
            self._sync_highlight()

    def _sync_highlight(self) -> None:
        list_view = self.query_one("#scripts", ListView)
        list_view.index = self.state.selected
        labels = self.state.labels()
        for idx, item in enumerate(list_view.query(ListItem)):
            if idx >= len(labels):
                break
            prefix = HIGHLIGHT_SYMBOL if idx == self.state.selected else "  "
            item.query_one(Label).update(prefix + labels[idx])

    def action_cursor_up(self) -> None:
        self.state.move_up()
        self._sync_highlight()

    def action_cursor_down(self) -> None:
        self.state.move_down()
        self._sync_highlight()

    def action_quit_selector(self) -> None:
        self.app.exit(0)

    def action_confirm(self) -> None:
        script = self.state.selected_script
        if script is None:
            logger.debug(
                "Create entry selected - starting wizard",
                operation="selector",
                status="wizard"
            )
            session = WizardSession(store=self.app.store)
            self.app.push_screen(WizardScreen(session), self._on_wizard_finished)
            return

        result = self.app.run_launcher(script)
        if result.is_err():
            self.notify(result.error.message, title="Launch failed", severity="error")
        elif self.app.settings["launcher"]["exit_after_launch"]:
            self.app.exit(0)
            return
        self.call_later(self.refresh_scripts)

    def _on_wizard_finished(self, result: WizardResult | None) -> None:
        if result is not None:
            saved = commit_wizard(self.app.store, result)
            self.app.report.collect_result(
                saved,
                recoverable=saved.is_err() and saved.error.error_type is ErrorType.ALREADY_EXISTS,
            )
            if saved.is_ok():
                self.notify(f"Created script: {saved.value.path}", title="Saved")
            else:
                self.notify(saved.error.message, title="Script not created", severity="error")
        else:
            self.notify("Aborted, script was not created.")
        self.call_later(self.refresh_scripts)


class SelectorApp(App[int]):
    """
    Workspace launcher TUI.

    Owns the store, merged settings and the session error report; screens
    reach them through self.app.
    """

    CSS = """
    Screen {
        background: $surface;
    }

    .title {
        text-style: bold;
        color: $accent;
        padding: 0 1;
    }

    #scripts {
        border: round $primary;
    }

    .error {
        color: $error;
    }

    .info {
        color: $success;
    }

    #preview {
        border: round $panel;
        padding: 0 1;
    }
    """

    TITLE = "Hyprspace"

    def __init__(
        self,
        store: ScriptStore,
        settings: dict,
        launcher: Callable[[WorkspaceScript], Result[int]] = launch,
        report: ErrorReport | None = None,
    ):
        super().__init__()
        self.store = store
        self.settings = settings
        self.launcher = launcher
        self.report = report if report is not None else ErrorReport()

    def on_mount(self) -> None:
        self.push_screen(SelectorScreen())

    def run_launcher(self, script: WorkspaceScript) -> Result[int]:
        """Hand the terminal to a script, then take it back."""
        op_trace_id = str(uuid4())
        logger.debug(
            "Suspending selector for launch",
            operation="selector",
            status="launch",
            trace_id=op_trace_id,
            script=script.name
        )
        try:
            with self.suspend():
                result = self.launcher(script)
        except SuspendNotSupported:
            # Headless and web drivers cannot give up the terminal
            result = self.launcher(script)

        self.report.collect_result(result, recoverable=True)
        return result
