# =============================================================================
# New Script Dialog (Textual screen over WizardSession)
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Input, Static

from hyprspace.setup_wizard import WizardResult, WizardSession, WizardStage


class WizardScreen(Screen[WizardResult | None]):
    """
    Step-by-step dialog for creating a workspace script.

    Every answer goes through WizardSession.submit(). The screen dismisses
    with the WizardResult once the session reaches DONE, or with None when
    the user aborts (Esc) or declines to save.
    """

    BINDINGS = [
        Binding("escape", "abort", "Cancel", priority=True),
    ]

    def __init__(self, session: WizardSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static("Hyprspace · New workspace script", classes="title")
        yield Static(
            f"Destination directory: {self.session.store.directory}\n"
            "Follow the steps to configure your workspace layout.",
            id="intro",
            markup=False,
        )
        yield Static("", id="step", classes="title")
        yield Static("", id="prompt", markup=False)
        yield Input(id="answer")
        yield Static("", id="message", markup=False)
        with VerticalScroll():
            yield Static("", id="preview", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self._show_stage()
        self.query_one("#answer", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        answer_input = self.query_one("#answer", Input)
        answer_input.value = ""

        previous_rules = len(self.session.rules)
        outcome = self.session.submit(event.value)

        if outcome.is_err():
            self._show_message(outcome.error.message, error=True)
            return

        stage = outcome.value
        if stage is WizardStage.DONE:
            self.dismiss(self.session.result)
            return
        if stage is WizardStage.ABORTED:
            self.dismiss(None)
            return

        if len(self.session.rules) > previous_rules:
            self._show_message(f"Window #{previous_rules + 1} added.")
        elif stage is WizardStage.SCRIPT_NAME:
            self._show_message(f"Will dispatch to workspace {self.session.workspace_number}")
        elif stage is WizardStage.ADD_RULE and self.session.name:
            path = self.session.store.resolve_path(self.session.name)
            if not self.session.rules:
                self._show_message(f"Script file will be: {path}")
        elif stage is WizardStage.CONFIRM_SAVE and not self.session.rules:
            self._show_message("No windows were added. The script will only switch workspace.")
        else:
            self._show_message("")

        self._show_stage()

    def action_abort(self) -> None:
        self.session.abort()
        self.dismiss(None)

    def _show_stage(self) -> None:
        stage = self.session.stage
        step = self.session.title
        if stage in (
            WizardStage.RULE_WIDTH,
            WizardStage.RULE_HEIGHT,
            WizardStage.RULE_X,
            WizardStage.RULE_Y,
            WizardStage.RULE_COMMAND,
        ):
            step += f" · Window #{self.session.window_index}"

        self.query_one("#step", Static).update(step)
        self.query_one("#prompt", Static).update(self.session.prompt)

        preview = self.query_one("#preview", Static)
        if stage is WizardStage.CONFIRM_SAVE:
            file_name = self.session.store.resolve_path(self.session.name).name
            preview.update(f"----- {file_name} -----\n{self.session.preview()}")
        else:
            preview.update("")

    def _show_message(self, text: str, error: bool = False) -> None:
        message = self.query_one("#message", Static)
        message.set_class(error, "error")
        message.set_class(not error and bool(text), "info")
        message.update(text)
