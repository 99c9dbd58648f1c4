# =============================================================================
# New Workspace Script Wizard
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from hyprspace.errors import Error, ErrorType, Result
from hyprspace.generator import WindowRule, render
from hyprspace.script_store import ScriptStore, WorkspaceScript, is_valid_name

YES_ANSWERS = ("y", "yes")
NO_ANSWERS = ("n", "no")


class WizardStage(Enum):
    WORKSPACE_NUMBER = "workspace_number"
    SCRIPT_NAME = "script_name"
    ADD_RULE = "add_rule"
    RULE_WIDTH = "rule_width"
    RULE_HEIGHT = "rule_height"
    RULE_X = "rule_x"
    RULE_Y = "rule_y"
    RULE_COMMAND = "rule_command"
    CONFIRM_SAVE = "confirm_save"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (WizardStage.DONE, WizardStage.ABORTED)


# Step headings shown above the prompt
STEP_TITLES = {
    WizardStage.WORKSPACE_NUMBER: "Step 1/3 · Workspace target",
    WizardStage.SCRIPT_NAME: "Step 2/3 · Script identity",
    WizardStage.ADD_RULE: "Step 3/3 · Windows layout",
    WizardStage.RULE_WIDTH: "Step 3/3 · Windows layout",
    WizardStage.RULE_HEIGHT: "Step 3/3 · Windows layout",
    WizardStage.RULE_X: "Step 3/3 · Windows layout",
    WizardStage.RULE_Y: "Step 3/3 · Windows layout",
    WizardStage.RULE_COMMAND: "Step 3/3 · Windows layout",
    WizardStage.CONFIRM_SAVE: "Preview of the generated script",
}

PROMPTS = {
    WizardStage.WORKSPACE_NUMBER: "Enter workspace number (e.g. 1, 2, 3):",
    WizardStage.SCRIPT_NAME: "Enter script short name (e.g. 'backend', 'music', 'dashboard'):",
    WizardStage.ADD_RULE: "Add a window rule_exec? [Y/n]",
    WizardStage.RULE_WIDTH: "width (e.g. 10%):",
    WizardStage.RULE_HEIGHT: "height (e.g. 15%):",
    WizardStage.RULE_X: "position X (e.g. 1%):",
    WizardStage.RULE_Y: "position Y (e.g. 8%):",
    WizardStage.RULE_COMMAND: (
        'command (e.g. kitty --hold zsh -c "cava" or firefox --new-window github.com):'
    ),
    WizardStage.CONFIRM_SAVE: "Save this script? [y/N]",
}

# Rule field stages in the order they are asked, with the draft key they fill
_RULE_FIELDS = (
    (WizardStage.RULE_WIDTH, "width"),
    (WizardStage.RULE_HEIGHT, "height"),
    (WizardStage.RULE_X, "x"),
    (WizardStage.RULE_Y, "y"),
    (WizardStage.RULE_COMMAND, "command"),
)

# Characters that would break out of the quoted rule_exec argument
_RULE_VALUE_FORBIDDEN = frozenset("\"';\\`$")


@dataclass(frozen=True)
class WizardResult:
    workspace_number: int
    name: str
    rules: tuple[WindowRule, ...] = ()

    def render(self) -> str:
        return render(self.workspace_number, self.rules)


@dataclass
class WizardSession:
    """
    Prompt sequence for authoring a new workspace script.

    Stages advance one answer at a time through submit(). A rejected answer
    leaves the stage unchanged. abort() discards everything collected so far.
    The session never writes to disk; see commit_wizard().
    """

    store: ScriptStore
    stage: WizardStage = WizardStage.WORKSPACE_NUMBER
    workspace_number: int | None = None
    name: str | None = None
    rules: list[WindowRule] = field(default_factory=list)
    _draft: dict = field(default_factory=dict)

    @property
    def title(self) -> str:
        return STEP_TITLES.get(self.stage, "")

    @property
    def prompt(self) -> str:
        return PROMPTS.get(self.stage, "")

    @property
    def window_index(self) -> int:
        """1-based number of the window currently being described."""
        return len(self.rules) + 1

    @property
    def result(self) -> WizardResult | None:
        if self.stage is not WizardStage.DONE:
            return None
        return WizardResult(
            workspace_number=self.workspace_number,
            name=self.name,
            rules=tuple(self.rules),
        )

    def preview(self) -> str:
        return render(self.workspace_number or 0, self.rules)

    def abort(self) -> None:
        if self.stage.is_terminal:
            return
        logger.info(
            "Wizard aborted",
            operation="wizard",
            status="aborted",
            stage=self.stage.value
        )
        self.workspace_number = None
        self.name = None
        self.rules = []
        self._draft = {}
        self.stage = WizardStage.ABORTED

    def submit(self, text: str) -> Result[WizardStage]:
        """
        Feed one answer to the current stage.

        Args:
            text: Raw user input

        Returns:
            Result[WizardStage]: Ok with the new stage, or Err
            (VALIDATION_ERROR / NAME_TAKEN) with the stage unchanged
        """
        value = text.strip()

        if self.stage.is_terminal:
            return _rejected(f"Wizard already finished ({self.stage.value})")

        if self.stage is WizardStage.WORKSPACE_NUMBER:
            if not (value.isascii() and value.isdigit()):
                return _rejected("Invalid workspace number, please enter a non-negative integer.")
            self.workspace_number = int(value)
            return self._advance(WizardStage.SCRIPT_NAME)

        if self.stage is WizardStage.SCRIPT_NAME:
            if not value:
                return _rejected("Value cannot be empty, try again.")
            if not is_valid_name(value):
                return _rejected(
                    "Use letters, digits, '.', '_' or '-' only, starting with a letter or digit."
                )
            if self.store.exists(value):
                path = self.store.resolve_path(value)
                logger.debug(
                    "Script name already taken",
                    operation="wizard",
                    status="name_taken",
                    path=str(path)
                )
                return Result.err(Error(
                    error_type=ErrorType.NAME_TAKEN,
                    message=f"File {path} already exists, choose another name.",
                    context={"name": value, "path": str(path)}
                ))
            self.name = value
            return self._advance(WizardStage.ADD_RULE)

        if self.stage is WizardStage.ADD_RULE:
            answer = _yes_no(value, default=True)
            if answer is None:
                return _rejected("Please answer y or n.")
            if answer:
                self._draft = {}
                return self._advance(WizardStage.RULE_WIDTH)
            return self._advance(WizardStage.CONFIRM_SAVE)

        if self.stage is WizardStage.CONFIRM_SAVE:
            answer = _yes_no(value, default=False)
            if answer is None:
                return _rejected("Please answer y or n.")
            if not answer:
                self.abort()
                return Result.ok(self.stage)
            return self._advance(WizardStage.DONE)

        return self._submit_rule_field(value)

    def _submit_rule_field(self, value: str) -> Result[WizardStage]:
        if not value:
            return _rejected("Value cannot be empty, try again.")

        stages = [stage for stage, _ in _RULE_FIELDS]
        position = stages.index(self.stage)
        key = _RULE_FIELDS[position][1]

        if key != "command":
            if any(ch.isspace() for ch in value):
                return _rejected("Value cannot contain spaces (e.g. 50%).")
            if any(ch in _RULE_VALUE_FORBIDDEN for ch in value):
                return _rejected("Value cannot contain quotes, backslashes, ';', '$' or '`'.")

        self._draft[key] = value

        if position + 1 < len(_RULE_FIELDS):
            return self._advance(_RULE_FIELDS[position + 1][0])

        self.rules.append(WindowRule(**self._draft))
        self._draft = {}
        logger.debug(
            "Window rule added",
            operation="wizard",
            status="rule_added",
            metrics={"rules_count": len(self.rules)}
        )
        return self._advance(WizardStage.ADD_RULE)

    def _advance(self, stage: WizardStage) -> Result[WizardStage]:
        self.stage = stage
        return Result.ok(stage)


def _rejected(message: str) -> Result[WizardStage]:
    return Result.err(Error(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
    ))


def _yes_no(value: str, default: bool) -> bool | None:
    answer = value.lower()
    if not answer:
        return default
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    return None


def commit_wizard(store: ScriptStore, result: WizardResult) -> Result[WorkspaceScript]:
    """
    Render a finished wizard's script and save it to the store.

    Args:
        store: Destination store
        result: Data collected by a session that reached DONE

    Returns:
        Result from ScriptStore.save()
    """
    content = result.render()
    saved = store.save(result.name, content)

    if saved.is_ok():
        logger.info(
            "Wizard completed - script created",
            operation="wizard",
            status="success",
            path=str(saved.value.path),
            metrics={"rules_count": len(result.rules)}
        )
    return saved
