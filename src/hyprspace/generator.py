# =============================================================================
# Workspace Script Template
# =============================================================================

from dataclasses import dataclass
from typing import Iterable

SHEBANG = "#!/bin/bash"
WORKSPACE_DISPATCH = "hyprctl dispatch workspace"

# Helper emitted into every script, even when no rules were collected
RULE_EXEC_HELPER = '''rule_exec() {
  local rules="$1"
  shift
  hyprctl dispatch exec "[$rules] $*"
}
'''


@dataclass(frozen=True)
class WindowRule:
    """Size, position and command for one window of a layout."""

    width: str
    height: str
    x: str
    y: str
    command: str

    def rule_string(self, workspace_number: int) -> str:
        return (
            f"workspace {workspace_number} silent; float; "
            f"size {self.width} {self.height}; move {self.x} {self.y}"
        )


def render(workspace_number: int, rules: Iterable[WindowRule]) -> str:
    """
    Render the script text for a workspace layout.

    Output layout:
        #!/bin/bash
        hyprctl dispatch workspace N
        rule_exec() helper
        one rule_exec invocation per rule, in input order

    Args:
        workspace_number: Target workspace (non-negative)
        rules: Window rules in launch order

    Returns:
        Script content, newline-terminated
    """
    lines = [
        SHEBANG,
        "",
        f"{WORKSPACE_DISPATCH} {workspace_number}",
        "",
        RULE_EXEC_HELPER,
    ]

    for rule in rules:
        lines.append(f'rule_exec "{rule.rule_string(workspace_number)}" \\')
        lines.append(f"  {rule.command}")
        lines.append("")

    return "\n".join(lines) + "\n"


def parse_workspace_number(text: str) -> int | None:
    """
    Find the workspace number a script switches to.

    Blank lines and comments are skipped; the first
    `hyprctl dispatch workspace N` line with a numeric last token wins.

    Returns:
        The workspace number, or None when no such line exists
    """
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.startswith(WORKSPACE_DISPATCH):
            last = stripped.split()[-1]
            if last.isascii() and last.isdigit():
                return int(last)

    return None
