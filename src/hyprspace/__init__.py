"""
Hyprspace - Workspace Launcher for Hyprland

Lists workspace-*.sh layout scripts, launches the selected one and
walks through a prompt sequence to author new ones.

Configuration: ~/.config/hyprspace/config.toml
Scripts:       ~/.config/hyprspace/workspace-*.sh
"""

__version__ = "0.3.0"
