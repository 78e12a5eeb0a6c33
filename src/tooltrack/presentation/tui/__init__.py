"""TUI (Terminal User Interface) application.

This module contains the main ToolTrack TUI application built with Textual.
"""

from tooltrack.presentation.tui.tooltrack_app import ToolTrackApp

__all__ = ["ToolTrackApp"]
