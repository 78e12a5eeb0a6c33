"""
ToolTrack Presentation Layer - UI components for the ToolTrack application.

This package contains the Textual TUI and its widgets; all state lives in
the application layer.
"""

from .tui import ToolTrackApp

__all__ = ["ToolTrackApp"]
