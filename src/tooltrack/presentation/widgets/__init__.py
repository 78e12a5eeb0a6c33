"""
ToolTrack TUI Widgets - Custom Textual widgets for the ToolTrack interface.
"""

from .admin_panel import AdminPanel
from .credentials_form import CredentialsForm
from .entry_form import EntryForm
from .lookup_panel import LookupPanel
from .part_row import PartNameInput, PartRow, SuggestionDropdown
from .product_panel import ProductPanel

__all__ = [
    "AdminPanel",
    "CredentialsForm",
    "EntryForm",
    "LookupPanel",
    "PartNameInput",
    "PartRow",
    "ProductPanel",
    "SuggestionDropdown",
]
