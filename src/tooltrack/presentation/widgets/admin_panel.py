"""
AdminPanel - the admin tab.

Locked, it shows a login form. Once the shared credential is verified it
shows the dashboard: statistics, product management and the
change-credentials form.
"""

from rich.table import Table
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, ContentSwitcher, Input, Static

from tooltrack.application.admin import AdminGate
from tooltrack.application.catalog import ProductCatalog
from tooltrack.application.ledger import EntryLedger
from tooltrack.domain.errors import ToolTrackError
from tooltrack.domain.models import Statistics
from tooltrack.logger import get_logger
from tooltrack.presentation.widgets.credentials_form import CredentialsForm
from tooltrack.presentation.widgets.product_panel import CatalogChanged, ProductPanel

logger = get_logger("admin_panel")


def render_statistics(stats: Statistics) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Total Entries", justify="center")
    table.add_column("Active Mechanics", justify="center")
    table.add_column("Parts Recorded", justify="center")
    table.add_row(f"{stats.total_entries:,}", f"{stats.unique_mechanics:,}", f"{stats.total_parts:,}")
    return table


class AdminPanel(Vertical):
    """Login gate in front of the admin dashboard."""

    DEFAULT_CSS = """
    AdminPanel {
        padding: 1 2;
    }

    AdminPanel .title {
        text-style: bold;
    }

    AdminPanel .subtitle {
        color: $text-muted;
        margin-bottom: 1;
    }

    AdminPanel #admin-login {
        width: 60;
        height: auto;
    }

    AdminPanel #login-error {
        color: $error;
        height: auto;
    }

    AdminPanel #admin-header {
        height: auto;
    }

    AdminPanel #admin-header Vertical {
        width: 1fr;
        height: auto;
    }

    AdminPanel #admin-stats {
        height: auto;
        margin-bottom: 1;
    }
    """

    def __init__(self, gate: AdminGate, catalog: ProductCatalog, ledger: EntryLedger, **kwargs):
        super().__init__(**kwargs)
        self.gate = gate
        self.catalog = catalog
        self.ledger = ledger

    def compose(self) -> ComposeResult:
        with ContentSwitcher(initial="admin-login", id="admin-switcher"):
            with Vertical(id="admin-login"):
                yield Static("Admin Login", classes="title")
                yield Static("Enter the admin credentials to continue", classes="subtitle")
                yield Input(placeholder="Username", id="login-username")
                yield Input(placeholder="Password", password=True, id="login-password")
                yield Static("", id="login-error")
                yield Button("Login", id="login", variant="primary")
            with VerticalScroll(id="admin-dashboard"):
                with Horizontal(id="admin-header"):
                    with Vertical():
                        yield Static("Admin Dashboard", classes="title")
                        yield Static("Manage and monitor your bike spare parts system", classes="subtitle")
                    yield Button("Lock", id="lock", variant="default")
                yield Static("", id="admin-stats")
                yield ProductPanel(self.catalog, id="product-panel")
                yield CredentialsForm(self.gate, id="credentials-form")

    @property
    def is_unlocked(self) -> bool:
        return self.query_one("#admin-switcher", ContentSwitcher).current == "admin-dashboard"

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login":
            await self.login()
        elif event.button.id == "lock":
            self.lock_admin()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("login-username", "login-password"):
            event.stop()
            await self.login()

    async def on_catalog_changed(self, message: CatalogChanged) -> None:
        await self.refresh_statistics()

    async def login(self) -> bool:
        username = self.query_one("#login-username", Input).value
        password = self.query_one("#login-password", Input).value
        error = self.query_one("#login-error", Static)
        try:
            unlocked = await self.gate.unlock(username, password)
        except ToolTrackError as e:
            logger.error(f"Admin login failed: {e}")
            error.update(str(e))
            return False

        if not unlocked:
            error.update("Invalid username or password")
            return False

        error.update("")
        self.query_one("#login-password", Input).value = ""
        self.query_one("#admin-switcher", ContentSwitcher).current = "admin-dashboard"
        await self.refresh_dashboard()
        return True

    def lock_admin(self) -> None:
        self.gate.lock()
        self.query_one("#login-username", Input).value = ""
        self.query_one("#admin-switcher", ContentSwitcher).current = "admin-login"

    async def refresh_dashboard(self) -> None:
        await self.refresh_statistics()
        await self.query_one("#product-panel", ProductPanel).reload()

    async def refresh_statistics(self) -> None:
        if not self.gate.is_unlocked:
            return
        try:
            stats = await self.ledger.statistics()
        except ToolTrackError as e:
            logger.error(f"Loading statistics failed: {e}")
            self.notify(str(e), title="Could not load statistics", severity="error")
            return
        self.query_one("#admin-stats", Static).update(render_statistics(stats))
