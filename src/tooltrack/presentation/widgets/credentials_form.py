"""CredentialsForm - change the shared admin username and password."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Input, Static

from tooltrack.application.admin import AdminGate
from tooltrack.domain.errors import CredentialError, RecordStoreError
from tooltrack.logger import get_logger

logger = get_logger("credentials_form")

CREDENTIAL_INPUTS = (
    ("current-username", "Current username", False),
    ("current-password", "Current password", True),
    ("new-username", "New username", False),
    ("new-password", "New password", True),
    ("confirm-password", "Confirm new password", True),
)


class CredentialsForm(Vertical):
    DEFAULT_CSS = """
    CredentialsForm {
        height: auto;
        border: round $primary;
        padding: 0 1;
        margin-bottom: 1;
    }

    CredentialsForm .section-title {
        text-style: bold;
    }

    CredentialsForm #credentials-message {
        height: auto;
    }
    """

    def __init__(self, gate: AdminGate, **kwargs):
        super().__init__(**kwargs)
        self.gate = gate

    def compose(self) -> ComposeResult:
        yield Static("Change Credentials", classes="section-title")
        for input_id, placeholder, password in CREDENTIAL_INPUTS:
            yield Input(placeholder=placeholder, password=password, id=input_id)
        yield Static("", id="credentials-message")
        yield Button("Update Credentials", id="update-credentials", variant="warning")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "update-credentials":
            event.stop()
            await self.update_credentials()

    async def update_credentials(self) -> bool:
        values = [self.query_one(f"#{input_id}", Input).value for input_id, _, _ in CREDENTIAL_INPUTS]
        message = self.query_one("#credentials-message", Static)
        try:
            await self.gate.change_credentials(*values)
        except CredentialError as e:
            message.update(f"[red]{e}[/]")
            return False
        except RecordStoreError as e:
            logger.error(f"Updating credentials failed: {e}")
            message.update("[red]Failed to update credentials[/]")
            return False

        for input_id, _, _ in CREDENTIAL_INPUTS:
            self.query_one(f"#{input_id}", Input).value = ""
        message.update("[green]Credentials updated successfully[/]")
        return True
