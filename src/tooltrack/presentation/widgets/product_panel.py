"""
ProductPanel - product catalog management for the admin tab.

Shows the catalog in a DataTable (newest first), an add-product form and a
delete button acting on the selected row. Delete asks "Confirm?" first and
only the Yes button removes the product.
"""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, DataTable, Input, Label, Static

from tooltrack.application.catalog import ProductCatalog, build_product_draft
from tooltrack.domain.errors import FormValidationError, ToolTrackError
from tooltrack.domain.models import Product
from tooltrack.logger import get_logger
from tooltrack.utils import format_timestamp

logger = get_logger("product_panel")

PRODUCT_INPUTS = ("product-name", "part-number", "buying-price", "bought-from")


class CatalogChanged(Message):
    """Posted after a product was added or deleted."""


class ProductPanel(Vertical):
    """Add, list and delete catalog products."""

    DEFAULT_CSS = """
    ProductPanel {
        height: auto;
        border: round $primary;
        padding: 0 1;
        margin-bottom: 1;
    }

    ProductPanel .section-title {
        text-style: bold;
    }

    ProductPanel #product-form {
        height: auto;
    }

    ProductPanel #product-form Input {
        width: 1fr;
    }

    ProductPanel .field-error {
        color: $error;
        height: auto;
    }

    ProductPanel DataTable {
        height: 12;
        margin-top: 1;
    }

    ProductPanel #product-actions {
        height: auto;
    }

    ProductPanel #delete-confirm {
        height: auto;
        display: none;
    }

    ProductPanel #delete-confirm.open {
        display: block;
    }

    ProductPanel #delete-confirm Label {
        padding: 1 1 0 0;
    }
    """

    def __init__(self, catalog: ProductCatalog, **kwargs):
        super().__init__(**kwargs)
        self.catalog = catalog
        self.products: list[Product] = []
        self.pending_delete: str | None = None

    def compose(self) -> ComposeResult:
        yield Static("Products", classes="section-title")
        yield Label("Add a product to the parts catalog")
        with Horizontal(id="product-form"):
            yield Input(placeholder="Product name *", id="product-name")
            yield Input(placeholder="Part number *", id="part-number")
            yield Input(placeholder="Buying price", type="number", id="buying-price")
            yield Input(placeholder="Bought from", id="bought-from")
        yield Static("", id="product-errors", classes="field-error")
        with Horizontal(id="product-actions"):
            yield Button("Save Product", id="save-product", variant="primary")
            yield Button("Delete Selected", id="delete-product", variant="error")
        with Horizontal(id="delete-confirm"):
            yield Label("Confirm?", id="delete-prompt")
            yield Button("Yes", id="confirm-delete", variant="error")
            yield Button("No", id="cancel-delete")
        yield DataTable(id="product-table", zebra_stripes=True, cursor_type="row")

    def on_mount(self) -> None:
        table = self.query_one("#product-table", DataTable)
        table.add_columns("Name", "Part Number", "Buying Price", "Bought From", "Added")

    async def reload(self) -> None:
        """Re-read the catalog into the table."""
        try:
            self.products = await self.catalog.list_products()
        except ToolTrackError as e:
            logger.error(f"Loading products failed: {e}")
            self.notify(str(e), title="Could not load products", severity="error")
            return

        table = self.query_one("#product-table", DataTable)
        table.clear()
        for product in self.products:
            table.add_row(
                product.name,
                product.part_number,
                f"{product.buying_price:.2f}",
                product.bought_from or "-",
                format_timestamp(product.created_at),
                key=product.id,
            )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-product":
            event.stop()
            await self.save_product()
        elif event.button.id == "delete-product":
            event.stop()
            self.request_delete()
        elif event.button.id == "confirm-delete":
            event.stop()
            await self.confirm_delete()
        elif event.button.id == "cancel-delete":
            event.stop()
            self.cancel_delete()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in PRODUCT_INPUTS:
            event.stop()
            await self.save_product()

    async def save_product(self) -> Product | None:
        values = {input_id: self.query_one(f"#{input_id}", Input).value for input_id in PRODUCT_INPUTS}
        errors = self.query_one("#product-errors", Static)
        try:
            draft = build_product_draft(
                name=values["product-name"],
                part_number=values["part-number"],
                buying_price=values["buying-price"],
                bought_from=values["bought-from"],
            )
            product = await self.catalog.add_product(draft)
        except FormValidationError as e:
            errors.update("\n".join(e.errors.values()))
            return None
        except ToolTrackError as e:
            logger.error(f"Saving product failed: {e}")
            self.notify(str(e), title="Save failed", severity="error")
            return None

        errors.update("")
        for input_id in PRODUCT_INPUTS:
            self.query_one(f"#{input_id}", Input).value = ""
        self.notify(f"Added {product.name} ({product.part_number})", title="Product saved")
        await self.reload()
        self.post_message(CatalogChanged())
        return product

    def selected_product_id(self) -> str | None:
        table = self.query_one("#product-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if self.pending_delete is not None and event.row_key.value != self.pending_delete:
            self.cancel_delete()

    def request_delete(self) -> None:
        """Ask for confirmation before deleting the selected product."""
        product_id = self.selected_product_id()
        if product_id is None:
            self.notify("Select a product first", severity="warning")
            return
        self.pending_delete = product_id
        name = next((p.name for p in self.products if p.id == product_id), "this product")
        self.query_one("#delete-prompt", Label).update(f"Confirm? Delete {name}")
        self.query_one("#delete-confirm").add_class("open")

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self.query_one("#delete-confirm").remove_class("open")

    async def confirm_delete(self) -> bool:
        """Delete the product awaiting confirmation, if any."""
        product_id = self.pending_delete
        self.cancel_delete()
        if product_id is None:
            return False
        try:
            await self.catalog.delete_product(product_id)
        except ToolTrackError as e:
            logger.error(f"Deleting product {product_id} failed: {e}")
            self.notify(str(e), title="Delete failed", severity="error")
            return False
        await self.reload()
        self.post_message(CatalogChanged())
        return True
