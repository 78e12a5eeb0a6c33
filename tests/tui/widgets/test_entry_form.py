import pytest
import pytest_asyncio
from textual.widgets import Input

from tooltrack.application.admin import AdminGate
from tooltrack.application.catalog import ProductCatalog, build_product_draft
from tooltrack.application.form import FormRecord, name_field_id, quantity_field_id
from tooltrack.application.ledger import EntryLedger
from tooltrack.application.seed import seed_demo_data
from tooltrack.domain.events import EventBus
from tooltrack.infrastructure.store import InMemoryRecordStore
from tooltrack.presentation.tui import ToolTrackApp
from tooltrack.presentation.widgets import AdminPanel, EntryForm, LookupPanel, ProductPanel
from tooltrack.presentation.widgets.part_row import PartRow, SuggestionDropdown

SIZE = (110, 60)


@pytest_asyncio.fixture
async def app() -> ToolTrackApp:
    store = InMemoryRecordStore()
    catalog = ProductCatalog(store)
    ledger = EntryLedger(store)
    await seed_demo_data(catalog, ledger)
    gate = AdminGate(store)
    await gate.ensure_default_credentials("admin", "admin123")
    form = FormRecord(gateway=catalog, event_bus=EventBus(), debounce_delay=0.01)
    yield ToolTrackApp(form=form, catalog=catalog, ledger=ledger, gate=gate)
    await form.aclose()


@pytest.mark.asyncio
async def test_typing_opens_dropdown_and_enter_confirms(app):
    row_id = app.form.rows[0].row_id

    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.query_one(f"#{name_field_id(row_id)}", Input).focus()
        await pilot.pause()

        await pilot.press("b", "r", "a")
        await pilot.pause(0.2)

        dropdown = app.query_one(f"#suggestions-{row_id}", SuggestionDropdown)
        assert dropdown.has_class("open")
        assert dropdown.option_count == 2
        assert dropdown.highlighted == 0
        assert dropdown.has_class("passive")

        await pilot.press("down")
        await pilot.pause()
        assert dropdown.highlighted == 0
        assert not dropdown.has_class("passive")

        await pilot.press("enter")
        await pilot.pause(0.1)

        assert app.form.rows[0].part_name == "Brake Cable"
        assert app.query_one(f"#{name_field_id(row_id)}", Input).value == "Brake Cable"
        assert not dropdown.has_class("open")
        assert app.focused is not None
        assert app.focused.id == quantity_field_id(row_id)


@pytest.mark.asyncio
async def test_enter_confirms_passive_first_candidate(app):
    row_id = app.form.rows[0].row_id

    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.query_one(f"#{name_field_id(row_id)}", Input).focus()
        await pilot.pause()
        await pilot.press("b", "r", "a")
        await pilot.pause(0.2)

        await pilot.press("enter")
        await pilot.pause(0.1)

        assert app.form.rows[0].part_name == "Brake Cable"
        assert app.focused.id == quantity_field_id(row_id)


@pytest.mark.asyncio
async def test_end_and_home_scroll_long_dropdown(app):
    for number in range(1, 10):
        await app.catalog.add_product(build_product_draft(name=f"Spoke Set {number}", part_number=f"SS-{number:03}"))
    row_id = app.form.rows[0].row_id

    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.query_one(f"#{name_field_id(row_id)}", Input).focus()
        await pilot.pause()
        await pilot.press("s", "p", "o", "k", "e")
        await pilot.pause(0.2)

        dropdown = app.query_one(f"#suggestions-{row_id}", SuggestionDropdown)
        assert dropdown.option_count == 9
        assert dropdown.scroll_offset.y == 0

        await pilot.press("end")
        await pilot.pause(0.1)
        assert dropdown.highlighted == 8
        assert dropdown.scroll_offset.y > 0

        await pilot.press("home")
        await pilot.pause(0.1)
        assert dropdown.highlighted == 0
        assert dropdown.scroll_offset.y == 0

@pytest.mark.asyncio
async def test_escape_closes_dropdown_and_keeps_text(app):
    row_id = app.form.rows[0].row_id

    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.query_one(f"#{name_field_id(row_id)}", Input).focus()
        await pilot.pause()
        await pilot.press("o", "i", "l")
        await pilot.pause(0.2)

        dropdown = app.query_one(f"#suggestions-{row_id}", SuggestionDropdown)
        assert dropdown.has_class("open")

        await pilot.press("escape")
        await pilot.pause()

        assert not dropdown.has_class("open")
        assert app.query_one(f"#{name_field_id(row_id)}", Input).value == "oil"


@pytest.mark.asyncio
async def test_add_part_mounts_row_and_focuses_it(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        entry_form = app.query_one(EntryForm)

        await entry_form.action_add_part()
        await pilot.pause(0.1)

        assert len(app.query(PartRow)) == 2
        new_row_id = app.form.rows[-1].row_id
        assert app.focused is not None
        assert app.focused.id == name_field_id(new_row_id)


@pytest.mark.asyncio
async def test_save_entry_records_and_resets(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        row_id = app.form.rows[0].row_id
        values = {
            "mechanic-name": "Amit Singh",
            "contact-number": "9876543212",
            "vehicle-number": "mh03ef9012",
            "complaint-type": "Starting Problem",
        }
        for input_id, value in values.items():
            app.query_one(f"#{input_id}", Input).value = value
        app.form.rows[0].part_name = "Spark Plug"
        app.query_one(f"#{quantity_field_id(row_id)}", Input).value = "2"
        await pilot.pause()

        assert app.query_one("#vehicle-number", Input).value == "MH03EF9012"

        await app.query_one(EntryForm).action_save_entry()
        await pilot.pause()

        entries = await app.ledger.search_by_plate("MH03EF9012")
        assert len(entries) == 2
        assert entries[0].complaint_type == "Starting Problem"
        assert [(p.name, p.quantity) for p in entries[0].spare_parts] == [("Spark Plug", 2)]
        assert app.form.mechanic_name == ""
        assert app.query_one("#mechanic-name", Input).value == ""
        assert len(app.query(PartRow)) == 1


@pytest.mark.asyncio
async def test_invalid_save_keeps_form(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.query_one("#mechanic-name", Input).value = "Amit Singh"
        await pilot.pause()

        await app.query_one(EntryForm).action_save_entry()
        await pilot.pause()

        assert len(await app.ledger.all_entries()) == 5
        assert app.form.mechanic_name == "Amit Singh"


@pytest.mark.asyncio
async def test_lookup_by_plate(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.action_show_tab("tab-lookup")
        await pilot.pause()
        panel = app.query_one(LookupPanel)
        app.query_one("#lookup-query", Input).value = "ka01"

        results = await panel.run_lookup()
        await pilot.pause()

        assert [entry.vehicle_number for entry in results] == ["KA01AB1234"]
        assert app.query_one("#lookup-results").row_count == 1

        panel.reset()
        assert app.query_one("#lookup-results").row_count == 0


@pytest.mark.asyncio
async def test_admin_login_unlocks_dashboard(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        app.action_show_tab("tab-admin")
        await pilot.pause()
        panel = app.query_one(AdminPanel)

        app.query_one("#login-username", Input).value = "admin"
        app.query_one("#login-password", Input).value = "wrong"
        assert await panel.login() is False
        assert panel.is_unlocked is False

        app.query_one("#login-password", Input).value = "admin123"
        assert await panel.login() is True
        await pilot.pause()

        assert panel.is_unlocked is True
        assert app.query_one("#product-table").row_count == 8

        await pilot.click("#lock")
        await pilot.pause()

        assert panel.is_unlocked is False
        assert app.gate.is_unlocked is False
        assert app.query_one("#login-username", Input).value == ""


async def open_admin(app, pilot) -> AdminPanel:
    app.action_show_tab("tab-admin")
    await pilot.pause()
    app.query_one("#login-username", Input).value = "admin"
    app.query_one("#login-password", Input).value = "admin123"
    panel = app.query_one(AdminPanel)
    assert await panel.login() is True
    await pilot.pause()
    return panel


@pytest.mark.asyncio
async def test_product_delete_waits_for_confirmation(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        await open_admin(app, pilot)
        products = app.query_one(ProductPanel)
        target = products.selected_product_id()
        assert target is not None

        products.request_delete()
        await pilot.pause()

        assert products.pending_delete == target
        assert app.query_one("#delete-confirm").has_class("open")
        assert await app.catalog.get_product(target) is not None

        assert await products.confirm_delete() is True
        await pilot.pause()

        assert await app.catalog.get_product(target) is None
        assert app.query_one("#product-table").row_count == 7
        assert not app.query_one("#delete-confirm").has_class("open")


@pytest.mark.asyncio
async def test_product_delete_cancel_keeps_product(app):
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        await open_admin(app, pilot)
        products = app.query_one(ProductPanel)
        target = products.selected_product_id()

        products.request_delete()
        await pilot.pause()
        products.cancel_delete()
        await pilot.pause()

        assert products.pending_delete is None
        assert await products.confirm_delete() is False
        assert await app.catalog.get_product(target) is not None
        assert app.query_one("#product-table").row_count == 8
