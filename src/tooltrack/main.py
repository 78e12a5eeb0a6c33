import asyncio
from pathlib import Path
from typing import Optional

import typer

# Import logger setup first to ensure logging is configured
from tooltrack.logger import get_logger, setup_logger
from tooltrack.application.admin import AdminGate
from tooltrack.application.catalog import ProductCatalog
from tooltrack.application.form import FormRecord
from tooltrack.application.ledger import EntryLedger
from tooltrack.application.seed import seed_demo_data
from tooltrack.config import AppConfig, load_config
from tooltrack.domain.events import EventBus
from tooltrack.domain.protocols import RecordStore
from tooltrack.infrastructure.store import InMemoryRecordStore, JsonFileRecordStore
from tooltrack.presentation.tui import ToolTrackApp

cli = typer.Typer(
    name="tooltrack",
    help="ToolTrack - spare parts ledger for a bike repair shop",
    epilog="""
    Examples:
    $ tooltrack seed
    $ tooltrack run --debounce-ms 200
    """,
    add_completion=False,
)


def build_store(config: AppConfig) -> RecordStore:
    if config.in_memory:
        return InMemoryRecordStore()
    return JsonFileRecordStore(base_dir=config.data_dir)


async def main(config: AppConfig) -> None:
    """Main application entry point."""
    setup_logger(log_level=config.effective_log_level)
    logger = get_logger("main")

    logger.info("🚲 Starting ToolTrack")
    logger.info(
        f"Config: storage={config.storage}, data_dir={config.data_dir}, "
        f"debounce={config.debounce_ms}ms, search_limit={config.search_limit}"
    )

    store = build_store(config)
    catalog = ProductCatalog(store, search_limit=config.search_limit)
    ledger = EntryLedger(store)
    gate = AdminGate(store)
    await gate.ensure_default_credentials(config.admin_username, config.admin_password)

    form = FormRecord(
        gateway=catalog,
        event_bus=EventBus(),
        debounce_delay=config.debounce_delay,
    )

    app = ToolTrackApp(form=form, catalog=catalog, ledger=ledger, gate=gate)
    try:
        await app.run_async()
    finally:
        # Cancel pending debounce timers and in-flight searches
        await form.aclose()
        logger.info("ToolTrack stopped")


@cli.command()
def run(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Directory holding the JSON tables"),
    memory: bool = typer.Option(False, "--memory", help="Keep all data in memory (nothing is saved)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    debounce_ms: Optional[int] = typer.Option(None, "--debounce-ms", min=0, help="Part search debounce delay"),
):
    """Launch the ToolTrack TUI."""
    config = load_config()
    if data_dir is not None:
        config.data_dir = data_dir.expanduser()
    if memory:
        config.storage = "memory"
    if debug:
        config.debug = True
    if debounce_ms is not None:
        config.debounce_ms = debounce_ms

    asyncio.run(main(config))


@cli.command()
def seed(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Directory holding the JSON tables"),
):
    """Load demo products and entries into the data directory."""
    config = load_config()
    if data_dir is not None:
        config.data_dir = data_dir.expanduser()

    setup_logger(log_level=config.effective_log_level, console_output=True)
    store = JsonFileRecordStore(base_dir=config.data_dir)
    products, entries = asyncio.run(seed_demo_data(ProductCatalog(store), EntryLedger(store)))
    typer.echo(f"Seeded {products} product(s) and {entries} entr(ies) into {store.base_dir}")


def launch():
    """Entry point for ``python -m tooltrack``: run the TUI with the environment config."""
    asyncio.run(main(load_config()))


if __name__ == "__main__":
    cli()
