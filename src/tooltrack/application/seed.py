"""Demo catalog and entries loaded by ``tooltrack seed``."""

from datetime import datetime, timezone

from tooltrack.application.catalog import ProductCatalog, build_product_draft
from tooltrack.application.ledger import EntryLedger
from tooltrack.domain.models import EntryDraft, SparePart
from tooltrack.logger import get_logger

logger = get_logger("seed")

DEMO_PRODUCTS = [
    ("Brake Pad Set", "BP-1001", 450.0, "Sri Ganesh Auto Parts"),
    ("Brake Cable", "BC-2040", 120.0, "Sri Ganesh Auto Parts"),
    ("Chain Lubricant", "CL-0310", 180.0, None),
    ("Engine Oil", "EO-1040", 390.0, "Castle Lubes"),
    ("Air Filter", "AF-7712", 220.0, None),
    ("Spark Plug", "SP-0099", 95.0, "Bosch Distributor"),
    ("Clutch Cable", "CC-2041", 140.0, "Sri Ganesh Auto Parts"),
    ("Headlight Bulb", "HB-3300", 160.0, None),
]

DEMO_ENTRIES = [
    ("Rajesh Kumar", "9876543210", "KA01AB1234", "Brake Issues",
     [("Brake Pad Set", 2), ("Chain Lubricant", 1)], datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
    ("Suresh Babu", "9876543211", "TN02CD5678", "Engine Performance",
     [("Engine Oil", 2), ("Air Filter", 1)], datetime(2024, 1, 16, 14, 45, tzinfo=timezone.utc)),
    ("Amit Singh", "9876543212", "MH03EF9012", "Starting Problem",
     [("Spark Plug", 2), ("Brake Pad Set", 1)], datetime(2024, 1, 17, 9, 15, tzinfo=timezone.utc)),
    ("Rajesh Kumar", "9876543210", "KA05GH3456", "Clutch Slipping",
     [("Chain Lubricant", 1), ("Clutch Cable", 1)], datetime(2024, 1, 18, 11, 20, tzinfo=timezone.utc)),
    ("Vikram Reddy", "9876543213", "AP04IJ7890", "Electrical Issue",
     [("Headlight Bulb", 2), ("Engine Oil", 1)], datetime(2024, 1, 19, 16, 0, tzinfo=timezone.utc)),
]


async def seed_demo_data(catalog: ProductCatalog, ledger: EntryLedger) -> tuple[int, int]:
    """
    Load the demo products and entries.

    Products are skipped when the catalog already has any; entries are
    skipped when the ledger already has any.

    Returns:
        (products added, entries added)
    """
    products_added = 0
    if not await catalog.list_products():
        for name, part_number, price, supplier in DEMO_PRODUCTS:
            await catalog.add_product(build_product_draft(name, part_number, price, supplier))
            products_added += 1

    entries_added = 0
    if not await ledger.all_entries():
        for mechanic, contact, vehicle, complaint, parts, created_at in DEMO_ENTRIES:
            draft = EntryDraft(
                mechanic_name=mechanic,
                contact_number=contact,
                vehicle_number=vehicle,
                complaint_type=complaint,
                spare_parts=[SparePart(name=name, quantity=quantity) for name, quantity in parts],
            )
            await ledger.save_entry(draft, created_at=created_at)
            entries_added += 1

    logger.info(f"Seeded {products_added} product(s) and {entries_added} entr(ies)")
    return products_added, entries_added
