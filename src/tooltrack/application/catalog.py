"""
ProductCatalog - admin product CRUD and the part-name search gateway.
"""

from typing import Any

from pydantic import ValidationError

from tooltrack.domain.errors import FormValidationError, RecordStoreError
from tooltrack.domain.models import Candidate, Product, ProductDraft, field_errors
from tooltrack.domain.protocols import RecordStore
from tooltrack.logger import get_logger
from tooltrack.utils import truncate

logger = get_logger("catalog")

PRODUCTS_TABLE = "products"
DEFAULT_SEARCH_LIMIT = 10


def build_product_draft(
    name: str,
    part_number: str,
    buying_price: Any = None,
    bought_from: str | None = None,
) -> ProductDraft:
    """
    Validate product form input.

    Raises:
        FormValidationError: With field -> message for every invalid field
    """
    try:
        return ProductDraft(
            name=name,
            part_number=part_number,
            buying_price=buying_price,
            bought_from=bought_from,
        )
    except ValidationError as e:
        raise FormValidationError(field_errors(e)) from e


class ProductCatalog:
    """
    Product catalog backed by the ``products`` table.

    Also serves as the SearchGateway for the entry form: ``query()`` returns
    candidates whose name or part number contains the text.
    """

    def __init__(self, store: RecordStore, search_limit: int = DEFAULT_SEARCH_LIMIT):
        self._store = store
        self.search_limit = search_limit

    async def add_product(self, draft: ProductDraft) -> Product:
        row = await self._store.insert(PRODUCTS_TABLE, draft.to_record())
        product = Product.from_record(row)
        logger.info(f"Added product '{product.name}' ({product.part_number})")
        return product

    async def list_products(self) -> list[Product]:
        """All products, newest first."""
        rows = await self._store.select_where(PRODUCTS_TABLE, order_by="created_at", descending=True)
        return [Product.from_record(row) for row in rows]

    async def get_product(self, product_id: str) -> Product | None:
        rows = await self._store.select_where(PRODUCTS_TABLE, equals={"id": product_id}, limit=1)
        return Product.from_record(rows[0]) if rows else None

    async def update_product(self, product_id: str, **changes: Any) -> Product:
        """
        Update product fields, re-validating the merged result.

        Raises:
            RecordStoreError: If the product doesn't exist
            FormValidationError: If the merged fields are invalid
        """
        current = await self.get_product(product_id)
        if current is None:
            raise RecordStoreError(f"Product {product_id} not found")
        merged = {
            "name": current.name,
            "part_number": current.part_number,
            "buying_price": current.buying_price,
            "bought_from": current.bought_from,
            **changes,
        }
        draft = build_product_draft(**merged)
        row = await self._store.update(PRODUCTS_TABLE, product_id, draft.to_record())
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return Product.from_record(row)

    async def delete_product(self, product_id: str) -> None:
        await self._store.delete(PRODUCTS_TABLE, product_id)
        logger.info(f"Deleted product {product_id}")

    async def search(self, text: str) -> list[Product]:
        """Products whose name or part number contains ``text``, by name."""
        needle = text.strip()
        if not needle:
            return []
        rows = await self._store.select_where(
            PRODUCTS_TABLE,
            any_ilike={"name": needle, "part_number": needle},
            order_by="name",
            limit=self.search_limit,
        )
        return [Product.from_record(row) for row in rows]

    async def query(self, text: str) -> list[Candidate]:
        products = await self.search(text)
        logger.debug(f"Product search '{truncate(text)}' -> {len(products)} match(es)")
        return [product.to_candidate() for product in products]
