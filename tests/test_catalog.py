"""Tests for ProductCatalog and product form validation."""

import pytest

from tooltrack.application.catalog import ProductCatalog, build_product_draft
from tooltrack.domain.errors import FormValidationError, RecordStoreError
from tooltrack.infrastructure.store import InMemoryRecordStore


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def catalog(store) -> ProductCatalog:
    return ProductCatalog(store)


async def add(catalog: ProductCatalog, name: str, part_number: str, price=0, supplier=None):
    return await catalog.add_product(build_product_draft(name, part_number, price, supplier))


class TestBuildProductDraft:
    def test_valid_draft_is_trimmed(self):
        draft = build_product_draft("  Brake Cable ", " BC-2040 ", "120.50", "  ")

        assert draft.name == "Brake Cable"
        assert draft.part_number == "BC-2040"
        assert draft.buying_price == 120.5
        assert draft.bought_from is None

    def test_blank_price_defaults_to_zero(self):
        assert build_product_draft("Chain", "CH-1", "").buying_price == 0.0

    def test_missing_fields_are_reported(self):
        with pytest.raises(FormValidationError) as exc_info:
            build_product_draft("", " ", "abc")

        assert exc_info.value.errors == {
            "name": "Product name is required",
            "part_number": "Part number is required",
            "buying_price": "Please enter a valid price",
        }

    def test_negative_price_is_rejected(self):
        with pytest.raises(FormValidationError) as exc_info:
            build_product_draft("Chain", "CH-1", -5)

        assert exc_info.value.errors == {"buying_price": "Please enter a valid price"}


class TestProductCatalog:
    @pytest.mark.asyncio
    async def test_add_and_get(self, catalog):
        product = await add(catalog, "Engine Oil", "EO-1040", 390, "Castle Lubes")

        fetched = await catalog.get_product(product.id)
        assert fetched == product
        assert fetched.bought_from == "Castle Lubes"
        assert await catalog.get_product("missing") is None

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, catalog, store):
        await store.insert("products", {"name": "Old", "part_number": "O-1", "created_at": "2024-01-01T00:00:00+00:00"})
        await store.insert("products", {"name": "New", "part_number": "N-1", "created_at": "2024-03-01T00:00:00+00:00"})
        await store.insert("products", {"name": "Mid", "part_number": "M-1", "created_at": "2024-02-01T00:00:00+00:00"})

        products = await catalog.list_products()

        assert [p.name for p in products] == ["New", "Mid", "Old"]

    @pytest.mark.asyncio
    async def test_search_matches_name_or_part_number_ordered_by_name(self, catalog):
        await add(catalog, "Spark Plug", "SP-BR99")
        await add(catalog, "Brake Pad Set", "BP-1001")
        await add(catalog, "Engine Oil", "EO-1040")
        await add(catalog, "Brake Cable", "BC-2040")

        products = await catalog.search("br")

        assert [p.name for p in products] == ["Brake Cable", "Brake Pad Set", "Spark Plug"]

    @pytest.mark.asyncio
    async def test_search_is_limited(self, store):
        catalog = ProductCatalog(store, search_limit=2)
        for index in range(5):
            await add(catalog, f"Cable {index}", f"C-{index}")

        assert len(await catalog.search("cable")) == 2

    @pytest.mark.asyncio
    async def test_blank_search_returns_nothing(self, catalog):
        await add(catalog, "Chain", "CH-1")

        assert await catalog.search("   ") == []

    @pytest.mark.asyncio
    async def test_query_returns_candidates(self, catalog):
        product = await add(catalog, "Brake Cable", "BC-2040", 120, "Sri Ganesh Auto Parts")

        candidates = await catalog.query("cable")

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.identifier == product.id
        assert candidate.display_name == "Brake Cable"
        assert candidate.secondary_label == "BC-2040"
        assert candidate.label() == "Brake Cable (BC-2040)"
        assert candidate.description == "Bought from Sri Ganesh Auto Parts"

    @pytest.mark.asyncio
    async def test_update_product(self, catalog):
        product = await add(catalog, "Air Filter", "AF-7712", 220)

        updated = await catalog.update_product(product.id, buying_price="240", bought_from="Bosch")

        assert updated.id == product.id
        assert updated.name == "Air Filter"
        assert updated.buying_price == 240.0
        assert updated.bought_from == "Bosch"

    @pytest.mark.asyncio
    async def test_update_revalidates(self, catalog):
        product = await add(catalog, "Air Filter", "AF-7712")

        with pytest.raises(FormValidationError):
            await catalog.update_product(product.id, name="")

        assert (await catalog.get_product(product.id)).name == "Air Filter"

    @pytest.mark.asyncio
    async def test_update_missing_product_raises(self, catalog):
        with pytest.raises(RecordStoreError, match="not found"):
            await catalog.update_product("missing", name="x")

    @pytest.mark.asyncio
    async def test_delete_product(self, catalog):
        product = await add(catalog, "Headlight Bulb", "HB-3300")

        await catalog.delete_product(product.id)
        await catalog.delete_product(product.id)

        assert await catalog.list_products() == []
