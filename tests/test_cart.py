"""
Tests for the session cart store
"""

import asyncio
import json
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from storefront.cart import CART_CHANGED, CartLineItem, CartState, CartStore, MemoryCartStorage


class TestCartLineItem:
    """Tests for CartLineItem dataclass."""

    def test_price_is_decimal(self):
        item = CartLineItem(id="p1", name="Pod", price=0.1, stock=3)

        assert item.price == Decimal("0.1")
        assert item.quantity == 1

    def test_negative_values_clamped(self):
        """Malformed catalog data is clamped, not rejected."""
        item = CartLineItem(id="p1", name="Pod", price=-5, stock=-2)

        assert item.price == Decimal("0")
        assert item.stock == 0

    def test_line_total(self):
        item = CartLineItem(id="p1", name="Pod", price="4.99", stock=5, quantity=3)

        assert item.line_total == Decimal("14.97")

    def test_to_dict_keeps_price_as_string(self):
        item = CartLineItem(id="p1", name="Pod", price="19.99", stock=5)

        data = item.to_dict()
        assert data["price"] == "19.99"
        assert data["image"] is None


class TestCartState:
    """Tests for CartState dataclass."""

    def test_empty_state(self):
        state = CartState()

        assert state.total_items == 0
        assert state.total_price == Decimal("0")

    def test_from_dict_repairs_invariants(self):
        data = {
            "items": [
                {"id": "a", "name": "A", "price": "1", "stock": 2, "quantity": 9},
                {"id": "a", "name": "A again", "price": "1", "stock": 2, "quantity": 1},
                {"id": "b", "name": "B", "price": "1", "stock": 0, "quantity": 1},
                {"id": "c", "name": "C", "price": "1", "stock": 4, "quantity": 0},
            ]
        }

        state = CartState.from_dict(data)

        assert [item.id for item in state.items] == ["a", "c"]
        assert state.items[0].quantity == 2
        assert state.items[1].quantity == 1


class TestCartStore:
    """Tests for CartStore operations."""

    @pytest.mark.asyncio
    async def test_add_new_item_starts_at_one(self, storage, p1):
        store = CartStore("session-a", storage)
        p1.quantity = 5  # Candidate quantity is ignored

        result = await store.add_item(p1)

        assert result.quantity == 1
        assert store.total_items == 1

    @pytest.mark.asyncio
    async def test_add_same_product_never_exceeds_stock(self, storage, p1):
        store = CartStore("session-a", storage)

        for _ in range(10):
            await store.add_item(p1)

        assert len(store.items) == 1
        assert store.items[0].quantity == p1.stock

    @pytest.mark.asyncio
    async def test_add_clamps_to_existing_entry_stock(self, storage, p1):
        """The ceiling stays the one recorded when the entry was created."""
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        refreshed = CartLineItem(id="p1", name="Pod Mint Ice", price="10", stock=50)
        await store.add_item(refreshed)
        await store.add_item(refreshed)

        assert store.get_item("p1").quantity == 2

    @pytest.mark.asyncio
    async def test_add_tracked_reports_previous_quantity(self, storage, p1):
        store = CartStore("session-a", storage)

        assert (await store.add_item_tracked(p1))[0] == 0
        await store.add_item(p1)
        previous, result = await store.add_item_tracked(p1)

        assert previous == 2
        assert result.quantity == 2

    @pytest.mark.asyncio
    async def test_add_out_of_stock_candidate_is_noop(self, storage):
        store = CartStore("session-a", storage)

        result = await store.add_item(CartLineItem(id="x", name="Gone", price="3", stock=0))

        assert result is None
        assert store.items == []

    @pytest.mark.asyncio
    async def test_remove_then_add_starts_at_one(self, storage, p1):
        store = CartStore("session-a", storage)
        await store.add_item(p1)
        await store.add_item(p1)

        await store.remove_item("p1")
        await store.add_item(p1)

        assert store.get_item("p1").quantity == 1

    @pytest.mark.asyncio
    async def test_remove_missing_item_is_noop(self, storage, p1):
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        await store.remove_item("missing")

        assert store.total_items == 1

    @pytest.mark.asyncio
    async def test_update_to_zero_equals_remove(self, storage, p1, p2):
        removed = CartStore("session-a", storage)
        updated = CartStore("session-b", storage)
        for store in (removed, updated):
            await store.add_item(p1)
            await store.add_item(p2)

        await removed.remove_item("p1")
        await updated.update_quantity("p1", 0)

        assert removed.to_dict()["items"] == updated.to_dict()["items"]

    @pytest.mark.asyncio
    async def test_update_missing_item_is_noop(self, storage, p1):
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        result = await store.update_quantity("missing", 3)

        assert result is None
        assert store.total_items == 1

    @pytest.mark.asyncio
    async def test_update_sets_quantity_within_stock(self, storage, p2):
        store = CartStore("session-a", storage)
        await store.add_item(p2)

        result = await store.update_quantity("p2", 7)

        assert result.quantity == 7

    @pytest.mark.asyncio
    async def test_total_price_is_recomputed(self, storage, p1, p2):
        store = CartStore("session-a", storage)
        await store.add_item(p1)
        await store.add_item(p2)
        assert store.total_price == Decimal("14.99")

        await store.update_quantity("p2", 3)

        expected = sum(item.price * item.quantity for item in store.items)
        assert store.total_price == expected == Decimal("24.97")

    @pytest.mark.asyncio
    async def test_clear_cart(self, storage, p1, p2):
        store = CartStore("session-a", storage)
        await store.add_item(p1)
        await store.add_item(p2)

        await store.clear_cart()

        assert store.items == []
        assert store.total_items == 0
        assert json.loads(storage.documents["session-a"])["items"] == []

    @pytest.mark.asyncio
    async def test_items_are_copies(self, storage, p1):
        """Collaborators cannot mutate cart state behind the store's back."""
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        store.items[0].quantity = 99
        store.get_item("p1").quantity = 99

        assert store.get_item("p1").quantity == 1

    @pytest.mark.asyncio
    async def test_stock_scenario(self, storage):
        store = CartStore("session-a", storage)
        product = CartLineItem(id="p1", name="Pod", price=10, stock=2)

        await store.add_item(product)
        await store.add_item(product)
        assert len(store.items) == 1
        assert store.get_item("p1").quantity == 2
        assert store.total_price == Decimal("20")

        await store.add_item(product)
        assert store.get_item("p1").quantity == 2

        await store.update_quantity("p1", 5)
        assert store.get_item("p1").quantity == 2

        await store.update_quantity("p1", -1)
        assert store.get_item("p1") is None
        assert store.total_items == 0


class TestCartPersistence:
    """Tests for rehydration and best-effort writes."""

    @pytest.mark.asyncio
    async def test_survives_reload(self, storage, p1, p2):
        store = CartStore("session-a", storage)
        await store.add_item(p1)
        await store.add_item(p2)
        await store.update_quantity("p2", 4)

        reloaded = await CartStore.load("session-a", storage)

        assert reloaded.to_dict()["items"] == store.to_dict()["items"]
        assert reloaded.total_items == store.total_items == 5
        assert reloaded.total_price == store.total_price

    @pytest.mark.asyncio
    async def test_price_round_trips_exactly(self, storage):
        store = CartStore("session-a", storage)
        await store.add_item(CartLineItem(id="p", name="P", price="0.10000000000000001", stock=1))

        reloaded = await CartStore.load("session-a", storage)

        assert reloaded.get_item("p").price == Decimal("0.10000000000000001")

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, storage, p1):
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        other = await CartStore.load("session-b", storage)

        assert other.items == []

    @pytest.mark.asyncio
    async def test_corrupted_payload_loads_empty(self, storage):
        storage.documents["session-a"] = "{not json"

        store = await CartStore.load("session-a", storage)

        assert store.items == []
        assert "session-a" not in storage.documents

    @pytest.mark.asyncio
    async def test_failed_write_does_not_raise_and_is_retried(self, p1, p2):
        storage = MemoryCartStorage()
        real_save = storage.save
        storage.save = AsyncMock(side_effect=ConnectionError("redis down"))
        store = CartStore("session-a", storage)

        await store.add_item(p1)
        assert store.last_save_failed is True
        assert store.total_items == 1

        storage.save = real_save
        await store.add_item(p2)

        assert store.last_save_failed is False
        persisted = json.loads(storage.documents["session-a"])
        assert [item["id"] for item in persisted["items"]] == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_unreachable_storage_loads_empty_cart(self, p1):
        storage = MemoryCartStorage()
        storage.load = AsyncMock(side_effect=ConnectionError("redis down"))

        store = await CartStore.load("session-a", storage)
        assert store.items == []

        # Mutations keep working and the next write stores the cart
        await store.add_item(p1)
        assert json.loads(storage.documents["session-a"])["items"][0]["id"] == "p1"

    @pytest.mark.asyncio
    async def test_mutation_builds_on_persisted_cart(self, storage, p1, p2):
        """Another writer of the same session is not overwritten."""
        first = CartStore("session-a", storage)
        second = CartStore("session-a", storage)

        await first.add_item(p1)
        await second.add_item(p2)
        await first.add_item(p1)

        persisted = json.loads(storage.documents["session-a"])
        assert [(item["id"], item["quantity"]) for item in persisted["items"]] == [("p1", 2), ("p2", 1)]

    @pytest.mark.asyncio
    async def test_expired_cart_is_not_written_back(self, storage, p1, p2):
        store = CartStore("session-a", storage)
        await store.add_item(p1)

        await storage.delete("session-a")
        await store.add_item(p2)

        assert [item.id for item in store.items] == ["p2"]


class TestCartConcurrency:
    """Mutations are serialized by the store lock."""

    @pytest.mark.asyncio
    async def test_concurrent_adds_are_serialized(self):
        storage = MemoryCartStorage()
        original_save = storage.save

        async def slow_save(session_id, payload):
            await asyncio.sleep(0)
            await original_save(session_id, payload)

        storage.save = slow_save
        store = CartStore("session-a", storage)
        product = CartLineItem(id="p", name="P", price="1", stock=100)

        await asyncio.gather(*[store.add_item(product) for _ in range(25)])

        assert store.get_item("p").quantity == 25
        reloaded = await CartStore.load("session-a", storage)
        assert reloaded.get_item("p").quantity == 25


class TestCartSubscriptions:
    """Change notifications with explicit cancellation."""

    @pytest.mark.asyncio
    async def test_subscriber_receives_snapshots_until_unsubscribed(self, storage, p1):
        store = CartStore("session-a", storage)
        received = []
        subscription = store.subscribe(lambda event, state: received.append((event, state.total_items)))

        await store.add_item(p1)
        await store.add_item(p1)
        subscription.unsubscribe()
        await store.clear_cart()

        assert received == [(CART_CHANGED, 1), (CART_CHANGED, 2)]
        assert subscription.active is False

    @pytest.mark.asyncio
    async def test_listener_may_mutate_the_store(self, storage, p1, p2):
        store = CartStore("session-a", storage)

        async def add_accessory(event, state):
            if state.find("p2") is None:
                await store.add_item(p2)

        store.subscribe(add_accessory)
        await asyncio.wait_for(store.add_item(p1), timeout=1)

        assert [item.id for item in store.items] == ["p1", "p2"]
