"""
Listing Store Tests
===================

Both adapters must answer the same questions the same way; the ORM adapter
is additionally checked for pushing work into the database.
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase, TransactionTestCase, override_settings, skipUnlessDBFeature
from django.utils import timezone

from infrastructure.storage import (
    InMemoryListingStore,
    ListingStoreFactory,
    ListingStoreInterface,
    OrmListingStore,
    StoreUnavailableError,
)
from marketplace.catalog.domain.criteria import ORDERINGS, ListingCriteria, SortKey
from marketplace.catalog.domain.engine import CatalogContext, CatalogQueryEngine
from marketplace.catalog.domain.errors import InvalidFilterError, NotFoundError
from marketplace.catalog.domain.records import ListingStatus
from marketplace.models import Listing
from marketplace.tests.factories import CategoryFactory, ListingFactory, UserFactory


class ListingStoreInterfaceTest(TestCase):
    """Test ListingStoreInterface contract."""

    def test_interface_is_abstract(self):
        """ListingStoreInterface should not be instantiable."""
        with self.assertRaises(TypeError):
            ListingStoreInterface()


class ListingStoreFactoryTest(TestCase):
    def test_create_orm(self):
        self.assertIsInstance(ListingStoreFactory.create("orm"), OrmListingStore)

    def test_create_memory(self):
        self.assertIsInstance(ListingStoreFactory.create("memory"), InMemoryListingStore)

    @override_settings(INFRASTRUCTURE={"LISTING_STORE_BACKEND": "memory"})
    def test_create_from_settings(self):
        self.assertIsInstance(ListingStoreFactory.create(), InMemoryListingStore)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            ListingStoreFactory.create("mongo")


class OrmListingStoreTest(TestCase):
    """Catalog scenarios against the database-backed store."""

    @classmethod
    def setUpTestData(cls):
        cls.seller = UserFactory()
        cls.other_seller = UserFactory()
        cls.tops = CategoryFactory(name="Tops", slug="tops")
        cls.dresses = CategoryFactory(name="Dresses", slug="dresses")
        base = timezone.now() - timedelta(days=1)

        cls.first = ListingFactory(
            seller=cls.seller, category=cls.tops, price=Decimal("10.00"), created_at=base, title="Striped tee"
        )
        cls.second = ListingFactory(
            seller=cls.seller,
            category=cls.tops,
            price=Decimal("30.00"),
            created_at=base + timedelta(minutes=1),
            title="Denim jacket",
            brand="Levi's",
        )
        cls.third = ListingFactory(
            seller=cls.other_seller,
            category=cls.dresses,
            price=Decimal("20.00"),
            created_at=base + timedelta(minutes=2),
            title="Wrap dress",
        )

    def setUp(self):
        self.store = OrmListingStore()
        self.engine = CatalogQueryEngine(self.store)

    def ids(self, *listings):
        return [str(listing.id) for listing in listings]

    def test_category_filter_by_name_sorted_by_price(self):
        page = self.engine.query({"category": "Tops"}, "price_low", {"limit": 10, "offset": 0})
        self.assertEqual(page.ids, self.ids(self.first, self.second))

    def test_category_filter_by_slug(self):
        page = self.engine.query({"category": "dresses"}, "newest", {})
        self.assertEqual(page.ids, self.ids(self.third))

    def test_newest_pages(self):
        first = self.engine.query({}, "newest", {"limit": 2, "offset": 0})
        rest = self.engine.query({}, "newest", {"limit": 2, "offset": 2})

        self.assertEqual(first.ids, self.ids(self.third, self.second))
        self.assertEqual(rest.ids, self.ids(self.first))
        self.assertEqual(first.total, 3)

    def test_deleted_hidden_outside_admin(self):
        Listing.objects.filter(pk=self.third.pk).update(status=ListingStatus.DELETED)

        self.assertNotIn(str(self.third.id), self.engine.query({}, "newest", {}).ids)
        admin_page = self.engine.query({}, "newest", {}, CatalogContext(is_admin=True))
        self.assertIn(str(self.third.id), admin_page.ids)

        with self.assertRaises(NotFoundError):
            self.engine.get_by_id(self.third.id)
        record = self.engine.get_by_id(self.third.id, CatalogContext(is_admin=True))
        self.assertEqual(record.status, ListingStatus.DELETED)

    def test_invalid_price_filter(self):
        with self.assertRaises(InvalidFilterError):
            self.engine.query({"minPrice": "abc"}, "newest", {})

    def test_price_bounds_inclusive(self):
        page = self.engine.query({"min_price": "10", "max_price": Decimal("20")}, "price_low", {})
        self.assertEqual(page.ids, self.ids(self.first, self.third))

    def test_seller_filter(self):
        page = self.engine.query({"seller": str(self.other_seller.pk)}, "newest", {})
        self.assertEqual(page.ids, self.ids(self.third))

    def test_seller_filter_with_malformed_id_matches_nothing(self):
        self.assertEqual(self.engine.query({"seller": "not-a-user"}, "newest", {}).total, 0)

    def test_search_is_case_insensitive_across_fields(self):
        self.assertEqual(self.engine.query({"search": "LEVI"}, "newest", {}).ids, self.ids(self.second))
        self.assertEqual(self.engine.query({"search": "wrap"}, "newest", {}).ids, self.ids(self.third))

    def test_price_ties_broken_by_id(self):
        twins = [
            ListingFactory(seller=self.seller, category=self.tops, price=Decimal("10.00")) for _ in range(3)
        ]
        page = self.engine.query({"max_price": 10}, "price_low", {"limit": 10})
        expected = sorted(self.ids(self.first, *twins))
        self.assertEqual(page.ids, expected)

    def test_limit_zero_counts_without_rows(self):
        page = self.engine.query({}, "newest", {"limit": 0})
        self.assertEqual(len(page), 0)
        self.assertEqual(page.total, 3)

    def test_oversized_limit_returns_remaining_rows(self):
        page = self.engine.query({}, "newest", {"limit": 10**20})
        self.assertEqual(page.ids, self.ids(self.third, self.second, self.first))
        self.assertFalse(page.has_next)

        tail = self.engine.query({}, "newest", {"limit": 10**20, "offset": 2})
        self.assertEqual(tail.ids, self.ids(self.first))
        self.assertEqual(tail.total, 3)

    def test_get_malformed_id(self):
        self.assertIsNone(self.store.get("not-a-uuid"))
        self.assertIsNone(self.store.get(str(uuid.uuid4())))

    def test_record_enrichment(self):
        record = self.store.get(str(self.second.id))
        self.assertEqual(record.category, "tops")
        self.assertEqual(record.category_name, "Tops")
        self.assertEqual(record.seller_id, str(self.seller.pk))
        self.assertEqual(record.seller_name, self.seller.get_display_name())

    def test_detail_view_increments_in_database(self):
        record = self.engine.get_by_id(self.first.id, CatalogContext(track_view=True))
        record = self.engine.get_by_id(self.first.id, CatalogContext(track_view=True))

        self.assertEqual(record.view_count, 2)
        self.first.refresh_from_db()
        self.assertEqual(self.first.view_count, 2)

    def test_increment_unknown_listing(self):
        self.assertIsNone(self.store.increment_views(str(uuid.uuid4())))

    def test_popular_sort(self):
        Listing.objects.filter(pk=self.first.pk).update(view_count=7)
        page = self.engine.query({}, SortKey.POPULAR, {})
        self.assertEqual(page.ids[0], str(self.first.id))

    def test_create_and_update(self):
        record = self.store.create(
            {"title": "Scarf", "price": Decimal("8.00"), "seller_id": str(self.seller.pk), "category": "Tops"}
        )
        self.assertEqual(record.status, ListingStatus.ACTIVE)
        self.assertEqual(record.category, "tops")

        updated = self.store.update(record.id, {"price": Decimal("6.00"), "category": None, "status": "sold"})
        self.assertEqual(updated.price, Decimal("6.00"))
        self.assertIsNone(updated.category)
        self.assertEqual(updated.status, ListingStatus.ACTIVE)

    def test_conditional_status_write(self):
        listing_id = str(self.first.id)

        self.assertIsNone(self.store.set_status(listing_id, ListingStatus.SOLD, expected=ListingStatus.PENDING))
        reserved = self.store.set_status(listing_id, ListingStatus.PENDING, expected=ListingStatus.ACTIVE)
        self.assertEqual(reserved.status, ListingStatus.PENDING)
        self.assertIsNone(self.store.set_status(listing_id, ListingStatus.PENDING, expected=ListingStatus.ACTIVE))

    def test_categories_only_active(self):
        CategoryFactory(name="Hats", slug="hats", is_active=False)
        self.assertEqual([c.slug for c in self.store.categories()], ["dresses", "tops"])
        self.assertIsNone(self.store.get_category("hats"))

    def test_database_error_becomes_store_unavailable(self):
        with patch.object(Listing.objects, "select_related", side_effect=DatabaseError("connection lost")):
            with self.assertRaises(StoreUnavailableError):
                self.store.select(ListingCriteria(), ORDERINGS[SortKey.NEWEST], 0, 10)


class OrmConcurrentViewTest(TransactionTestCase):
    """Concurrent detail views against a real database connection per thread."""

    @skipUnlessDBFeature("has_select_for_update")
    def test_concurrent_views_are_not_lost(self):
        import threading

        from django.db import connection

        listing = ListingFactory()
        store = OrmListingStore()
        viewers = 8
        barrier = threading.Barrier(viewers)
        errors = []

        def view():
            try:
                barrier.wait()
                store.increment_views(str(listing.id))
            except Exception as e:  # noqa: BLE001
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=view) for _ in range(viewers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        listing.refresh_from_db()
        self.assertEqual(errors, [])
        self.assertEqual(listing.view_count, viewers)


class InMemoryListingStoreTest(TestCase):
    def setUp(self):
        self.store = InMemoryListingStore()

    def test_create_assigns_id_and_defaults(self):
        record = self.store.create({"title": "Tee", "price": "5", "seller_id": 1, "category": "Tops"})

        uuid.UUID(record.id)
        self.assertEqual(record.status, ListingStatus.ACTIVE)
        self.assertEqual(record.view_count, 0)
        self.assertEqual(record.category, "tops")
        self.assertEqual(record.seller_id, "1")

    def test_unknown_category_is_dropped(self):
        record = self.store.create({"title": "Tee", "price": "5", "seller_id": 1, "category": "hats"})
        self.assertIsNone(record.category)

    def test_update_ignores_locked_fields(self):
        record = self.store.create({"title": "Tee", "price": "5", "seller_id": 1})
        updated = self.store.update(record.id, {"title": "Shirt", "view_count": 50})

        self.assertEqual(updated.title, "Shirt")
        self.assertEqual(updated.view_count, 0)

    def test_update_unknown(self):
        self.assertIsNone(self.store.update("missing", {"title": "x"}))
        self.assertIsNone(self.store.set_status("missing", ListingStatus.DELETED))
        self.assertIsNone(self.store.increment_views("missing"))

    def test_clear(self):
        self.store.create({"title": "Tee", "price": "5", "seller_id": 1})
        self.store.clear()
        self.assertEqual(self.store.select(ListingCriteria(), ORDERINGS[SortKey.NEWEST], 0, 10), ([], 0))

    def test_oversized_limit_returns_remaining_rows(self):
        self.store.create({"title": "Tee", "price": "5", "seller_id": 1})
        second = self.store.create({"title": "Skirt", "price": "9", "seller_id": 1})

        records, total = self.store.select(ListingCriteria(), ORDERINGS[SortKey.PRICE_LOW], 1, 10**20)

        self.assertEqual([record.id for record in records], [second.id])
        self.assertEqual(total, 2)
