from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from infrastructure.storage import InMemoryListingStore, ListingStoreInterface
from marketplace.catalog.domain.engine import CatalogContext
from marketplace.catalog.domain.errors import StoreUnavailableError
from marketplace.catalog.domain.records import ListingStatus
from marketplace.catalog.domain.services.catalog_service import build_context
from marketplace.services import CatalogService, ErrorCodes
from marketplace.tests.factories import make_record


def _user(pk, role="user", is_active=True, is_superuser=False):
    return SimpleNamespace(
        pk=pk,
        is_authenticated=True,
        is_active=is_active,
        is_superuser=is_superuser,
        role=role,
        get_display_name=lambda: f"User {pk}",
    )


ANONYMOUS = SimpleNamespace(pk=None, is_authenticated=False, is_active=False, is_superuser=False, role=None)


@pytest.fixture
def seller():
    return _user("seller-1")


@pytest.fixture
def buyer():
    return _user("buyer-1")


@pytest.fixture
def admin():
    return _user("admin-1", role="admin")


@pytest.fixture
def store():
    return InMemoryListingStore(
        [
            make_record(1, title="Striped tee", category="tops", category_name="Tops", price=12),
            make_record(2, title="Wrap dress", category="dresses", category_name="Dresses", price=45),
            make_record(3, title="Old boots", category="shoes", price=30, status=ListingStatus.SOLD),
            make_record(4, title="Removed coat", price=80, status=ListingStatus.DELETED),
            make_record(5, title="Other seller jeans", seller_id="seller-2", category="pants", price=25),
        ]
    )


@pytest.fixture
def catalog_service(store):
    return CatalogService(store=store)


@pytest.mark.unit
class TestBuildContext:
    def test_anonymous(self):
        assert build_context(ANONYMOUS) == CatalogContext()
        assert build_context(None, track_view=True) == CatalogContext(track_view=True)

    def test_admin_capability_requires_admin_view(self, admin):
        assert build_context(admin).is_admin is False
        assert build_context(admin, admin_view=True).is_admin is True

    def test_regular_user_never_admin(self, buyer):
        assert build_context(buyer, admin_view=True).is_admin is False
        assert build_context(buyer).identity == "buyer-1"

    def test_superuser_is_admin(self):
        root = _user("root", role="user", is_superuser=True)
        assert build_context(root, admin_view=True).is_admin is True


@pytest.mark.unit
class TestCatalogServiceBrowsing:
    def test_list_public(self, catalog_service):
        result = catalog_service.list_listings({}, sort="price_low")

        assert result.ok is True
        assert result.value.ids == ["1", "5", "2"]

    def test_list_invalid_filter(self, catalog_service):
        result = catalog_service.list_listings({"min_price": "abc"})

        assert result.ok is False
        assert result.error == ErrorCodes.INVALID_FILTER
        assert "min_price" in result.error_detail

    def test_list_invalid_pagination(self, catalog_service):
        result = catalog_service.list_listings({}, limit="lots")
        assert result.error == ErrorCodes.INVALID_FILTER

    def test_list_admin_context_sees_everything(self, catalog_service):
        result = catalog_service.list_listings({}, context=CatalogContext(is_admin=True))
        assert result.value.total == 5

    def test_list_store_unavailable(self):
        store = MagicMock(spec=ListingStoreInterface)
        store.select.side_effect = StoreUnavailableError("timeout")

        result = CatalogService(store=store).list_listings({})

        assert result.ok is False
        assert result.error == ErrorCodes.STORE_UNAVAILABLE

    def test_seller_listings_include_every_status(self, catalog_service, seller):
        result = catalog_service.list_seller_listings(seller, {"seller": "seller-2"})

        assert result.ok is True
        assert sorted(result.value.ids) == ["1", "2", "3", "4"]

    def test_seller_listings_status_facet(self, catalog_service, seller):
        result = catalog_service.list_seller_listings(seller, {"status": "sold"})
        assert result.value.ids == ["3"]

    def test_seller_listings_require_login(self, catalog_service):
        result = catalog_service.list_seller_listings(ANONYMOUS)
        assert result.error == ErrorCodes.PERMISSION_DENIED

    def test_get_listing_counts_view(self, catalog_service, store):
        result = catalog_service.get_listing("1", CatalogContext(track_view=True))

        assert result.ok is True
        assert result.value.view_count == 1
        assert store.get("1").view_count == 1

    def test_get_deleted_listing_not_found(self, catalog_service):
        result = catalog_service.get_listing("4", CatalogContext(track_view=True))

        assert result.ok is False
        assert result.error == ErrorCodes.LISTING_NOT_FOUND

    def test_get_store_unavailable(self):
        store = MagicMock(spec=ListingStoreInterface)
        store.get.side_effect = StoreUnavailableError("timeout")

        result = CatalogService(store=store).get_listing("1")
        assert result.error == ErrorCodes.STORE_UNAVAILABLE

    def test_categories(self, catalog_service):
        result = catalog_service.list_categories()
        assert [category.slug for category in result.value] == ["accessories", "dresses", "pants", "shoes", "tops"]

    def test_category_lookup_by_slug_or_name(self, catalog_service):
        assert catalog_service.get_category("tops").value.name == "Tops"
        assert catalog_service.get_category("Tops").value.slug == "tops"
        assert catalog_service.get_category("hats").error == ErrorCodes.CATEGORY_NOT_FOUND


@pytest.mark.unit
class TestCatalogServiceWrites:
    def test_create_listing(self, catalog_service, seller):
        result = catalog_service.create_listing(
            {"title": "Linen shirt", "price": Decimal("18.00"), "condition": "like_new", "category": "tops"},
            seller,
        )

        assert result.ok is True
        record = result.value
        assert record.status == ListingStatus.ACTIVE
        assert record.view_count == 0
        assert record.seller_id == "seller-1"
        assert record.category == "tops"
        assert record.seller_name == "User seller-1"

    def test_create_ignores_status_and_views(self, catalog_service, seller):
        result = catalog_service.create_listing(
            {"title": "Scarf", "price": Decimal("5"), "status": "sold", "view_count": 99}, seller
        )
        assert result.value.status == ListingStatus.ACTIVE
        assert result.value.view_count == 0

    def test_create_unknown_category(self, catalog_service, seller):
        result = catalog_service.create_listing({"title": "Hat", "price": Decimal("5"), "category": "hats"}, seller)
        assert result.error == ErrorCodes.CATEGORY_NOT_FOUND

    def test_create_requires_active_account(self, catalog_service):
        result = catalog_service.create_listing({"title": "Hat", "price": Decimal("5")}, _user("x", is_active=False))
        assert result.error == ErrorCodes.PERMISSION_DENIED

    @pytest.mark.parametrize(
        "data", [{"title": "  ", "price": Decimal("5")}, {"title": "Hat"}, {"title": "Hat", "price": Decimal("-1")}]
    )
    def test_create_validation(self, catalog_service, seller, data):
        assert catalog_service.create_listing(data, seller).error == ErrorCodes.VALIDATION_ERROR

    def test_update_by_owner(self, catalog_service, seller):
        result = catalog_service.update_listing("1", {"price": Decimal("9.50"), "size": "M"}, seller)

        assert result.ok is True
        assert result.value.price == Decimal("9.50")
        assert result.value.size == "M"

    def test_update_by_admin(self, catalog_service, admin):
        assert catalog_service.update_listing("5", {"title": "Jeans"}, admin).ok is True

    def test_update_by_stranger(self, catalog_service, buyer):
        result = catalog_service.update_listing("1", {"title": "Mine now"}, buyer)
        assert result.error == ErrorCodes.NOT_LISTING_OWNER

    @pytest.mark.parametrize("field", ["status", "view_count", "seller_id"])
    def test_update_locked_fields(self, catalog_service, seller, field):
        result = catalog_service.update_listing("1", {field: "x"}, seller)
        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_update_deleted_listing_hidden_from_owner(self, catalog_service, seller):
        result = catalog_service.update_listing("4", {"title": "Back"}, seller)
        assert result.error == ErrorCodes.LISTING_NOT_FOUND

    def test_update_deleted_listing_rejected_for_admin(self, catalog_service, admin):
        result = catalog_service.update_listing("4", {"title": "Back"}, admin)
        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_delete_is_soft(self, catalog_service, store, seller):
        result = catalog_service.delete_listing("1", seller)

        assert result.ok is True
        assert store.get("1").status == ListingStatus.DELETED
        assert "1" not in catalog_service.list_listings({}).value.ids

    def test_delete_twice(self, catalog_service, seller):
        catalog_service.delete_listing("1", seller)
        assert catalog_service.delete_listing("1", seller).error == ErrorCodes.LISTING_NOT_FOUND

    def test_delete_by_stranger(self, catalog_service, buyer):
        assert catalog_service.delete_listing("1", buyer).error == ErrorCodes.NOT_LISTING_OWNER

    def test_sold_listing_can_be_removed(self, catalog_service, seller):
        assert catalog_service.delete_listing("3", seller).value.status == ListingStatus.DELETED


@pytest.mark.unit
class TestCatalogServiceModeration:
    def test_requires_admin(self, catalog_service, seller):
        result = catalog_service.change_status("1", "deleted", seller)
        assert result.error == ErrorCodes.PERMISSION_DENIED

    def test_unknown_status(self, catalog_service, admin):
        assert catalog_service.change_status("1", "archived", admin).error == ErrorCodes.VALIDATION_ERROR

    def test_legacy_spelling(self, catalog_service, admin):
        result = catalog_service.change_status("1", "reserved", admin)
        assert result.value.status == ListingStatus.PENDING

    def test_invalid_transition(self, catalog_service, admin):
        result = catalog_service.change_status("3", "active", admin)
        assert result.error == ErrorCodes.INVALID_STATUS_TRANSITION

    def test_deleted_is_terminal(self, catalog_service, admin):
        result = catalog_service.change_status("4", "active", admin)
        assert result.error == ErrorCodes.INVALID_STATUS_TRANSITION

    def test_lost_race(self, store, admin):
        racing_store = MagicMock(wraps=store)
        racing_store.set_status.return_value = None

        result = CatalogService(store=racing_store).change_status("1", "deleted", admin)

        assert result.error == ErrorCodes.INVALID_STATUS_TRANSITION
        racing_store.set_status.assert_called_once_with("1", ListingStatus.DELETED, expected=ListingStatus.ACTIVE)
