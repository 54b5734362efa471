from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import prometheus_metrics
from .catalog.api.views.admin_views import AdminListingViewSet
from .catalog.api.views.category_views import CategoryViewSet
from .catalog.api.views.listing_views import ListingViewSet
from .ordering.api.views.order_views import OrderViewSet

# Create the main router
router = DefaultRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"listings", ListingViewSet, basename="listing")
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"admin/listings", AdminListingViewSet, basename="admin-listing")

app_name = "marketplace"

urlpatterns = [
    # Main API routes
    path("", include(router.urls)),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
]
