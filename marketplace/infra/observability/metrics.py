from prometheus_client import Counter, Histogram

# Catalog Metrics
catalog_queries_total = Counter(
    "catalog_queries_total", "Catalog queries answered", ["sort", "context"]
)
catalog_query_errors_total = Counter("catalog_query_errors_total", "Catalog queries that failed", ["reason"])
catalog_listing_views_total = Counter("catalog_listing_views_total", "Listing detail views recorded")
catalog_query_duration = Histogram(
    "catalog_query_duration_seconds",
    "Catalog query time",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Listing lifecycle
listing_status_changes_total = Counter(
    "catalog_listing_status_changes_total", "Listing status transitions", ["from_status", "to_status"]
)

# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "marketplace_order_value",
    "Order value distribution",
    buckets=[5, 10, 25, 50, 100, 200, 500, float("inf")],
)
