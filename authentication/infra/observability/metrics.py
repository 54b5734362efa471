"""
Prometheus Metrics

Metrics for account moderation. Exposed together with the marketplace
metrics at /api/marketplace/metrics/ for Prometheus scraping.
"""

from prometheus_client import Counter

user_moderation_total = Counter(
    "auth_user_moderation_total",
    "Account activation changes made by administrators",
    ["action", "status"],
)
"""
Labels: action (activate/deactivate), status (success/failed)

Example:
    user_moderation_total.labels(action='deactivate', status='success').inc()
"""
