"""
Observability Infrastructure

OpenTelemetry tracing helpers shared by every app, plus account moderation
metrics.
"""

from .metrics import user_moderation_total
from .tracing import add_span_attributes, get_tracer, setup_tracing, tracer

__all__ = [
    "setup_tracing",
    "get_tracer",
    "add_span_attributes",
    "tracer",
    "user_moderation_total",
]
