"""
Listing status state machine.

``sold`` is reached only through an order: ``active -> pending -> sold``.
"""

from .errors import InvalidTransitionError
from .records import ListingStatus

ALLOWED_TRANSITIONS = {
    ListingStatus.ACTIVE: frozenset({ListingStatus.PENDING, ListingStatus.DELETED}),
    ListingStatus.PENDING: frozenset({ListingStatus.SOLD, ListingStatus.ACTIVE, ListingStatus.DELETED}),
    ListingStatus.SOLD: frozenset({ListingStatus.DELETED}),
    # deleted is terminal
    ListingStatus.DELETED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition(current: str, target: str) -> str:
    """
    Validate a status change and return the new status.

    Raises:
        InvalidTransitionError: for any pair not in ALLOWED_TRANSITIONS,
            including a change to the same status.
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target
