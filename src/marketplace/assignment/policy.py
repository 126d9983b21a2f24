"""Retailer assignment policies.

A policy is a pure function `(producer_id, crop_type, candidates) -> retailer_id | None`.
Candidates arrive ordered by registration time, earliest first. Returning
None means the policy found no acceptable retailer.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import NamedTuple


class RetailerCandidate(NamedTuple):
    retailer_id: str
    registered_at: datetime
    assigned_products: int = 0


AssignmentPolicy = Callable[[str, str, Sequence[RetailerCandidate]], str | None]


def first_registered(producer_id, crop_type, candidates: Sequence[RetailerCandidate]) -> str | None:
    """The earliest registered retailer, regardless of producer or crop."""
    return candidates[0].retailer_id if candidates else None


def fewest_assigned(producer_id, crop_type, candidates: Sequence[RetailerCandidate]) -> str | None:
    """The retailer currently carrying the fewest products.

    Ties go to the earlier registration.
    """
    if not candidates:
        return None
    ranked = sorted(enumerate(candidates), key=lambda pair: (pair[1].assigned_products, pair[0]))
    return ranked[0][1].retailer_id


POLICIES: dict[str, AssignmentPolicy] = {
    "first_registered": first_registered,
    "fewest_assigned": fewest_assigned,
}


def policy_named(name: str) -> AssignmentPolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown retailer assignment policy '{name}'") from None
