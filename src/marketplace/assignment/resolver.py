"""Resolve which retailer receives newly listed produce."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.assignment.policy import AssignmentPolicy, RetailerCandidate, policy_named
from marketplace.domain import logger
from marketplace.product.product import Product
from marketplace.shared.principal import Role
from marketplace.user.user import User

DEFAULT_POLICY = "first_registered"


def configured_policy() -> AssignmentPolicy:
    custom = current_domain.config.get("custom") or {}
    return policy_named(custom.get("RETAILER_ASSIGNMENT_POLICY", DEFAULT_POLICY))


def require_retailer(retailer_id) -> User:
    """Load `retailer_id` and make sure it still belongs to a retailer."""
    user = current_domain.repository_for(User).get(retailer_id)
    if user.role != Role.RETAILER.value:
        raise ValidationError({"retailer_id": [f"User {retailer_id} is not a retailer"]})
    return user


def retailer_candidates() -> list[RetailerCandidate]:
    products = current_domain.repository_for(Product)
    return [
        RetailerCandidate(
            retailer_id=str(user.id),
            registered_at=user.registered_at,
            assigned_products=len(products.assigned_to(user.id)),
        )
        for user in current_domain.repository_for(User).with_role(Role.RETAILER)
    ]


def resolve_retailer(producer_id, crop_type, policy: AssignmentPolicy | None = None) -> str:
    """Pick a retailer for a producer's crop using the active assignment policy."""
    policy = policy or configured_policy()

    candidates = retailer_candidates()
    if not candidates:
        raise ObjectNotFoundError({"retailer": ["No retailer is registered to receive products"]})

    retailer_id = policy(producer_id, crop_type, candidates)
    if retailer_id is None:
        raise ObjectNotFoundError({"retailer": [f"No retailer accepts {crop_type} from producer {producer_id}"]})

    # The candidate list can be stale by the time the policy answers
    retailer = require_retailer(retailer_id)

    logger.debug(
        "Retailer resolved",
        producer_id=str(producer_id),
        crop_type=crop_type,
        retailer_id=str(retailer.id),
        policy=getattr(policy, "__name__", repr(policy)),
    )
    return str(retailer.id)
