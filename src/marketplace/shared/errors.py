"""Error taxonomy for the marketplace.

Validation and not-found failures use protean's own exceptions. The
classes below add the marketplace-specific failures with the same dict
message shape (`{"field": ["message"]}`), so API handlers can treat all
of them alike.
"""

from protean.exceptions import InvalidOperationError, ProteanException


class InsufficientStockError(InvalidOperationError):
    """Requested quantity exceeds what the product has in stock."""

    def __init__(self, product_id, available, requested):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            {
                "quantity": [
                    f"Insufficient stock for product {product_id}: available {available}, requested {requested}"
                ]
            }
        )


class InvalidStateTransitionError(InvalidOperationError):
    """An order transition was attempted from a state that does not allow it."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class PersistenceError(ProteanException):
    """The store failed while committing a unit of work."""


class NotAuthorizedError(ProteanException):
    """The authenticated principal may not perform the operation."""
