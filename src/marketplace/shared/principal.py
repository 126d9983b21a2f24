"""Authenticated principal supplied by the identity collaborator."""

from enum import Enum

from protean.fields import Identifier, String

from marketplace.domain import marketplace


class Role(Enum):
    FARMER = "farmer"
    RETAILER = "retailer"
    DISTRIBUTOR = "distributor"
    CUSTOMER = "customer"
    ADMIN = "admin"


# Roles that act on orders on the marketplace's behalf
OPERATOR_ROLES = frozenset({Role.RETAILER, Role.DISTRIBUTOR, Role.ADMIN})


@marketplace.value_object
class Principal:
    """A verified `(user_id, role)` pair. Never built from request payloads."""

    user_id: Identifier(required=True)
    role: String(required=True, choices=Role)

    @property
    def is_operator(self) -> bool:
        return Role(self.role) in OPERATOR_ROLES

    def has_role(self, *roles: Role) -> bool:
        return Role(self.role) in roles
