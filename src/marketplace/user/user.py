"""User aggregate: the registry of people acting on the marketplace."""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from marketplace.domain import marketplace
from marketplace.shared.principal import Principal, Role


@marketplace.aggregate
class User:
    """A registered farmer, retailer, distributor, customer or admin."""

    name: String(required=True, max_length=150)
    email: String(required=True, max_length=254)
    role: String(required=True, choices=Role)
    registered_at: DateTime(default=datetime.now)

    @invariant.post
    def email_must_look_like_an_address(self):
        local, _, host = (self.email or "").partition("@")
        if not local or "." not in host:
            raise ValidationError({"email": [f"'{self.email}' is not a valid email address"]})

    @classmethod
    def register(cls, name, email, role):
        from marketplace.user.events import UserRegistered

        user = cls(name=name, email=email.strip().lower(), role=role, registered_at=datetime.now())
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                role=user.role,
                registered_at=user.registered_at,
            )
        )
        return user

    @property
    def principal(self) -> Principal:
        return Principal(user_id=self.id, role=self.role)
