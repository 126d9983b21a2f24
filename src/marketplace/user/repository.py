"""Repository for the User aggregate."""

from marketplace.domain import marketplace
from marketplace.shared.principal import Role
from marketplace.user.user import User


@marketplace.repository(part_of=User)
class UserRepository:
    def with_email(self, email: str) -> User | None:
        matches = self._dao.query.filter(email=email.strip().lower()).limit(1).all().items
        return matches[0] if matches else None

    def with_role(self, role: Role) -> list[User]:
        """Every user holding `role`, earliest registration first."""
        return self._dao.query.filter(role=role.value).order_by("registered_at").limit(None).all().items
