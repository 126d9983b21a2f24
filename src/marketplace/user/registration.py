"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.shared.principal import Role
from marketplace.user.user import User


@marketplace.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=150)
    email: String(required=True, max_length=254)
    role: String(required=True, choices=Role)


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.with_email(command.email) is not None:
            raise ValidationError({"email": [f"Email {command.email} is already registered"]})

        user = User.register(name=command.name, email=command.email, role=command.role)
        repo.add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
