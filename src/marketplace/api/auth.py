"""Authenticated principal for API requests.

The gateway verifies credentials and forwards the caller as the
`X-User-Id` and `X-User-Role` headers. Request bodies never carry
identity or role.
"""

from fastapi import Depends, Header, HTTPException
from protean.exceptions import ValidationError

from marketplace.shared.errors import NotAuthorizedError
from marketplace.shared.principal import Principal, Role


def current_principal(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Principal:
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Missing authenticated principal")
    try:
        return Principal(user_id=x_user_id, role=x_user_role.lower())
    except ValidationError:
        raise HTTPException(status_code=401, detail=f"Unknown role '{x_user_role}'") from None


def require_roles(*roles: Role):
    """Dependency that admits only principals holding one of `roles`."""

    def dependency(principal: Principal = Depends(current_principal)) -> Principal:
        if not principal.has_role(*roles):
            allowed = ", ".join(role.value for role in roles)
            raise NotAuthorizedError({"role": [f"Role '{principal.role}' cannot do this; requires {allowed}"]})
        return principal

    return dependency
