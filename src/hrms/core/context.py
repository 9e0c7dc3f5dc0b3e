from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class RequestContext:
    """Who is calling, passed explicitly from controllers into services."""

    user_id: Optional[int]
    role: Optional[Role]
    csrf_token: Optional[str] = None

    def require_authenticated(self) -> int:
        if self.user_id is None:
            raise AuthorizationError("Please log in to continue.")
        return self.user_id

    def require_role(self, role: Role) -> int:
        user_id = self.require_authenticated()
        if self.role != role:
            raise AuthorizationError("You do not have permission to perform this action.")
        return user_id
