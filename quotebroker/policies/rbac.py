#quotebroker/policies/rbac.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from quotebroker.core.errors import PermissionDenied


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str]
    is_admin: bool = False

    def is_user(self, user_id) -> bool:
        return user_id is not None and str(user_id) == self.user_id


def require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise PermissionDenied("Administrator role required.")
