"""
microtodo.auth.ownership

Per-resource authorization.

Responsibilities:
- Allow access only when `resource.owner_id == principal.user_id`.
- Stamp the owner on create from the principal, never from request fields.
- Provide the owner id that list queries are scoped by.

Cross-owner access is answered by one policy for every endpoint:
- "forbidden": 403 for someone else's resource, 404 for a missing one.
- "not_found": 404 for both, hiding existence.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from microtodo.auth.errors import Forbidden, ResourceNotFound
from microtodo.auth.models import OwnedResource, Principal
from microtodo.observability.logging import get_logger

log = get_logger(__name__)

CrossOwnerPolicy = Literal["forbidden", "not_found"]
R = TypeVar("R", bound=OwnedResource)

# Request fields that would otherwise let a client pick the owner.
_CLIENT_OWNER_FIELDS = frozenset({"owner_id", "ownerId", "user_id", "userId"})


class OwnershipEnforcer:
    def __init__(self, policy: CrossOwnerPolicy = "forbidden") -> None:
        self._policy = policy

    @property
    def policy(self) -> CrossOwnerPolicy:
        return self._policy

    def authorize(self, principal: Principal, resource: OwnedResource) -> None:
        if resource.owner_id == principal.user_id:
            return
        log.warning("ownership_denied", user_id=principal.user_id, policy=self._policy)
        if self._policy == "not_found":
            raise ResourceNotFound()
        raise Forbidden()

    # Reads and writes follow the same rule; separate names keep call sites explicit.
    authorize_read = authorize
    authorize_write = authorize

    def require(self, principal: Principal, resource: R | None) -> R:
        if resource is None:
            raise ResourceNotFound()
        self.authorize(principal, resource)
        return resource

    def claim(self, principal: Principal, fields: dict[str, Any]) -> dict[str, Any]:
        owned = {k: v for k, v in fields.items() if k not in _CLIENT_OWNER_FIELDS}
        owned["owner_id"] = principal.user_id
        return owned

    def scope(self, principal: Principal) -> int:
        return principal.user_id


# --- Module Notes -----------------------------------------------------------
# The enforcer is pure; fetching and mutating happen in `services.tasks`, which
# calls `require` before any write so a denied request never partially applies.
