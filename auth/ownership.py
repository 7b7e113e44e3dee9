"""
auth/ownership.py -- Owner check for mutating operations on a resource.

Any resource with a `user_id` attribute works (notes today). Reads are not
routed through here: notes are globally readable and only update/delete are
owner-gated.

Layer rule: no imports from api/ or notes/ -- the resource is duck-typed.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from auth.models import AuthenticatedUser
from core.errors import Forbidden, NotFound

logger = logging.getLogger("notekeeper.auth")

R = TypeVar("R")


def enforce_ownership(resource: R | None, identity: AuthenticatedUser | None, resource_name: str = "resource") -> R:
    """Return resource if identity owns it.

    Raises NotFound when the resource does not exist, Forbidden when the
    caller is anonymous or the resource belongs to someone else. A resource
    with no owner (user_id None) cannot be mutated by anyone.
    """
    if resource is None:
        raise NotFound(f"{resource_name} not found")
    owner_id = getattr(resource, "user_id", None)
    if identity is None or owner_id is None or owner_id != identity.user_id:
        logger.warning(
            "Forbidden %s mutation by user_id=%s (owner=%s)",
            resource_name,
            identity.user_id if identity else None,
            owner_id,
        )
        raise Forbidden(f"only the owner can modify this {resource_name}")
    return resource
