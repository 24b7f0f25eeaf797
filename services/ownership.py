"""
Ownership check shared by every owner-scoped endpoint.

A missing resource is a 404, an existing resource owned by someone else is a
403. Callers must run this before any mutation.
"""

from typing import TypeVar
from uuid import UUID

from core.exceptions import AuthorizationError, NotFoundError

T = TypeVar("T")


def ensure_owner(
    resource: T | None,
    caller_id: UUID,
    not_found_message: str,
    forbidden_message: str,
    owner_attr: str = "user_id",
) -> T:
    """
    Return ``resource`` if ``caller_id`` owns it.

    Raises:
        NotFoundError: resource is None
        AuthorizationError: resource belongs to another account
    """
    if resource is None:
        raise NotFoundError(not_found_message)
    if getattr(resource, owner_attr) != caller_id:
        raise AuthorizationError(forbidden_message)
    return resource
