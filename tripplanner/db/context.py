"""Request context for ownership enforcement."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Authenticated requester identity.

    Used to enforce trip ownership in all database operations.
    """

    user_id: int
    email: str
    is_admin: bool = False
