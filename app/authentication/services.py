"""
User service for actor identity resolution.

Ledger entries store the acting user's id; presentation layers need a
human-readable name. This service is the single place that maps one to
the other.

Usage:
    from authentication.services import UserService

    name = UserService.get_display_name(payment.created_by_id)
"""

from __future__ import annotations

from core.services import BaseService

from authentication.models import User

UNKNOWN_ACTOR = "Unknown"


class UserService(BaseService):
    """Lookups on clinic staff accounts."""

    @classmethod
    def get_display_name(cls, actor_id) -> str:
        """
        Resolve an actor id to a display name.

        Args:
            actor_id: Primary key of the user, or None

        Returns:
            The user's full name (email when no name is set), or
            "Unknown" when the actor is missing or has been deleted.
        """
        if actor_id is None:
            return UNKNOWN_ACTOR

        user = User.objects.filter(pk=actor_id).first()
        if user is None:
            cls.get_logger().debug(
                "Display name requested for missing actor",
                extra={"actor_id": str(actor_id)},
            )
            return UNKNOWN_ACTOR

        return user.get_full_name()
