"""UserProfilePort - the profile image pointer on a user account."""

from __future__ import annotations

from abc import ABC, abstractmethod


class UserProfilePort(ABC):
    """Port: read and replace a user's current profile image."""

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        """Return True if the user account exists."""

    @abstractmethod
    async def get_profile_image(self, user_id: str) -> str | None:
        """Return the stored filename of the user's profile image, or None."""

    @abstractmethod
    async def set_profile_image(self, user_id: str, stored_name: str) -> None:
        """Point the user's profile image at ``stored_name`` ("" clears it).

        Raises:
            NotFoundError: If the user does not exist.
        """
