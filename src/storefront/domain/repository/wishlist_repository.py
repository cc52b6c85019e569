"""Abstract repository for signed-in users' saved wishlists."""

from __future__ import annotations

from abc import ABC, abstractmethod


class WishlistRepository(ABC):

    @abstractmethod
    def get_for_user(self, user_id: str) -> list[str]:
        """Return the user's saved product ids (empty if none)."""

    @abstractmethod
    def save_for_user(self, user_id: str, product_ids: list[str]) -> None:
        """Replace the user's saved product ids."""
