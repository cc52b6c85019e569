"""Application services: wishlist add and guest-to-user merge."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import GUEST_WISHLIST_LIMIT, Wishlist
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class WishlistDTO:
    product_ids: list[str]
    warning: str | None = None


class AddToWishlistHandler:
    """Adds one product to a wishlist.

    A signed-in user's list is stored server-side; a guest's list is held
    by the client and sent along, and only the guest limit applies to it.
    """

    def __init__(self, uow: UnitOfWork, guest_limit: int = GUEST_WISHLIST_LIMIT) -> None:
        self._uow = uow
        self._guest_limit = guest_limit

    def handle(
        self,
        product_id: str,
        user_id: str | None = None,
        guest_ids: list[str] | None = None,
    ) -> WishlistDTO:
        if not product_id:
            raise ValidationError("Product ID is required")

        if user_id is None:
            wishlist = Wishlist(list(guest_ids or []), authenticated=False, limit=self._guest_limit)
            warning = wishlist.add(product_id)
            return WishlistDTO(product_ids=wishlist.product_ids, warning=warning)

        with self._uow as uow:
            wishlist = Wishlist(uow.wishlists.get_for_user(user_id), authenticated=True)
            wishlist.add(product_id)
            uow.wishlists.save_for_user(user_id, wishlist.product_ids)
            uow.commit()
        return WishlistDTO(product_ids=wishlist.product_ids)


class SyncWishlistHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, guest_ids: list[str]) -> list[str]:
        """Union the stored list with the guest's; both sides are kept."""
        if not user_id:
            raise ValidationError("Authentication required")

        with self._uow as uow:
            wishlist = Wishlist(uow.wishlists.get_for_user(user_id), authenticated=True)
            wishlist.merge(guest_ids)
            uow.wishlists.save_for_user(user_id, wishlist.product_ids)
            uow.commit()

        return list(wishlist.product_ids)
