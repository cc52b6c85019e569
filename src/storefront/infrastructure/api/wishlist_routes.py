"""Wishlist routes: add an item and merge a guest list on sign-in."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.application.sync_wishlist import AddToWishlistHandler, SyncWishlistHandler
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.api.dependencies import (
    Session,
    current_session,
    get_settings,
    get_uow,
    require_user,
)
from storefront.infrastructure.api.schemas import WishlistAddRequest, WishlistSyncRequest
from storefront.infrastructure.api.serialization import to_json
from storefront.infrastructure.settings import Settings

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.post("/items")
def add_to_wishlist(
    body: WishlistAddRequest,
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
    session: Session | None = Depends(current_session),
) -> dict:
    handler = AddToWishlistHandler(uow, guest_limit=settings.guest_wishlist_limit)
    result = handler.handle(
        body.product_id,
        user_id=session.user_id if session else None,
        guest_ids=body.product_ids,
    )
    return to_json(result)


@router.post("/sync")
def sync_wishlist(
    body: WishlistSyncRequest,
    uow: UnitOfWork = Depends(get_uow),
    session: Session = Depends(require_user),
) -> dict:
    return {"productIds": SyncWishlistHandler(uow).handle(session.user_id, body.product_ids)}
