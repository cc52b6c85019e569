"""Unit of Work: one transactional boundary across every repository.

Handlers open a unit of work, mutate aggregates through its repositories
and call ``commit()``. Leaving the block without committing discards
every write made inside it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.coupon_repository import CouponRepository
from storefront.domain.repository.inventory_repository import (
    InventoryAlertRepository,
    InventoryLogRepository,
    ReservationRepository,
)
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.outbox_repository import OutboxRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.wishlist_repository import WishlistRepository


class UnitOfWork(ABC):

    products: ProductRepository
    inventory_logs: InventoryLogRepository
    alerts: InventoryAlertRepository
    reservations: ReservationRepository
    coupons: CouponRepository
    orders: OrderRepository
    outbox: OutboxRepository
    wishlists: WishlistRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def _begin(self) -> None:
        """Open a fresh working copy."""

    @abstractmethod
    def commit(self) -> None:
        """Make every write since ``_begin`` durable at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes. Safe to call after ``commit``."""
