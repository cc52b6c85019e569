"""Abstract repository for Coupon aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.coupon import Coupon


class CouponRepository(ABC):

    @abstractmethod
    def get_by_id(self, coupon_id: str) -> Coupon | None:
        """Return a coupon by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Coupon | None:
        """Return a coupon by its upper-case code, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Coupon]:
        """Return every coupon."""

    @abstractmethod
    def save(self, coupon: Coupon) -> None:
        """Persist a new or updated coupon."""

    @abstractmethod
    def delete(self, coupon_id: str) -> None:
        """Remove a coupon permanently."""
