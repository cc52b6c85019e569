"""Application service: inventory queries (overview, availability, logs)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.adjust_inventory import parse_change_type
from storefront.application.dto import AvailabilityDTO, InventoryLogDTO, Page, ProductDTO
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger

FILTERS = ("all", "low", "out", "in-stock")


@dataclass(frozen=True)
class InventoryLineDTO:
    product: ProductDTO
    reserved: int
    available: int
    open_alerts: int


@dataclass(frozen=True)
class InventoryStatsDTO:
    total_products: int
    low_stock_products: int
    out_of_stock_products: int
    active_alerts: int


@dataclass(frozen=True)
class InventoryOverviewDTO:
    lines: list[InventoryLineDTO]
    page: Page
    stats: InventoryStatsDTO


@dataclass(frozen=True)
class InventoryLogPageDTO:
    logs: list[InventoryLogDTO]
    page: Page


def _check_paging(page: int, limit: int) -> None:
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive")


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, filter: str = "all", page: int = 1, limit: int = 20) -> InventoryOverviewDTO:
        if filter not in FILTERS:
            raise ValidationError(f"Unknown filter '{filter}', expected one of {', '.join(FILTERS)}")
        _check_paging(page, limit)

        with self._uow as uow:
            products = uow.products.list_all()
            open_alerts = uow.alerts.list(acknowledged=False)
            ledger = InventoryLedger(uow)

            if filter == "low":
                selected = [p for p in products if p.is_low_stock]
            elif filter == "out":
                selected = [p for p in products if p.inventory == 0]
            elif filter == "in-stock":
                selected = [p for p in products if p.inventory > 0]
            else:
                selected = list(products)
            selected.sort(key=lambda p: p.inventory)

            start = (page - 1) * limit
            lines = []
            for product in selected[start:start + limit]:
                availability = ledger.availability(product)
                lines.append(
                    InventoryLineDTO(
                        product=ProductDTO.from_domain(product),
                        reserved=availability.reserved,
                        available=availability.available,
                        open_alerts=sum(1 for a in open_alerts if a.product_id == product.id),
                    )
                )

        stats = InventoryStatsDTO(
            total_products=len(products),
            low_stock_products=sum(1 for p in products if p.is_low_stock),
            out_of_stock_products=sum(1 for p in products if p.inventory == 0),
            active_alerts=len(open_alerts),
        )
        return InventoryOverviewDTO(
            lines=lines,
            page=Page(page=page, limit=limit, total=len(selected)),
            stats=stats,
        )


class ShowAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> AvailabilityDTO:
        """available = inventory - sum of ACTIVE reservations."""
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError("Product not found")
            availability = InventoryLedger(uow).availability(product)

        return AvailabilityDTO(
            product_id=availability.product_id,
            inventory=availability.inventory,
            reserved=availability.reserved,
            available=availability.available,
        )


class ShowInventoryLogsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str | None = None,
        change_type: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> InventoryLogPageDTO:
        _check_paging(page, limit)
        kind = parse_change_type(change_type) if change_type else None

        with self._uow as uow:
            logs = uow.inventory_logs.list(product_id=product_id, change_type=kind)

        start = (page - 1) * limit
        return InventoryLogPageDTO(
            logs=[InventoryLogDTO.from_domain(log) for log in logs[start:start + limit]],
            page=Page(page=page, limit=limit, total=len(logs)),
        )
