"""Admin inventory routes: adjustments, overview, logs and alerts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from storefront.application.adjust_inventory import AdjustInventoryHandler
from storefront.application.bulk_update_inventory import BulkUpdateInventoryHandler
from storefront.application.dto import InventoryUpdateSpec, Page
from storefront.application.manage_alerts import (
    AcknowledgeAlertsHandler,
    ListAlertsHandler,
    PurgeAlertsHandler,
)
from storefront.application.show_inventory import (
    ShowAvailabilityHandler,
    ShowInventoryHandler,
    ShowInventoryLogsHandler,
)
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.api.dependencies import Session, get_settings, get_uow, require_admin
from storefront.infrastructure.api.schemas import (
    AcknowledgeAlertsRequest,
    AdjustInventoryRequest,
    BulkUpdateRequest,
    InventoryUpdateItem,
)
from storefront.infrastructure.api.serialization import to_json
from storefront.infrastructure.settings import Settings

router = APIRouter(prefix="/inventory", tags=["inventory"], dependencies=[Depends(require_admin)])


def _pagination(page: Page) -> dict:
    return {"page": page.page, "limit": page.limit, "total": page.total, "pages": page.pages}


@router.get("")
def inventory_overview(
    filter: str = Query(default="all"),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    uow: UnitOfWork = Depends(get_uow),
) -> dict:
    overview = ShowInventoryHandler(uow).handle(filter=filter, page=page, limit=limit)
    return {
        "products": to_json(overview.lines),
        "pagination": _pagination(overview.page),
        "stats": to_json(overview.stats),
    }


@router.post("/adjust")
def adjust_inventory(
    body: AdjustInventoryRequest,
    uow: UnitOfWork = Depends(get_uow),
    session: Session = Depends(require_admin),
) -> dict:
    result = AdjustInventoryHandler(uow).handle(
        body.product_id, body.quantity, body.type, reason=body.reason, actor_id=session.user_id,
    )
    return to_json(result)


@router.post("/bulk")
def bulk_update_inventory(
    body: BulkUpdateRequest,
    uow: UnitOfWork = Depends(get_uow),
    session: Session = Depends(require_admin),
) -> dict:
    updates = body.updates
    if isinstance(updates, list):
        updates = [_update_spec(item) for item in updates]
    result = BulkUpdateInventoryHandler(uow).handle(updates, actor_id=session.user_id)
    return to_json(result)


def _update_spec(raw) -> InventoryUpdateSpec:
    item = InventoryUpdateItem.model_validate(raw)
    return InventoryUpdateSpec(
        quantity=item.quantity,
        type=item.type,
        product_id=item.product_id,
        sku=item.sku,
        reason=item.reason,
    )


@router.get("/logs")
def inventory_logs(
    product_id: str | None = Query(default=None, alias="productId"),
    type: str | None = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=50),
    uow: UnitOfWork = Depends(get_uow),
) -> dict:
    result = ShowInventoryLogsHandler(uow).handle(
        product_id=product_id, change_type=type, page=page, limit=limit,
    )
    return {"logs": to_json(result.logs), "pagination": _pagination(result.page)}


@router.get("/alerts")
def list_alerts(
    acknowledged: bool = Query(default=False),
    uow: UnitOfWork = Depends(get_uow),
) -> dict:
    return {"alerts": to_json(ListAlertsHandler(uow).handle(acknowledged=acknowledged))}


@router.patch("/alerts")
def acknowledge_alerts(
    body: AcknowledgeAlertsRequest,
    uow: UnitOfWork = Depends(get_uow),
    session: Session = Depends(require_admin),
) -> dict:
    updated = AcknowledgeAlertsHandler(uow).handle(body.alert_ids, actor_id=session.user_id)
    return {"success": True, "updatedCount": updated}


@router.delete("/alerts")
def purge_alerts(
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
) -> dict:
    deleted = PurgeAlertsHandler(uow, retention_days=settings.alert_retention_days).handle()
    return {"success": True, "deletedCount": deleted}


@router.get("/{product_id}/availability")
def product_availability(product_id: str, uow: UnitOfWork = Depends(get_uow)) -> dict:
    return to_json(ShowAvailabilityHandler(uow).handle(product_id))
