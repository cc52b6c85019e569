"""Application service: inventory alert listing, acknowledgement and purge."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from storefront.application.dto import AlertDTO
from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

MAX_LISTED_ALERTS = 100
DEFAULT_RETENTION_DAYS = 30


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ListAlertsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, acknowledged: bool = False) -> list[AlertDTO]:
        with self._uow as uow:
            alerts = uow.alerts.list(acknowledged=acknowledged)
        return [AlertDTO.from_domain(a) for a in alerts[:MAX_LISTED_ALERTS]]


class AcknowledgeAlertsHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, alert_ids: list[str], actor_id: str | None = None) -> int:
        """Acknowledge the given alerts; unknown ids are ignored. Returns the count updated."""
        if not isinstance(alert_ids, list) or not alert_ids:
            raise ValidationError("Invalid alert IDs")

        now = self._clock()
        updated = 0
        with self._uow as uow:
            for alert_id in alert_ids:
                alert = uow.alerts.get_by_id(alert_id)
                if alert is None:
                    continue
                alert.acknowledge(actor_id, at=now)
                uow.alerts.save(alert)
                updated += 1
            uow.commit()

        logger.info("acknowledged %d alert(s) by %s", updated, actor_id or "-")
        return updated


class PurgeAlertsHandler:
    """Deletes alerts acknowledged more than ``retention_days`` ago."""

    def __init__(
        self,
        uow: UnitOfWork,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._retention_days = retention_days
        self._clock = clock

    def handle(self) -> int:
        now = self._clock()
        with self._uow as uow:
            stale = [
                a for a in uow.alerts.list(acknowledged=True)
                if a.is_purgeable(now, self._retention_days)
            ]
            for alert in stale:
                uow.alerts.delete(alert.id)
            uow.commit()

        logger.info("purged %d acknowledged alert(s)", len(stale))
        return len(stale)
