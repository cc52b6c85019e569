"""JSON-backed outbox and wishlist repositories."""

from __future__ import annotations

from storefront.domain.model.notification import DeliveryStatus, MessageKind, OutboxMessage
from storefront.domain.repository.outbox_repository import OutboxRepository
from storefront.domain.repository.wishlist_repository import WishlistRepository
from storefront.infrastructure.persistence.json_table import JsonTable, dump_dt, load_dt


class JsonOutboxRepository(JsonTable, OutboxRepository):

    def add(self, message: OutboxMessage) -> None:
        self._records.append(self._to_raw(message))

    def list_pending(self) -> list[OutboxMessage]:
        pending = [
            self._to_domain(raw)
            for raw in self._records
            if raw["status"] == DeliveryStatus.PENDING.value
        ]
        pending.sort(key=lambda m: m.created_at)
        return pending

    def save(self, message: OutboxMessage) -> None:
        self._upsert_raw("id", self._to_raw(message))

    @staticmethod
    def _to_raw(message: OutboxMessage) -> dict:
        return {
            "id": message.id,
            "kind": message.kind.value,
            "recipient": message.recipient,
            "subject": message.subject,
            "body": message.body,
            "reference": message.reference,
            "status": message.status.value,
            "attempts": message.attempts,
            "last_error": message.last_error,
            "created_at": dump_dt(message.created_at),
            "sent_at": dump_dt(message.sent_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> OutboxMessage:
        return OutboxMessage(
            id=raw["id"],
            kind=MessageKind(raw["kind"]),
            recipient=raw["recipient"],
            subject=raw["subject"],
            body=raw["body"],
            reference=raw.get("reference"),
            status=DeliveryStatus(raw["status"]),
            attempts=raw.get("attempts", 0),
            last_error=raw.get("last_error"),
            created_at=load_dt(raw["created_at"]),
            sent_at=load_dt(raw.get("sent_at")),
        )


class JsonWishlistRepository(JsonTable, WishlistRepository):

    def get_for_user(self, user_id: str) -> list[str]:
        raw = self._find_raw("user_id", user_id)
        return list(raw["product_ids"]) if raw else []

    def save_for_user(self, user_id: str, product_ids: list[str]) -> None:
        self._upsert_raw("user_id", {"user_id": user_id, "product_ids": list(product_ids)})
