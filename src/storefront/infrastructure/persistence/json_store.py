"""Single-file JSON document store and its Unit of Work.

``store.json`` holds one list of records per table. A unit of work reads
the whole document into a working copy; ``commit()`` folds the rows it
changed into the document on disk, writes the result to a temporary
file and renames it over the store, so a commit lands completely or not
at all.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
import threading
from pathlib import Path

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.json_coupon_repository import JsonCouponRepository
from storefront.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryAlertRepository,
    JsonInventoryLogRepository,
    JsonReservationRepository,
)
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_outbox_repository import (
    JsonOutboxRepository,
    JsonWishlistRepository,
)
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository

TABLES = (
    "products",
    "inventory_logs",
    "inventory_alerts",
    "stock_reservations",
    "coupons",
    "orders",
    "outbox",
    "wishlists",
)

# Record key per table, used to merge a commit into the current document
TABLE_KEYS = {
    "products": "id",
    "inventory_logs": "id",
    "inventory_alerts": "id",
    "stock_reservations": "id",
    "coupons": "id",
    "orders": "id",
    "outbox": "id",
    "wishlists": "user_id",
}

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault(path.resolve(), threading.RLock())


class StoreConflictError(RuntimeError):
    """A new record's key was taken by a commit made after this unit began."""


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()
        self.lock = _lock_for(file_path)

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> dict[str, list[dict]]:
        doc = json.loads(self._file_path.read_text(encoding="utf-8"))
        for table in TABLES:
            doc.setdefault(table, [])
        return doc

    def write(self, doc: dict[str, list[dict]]) -> None:
        fd, tmp = tempfile.mkstemp(dir=self._file_path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(doc, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp, self._file_path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self.write({table: [] for table in TABLES})


def merge_table(current: list[dict], before: list[dict], after: list[dict], key: str) -> None:
    """Apply the rows changed between ``before`` and ``after`` onto ``current``.

    Rows nobody in this unit touched keep whatever ``current`` holds.
    """
    old = {r[key]: r for r in before}
    new = {r[key]: r for r in after}
    index = {r[key]: i for i, r in enumerate(current)}

    for k, record in new.items():
        if old.get(k) == record:
            continue
        if k in index:
            if k not in old:
                raise StoreConflictError(f"{key}={k!r} was created concurrently")
            current[index[k]] = record
        else:
            index[k] = len(current)
            current.append(record)

    gone = old.keys() - new.keys()
    if gone:
        current[:] = [r for r in current if r[key] not in gone]


class JsonUnitOfWork(UnitOfWork):
    """Holds the store's lock from ``__enter__`` to ``__exit__``.

    Threads sharing a store take turns. A commit writes only the rows this
    unit changed, on top of the document as it is on disk at commit time,
    so units that overlap anyway (nested in one thread, or in another
    process) keep each other's writes.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._doc: dict[str, list[dict]] | None = None
        self._snapshot: dict[str, list[dict]] | None = None
        self._locked = False

    def _begin(self) -> None:
        self._store.lock.acquire()
        self._locked = True
        try:
            doc = self._store.load()
        except BaseException:
            self._release()
            raise
        self._doc = doc
        self._snapshot = copy.deepcopy(doc)
        self.products = JsonProductRepository(doc["products"])
        self.inventory_logs = JsonInventoryLogRepository(doc["inventory_logs"])
        self.alerts = JsonInventoryAlertRepository(doc["inventory_alerts"])
        self.reservations = JsonReservationRepository(doc["stock_reservations"])
        self.coupons = JsonCouponRepository(doc["coupons"])
        self.orders = JsonOrderRepository(doc["orders"])
        self.outbox = JsonOutboxRepository(doc["outbox"])
        self.wishlists = JsonWishlistRepository(doc["wishlists"])

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._release()

    def commit(self) -> None:
        if self._doc is None or self._snapshot is None:
            raise RuntimeError("commit() outside of a unit of work")
        current = self._store.load()
        for table in TABLES:
            merge_table(current[table], self._snapshot[table], self._doc[table], TABLE_KEYS[table])
        self._store.write(current)
        self._snapshot = copy.deepcopy(self._doc)

    def rollback(self) -> None:
        self._doc = None
        self._snapshot = None

    def _release(self) -> None:
        if self._locked:
            self._locked = False
            self._store.lock.release()
