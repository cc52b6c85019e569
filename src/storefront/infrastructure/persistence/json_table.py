"""Shared helpers for the JSON repositories."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal


def dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def dump_dec(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def load_dec(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


class JsonTable:
    """Lookup and upsert over one table's record list, mutated in place."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def _find_raw(self, key: str, value) -> dict | None:
        for raw in self._records:
            if raw.get(key) == value:
                return raw
        return None

    def _upsert_raw(self, key: str, record: dict) -> None:
        for i, raw in enumerate(self._records):
            if raw.get(key) == record[key]:
                self._records[i] = record
                return
        self._records.append(record)

    def _remove_raw(self, key: str, value) -> None:
        self._records[:] = [raw for raw in self._records if raw.get(key) != value]
