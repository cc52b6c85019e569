"""Turn application DTOs into camelCase JSON bodies."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic.alias_generators import to_camel


def camelize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {to_camel(k): camelize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [camelize(v) for v in value]
    return value


def to_json(value: Any) -> Any:
    return jsonable_encoder(camelize(value))
