"""Shared helpers for normalizers."""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from app.models import SourceDescriptor, UserBadges

# raw parts (e.g. {"data": ..., "plugins": ...}) -> user id -> badges
Normalizer = Callable[[dict[str, Any], SourceDescriptor], UserBadges]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def as_list(value: Any) -> list:
    """Absent or non-list values read as empty."""
    return value if isinstance(value, list) else []


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def parse(schema: type[SchemaT], item: Any) -> SchemaT | None:
    """Validate one raw record; malformed records are skipped."""
    try:
        return schema.model_validate(item)
    except ValidationError as e:
        logger.debug("Skipping malformed {} record: {}", schema.__name__, e.errors()[0]["msg"])
        return None


def parse_all(schema: type[SchemaT], items: Iterable[Any]) -> list[SchemaT]:
    return [p for p in (parse(schema, item) for item in items) if p is not None]


def compact(result: UserBadges) -> UserBadges:
    """Drop users left without badges."""
    return {user_id: badges for user_id, badges in result.items() if badges}
