"""
Cart codec: the persisted layout of cart items.

A single JSON array of objects:

    [{"id": "c1", "title": "Python", "description": null, "price": 1000,
      "quantity": 2, "type": "course", "thumbnailUrl": null}]

There is no version field. Anything that does not match this shape is
corrupt. Unknown extra keys are ignored, so new fields may be added.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from kungfu import Result, Ok, Error

from storefront.cart._types import CartItem, ItemType


# ═══════════════════════════════════════════════════════════════════════════════
# Codec Error
# ═══════════════════════════════════════════════════════════════════════════════


class CodecErrorKind(Enum):
    INVALID_JSON = auto()
    INVALID_SHAPE = auto()  # Wrong container, missing or ill-typed field
    DUPLICATE_ID = auto()


@dataclass(frozen=True, slots=True)
class CodecError:
    """Persisted cart could not be decoded."""

    kind: CodecErrorKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Encode
# ═══════════════════════════════════════════════════════════════════════════════


def item_to_json(item: CartItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "price": item.price,
        "quantity": item.quantity,
        "type": item.type.value,
        "thumbnailUrl": item.thumbnail_url,
    }


def dump_items(items: tuple[CartItem, ...] | list[CartItem]) -> str:
    """Serialize items in order."""
    return json.dumps([item_to_json(item) for item in items], ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Decode
# ═══════════════════════════════════════════════════════════════════════════════


def _shape(message: str) -> Error[CodecError]:
    return Error(CodecError(CodecErrorKind.INVALID_SHAPE, message))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _optional_str(raw: dict[str, Any], key: str) -> tuple[bool, str | None]:
    value = raw.get(key)
    if value is None or isinstance(value, str):
        return True, value
    return False, None


def item_from_json(raw: object, index: int = 0) -> Result[CartItem, CodecError]:
    """Decode one persisted object."""
    if not isinstance(raw, dict):
        return _shape(f"item {index}: expected object")

    item_id = raw.get("id")
    title = raw.get("title")
    price = raw.get("price")
    quantity = raw.get("quantity")
    type_name = raw.get("type")

    if not isinstance(item_id, str) or not item_id:
        return _shape(f"item {index}: id must be a non-empty string")
    if not isinstance(title, str):
        return _shape(f"item {index}: title must be a string")
    if not _is_int(price) or price < 0:
        return _shape(f"item {index}: price must be a non-negative integer")
    if not _is_int(quantity) or quantity < 1:
        return _shape(f"item {index}: quantity must be an integer >= 1")

    try:
        item_type = ItemType(type_name)
    except ValueError:
        return _shape(f"item {index}: unknown type {type_name!r}")

    ok_desc, description = _optional_str(raw, "description")
    ok_thumb, thumbnail_url = _optional_str(raw, "thumbnailUrl")
    if not (ok_desc and ok_thumb):
        return _shape(f"item {index}: description and thumbnailUrl must be strings")

    return Ok(CartItem(
        id=item_id,
        title=title,
        price=price,
        type=item_type,
        quantity=quantity,
        description=description,
        thumbnail_url=thumbnail_url,
    ))


def parse_items(raw: str) -> Result[tuple[CartItem, ...], CodecError]:
    """
    Decode a persisted cart.

    Example:
        match parse_items(storage_value):
            case Ok(items):
                ...
            case Error(e):
                log.warning("corrupt cart: %s", e.message)
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        return Error(CodecError(CodecErrorKind.INVALID_JSON, str(e)))

    if not isinstance(data, list):
        return _shape("expected a JSON array")

    items: list[CartItem] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        match item_from_json(entry, index):
            case Ok(item):
                if item.id in seen:
                    return Error(CodecError(CodecErrorKind.DUPLICATE_ID, f"duplicate id {item.id!r}"))
                seen.add(item.id)
                items.append(item)
            case Error(e):
                return Error(e)

    return Ok(tuple(items))


__all__ = (
    "CodecErrorKind",
    "CodecError",
    "item_to_json",
    "item_from_json",
    "dump_items",
    "parse_items",
)
