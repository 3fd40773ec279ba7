from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional, Type

import pydantic
from pydantic import BaseModel

import errors
from database import (
    create_document, find_last, get_documents, to_object_id, update_document,
)
from schemas import (
    Category, Game, Reservation, ReviewUpdate, StatusUpdate, UserStatusUpdate,
)

logger = logging.getLogger(__name__)

CATEGORY = "category"
GAME = "game"
RESERVATION = "reservation"


def _validate(model: Type[BaseModel], data: Any) -> BaseModel:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise errors.ValidationError(f"{model.__name__} validation failed: {e}") from e


# Categories

def create_category(fields: Dict[str, Any]) -> Dict[str, Any]:
    category = _validate(Category, fields)
    return create_document(CATEGORY, category.model_dump())


def list_categories() -> List[Dict[str, Any]]:
    return get_documents(CATEGORY)


# Games

def parse_category_ids(raw: Optional[str]) -> List[Any]:
    if raw is None:
        raise errors.ParseError("categoryIds is required")
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise errors.ParseError(f"categoryIds is not valid JSON: {e}") from e
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return value


def create_game(name: Optional[str], image_url: str, category_ids: Optional[str], game_id: Optional[str] = None) -> Dict[str, Any]:
    game = _validate(Game, {
        "id": game_id,
        "name": name,
        "imageUrl": image_url,
        "categoryIds": parse_category_ids(category_ids),
    })
    doc = game.model_dump()
    doc["categoryIds"] = [to_object_id(c) for c in game.categoryIds]
    return create_document(GAME, doc)


def list_games() -> List[Dict[str, Any]]:
    # categoryIds expanded to {_id, name}; dangling references are left out
    games = get_documents(GAME)
    referenced = {c for g in games for c in g.get("categoryIds") or []}
    names: Dict[Any, Any] = {}
    if referenced:
        for c in get_documents(CATEGORY, {"_id": {"$in": list(referenced)}}):
            names[c["_id"]] = {"_id": c["_id"], "name": c.get("name")}
    for g in games:
        g["categoryIds"] = [names[c] for c in g.get("categoryIds") or [] if c in names]
    return games


def find_games_by_category(category_id: str) -> List[Dict[str, Any]]:
    # an empty result is NotFound, not an empty list
    _id = to_object_id(category_id)
    games = get_documents(GAME, {"categoryIds": _id}) if _id is not None else []
    if not games:
        raise errors.NotFound("No games found for this category.")
    return games


def find_last_game_id() -> int:
    last = find_last(GAME, "id")
    return last["id"] if last else 0


# Reservations

def create_reservation(fields: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(fields, dict):
        raise errors.ValidationError("Reservation body must be a JSON object")
    # review is only set after creation, userStatus always starts Good
    data = {k: v for k, v in fields.items() if k != "review"}
    data["userStatus"] = "Good"
    reservation = _validate(Reservation, data)
    return create_document(RESERVATION, reservation.model_dump())


def list_reservations() -> List[Dict[str, Any]]:
    return get_documents(RESERVATION)


def _update_reservation(reservation_id: str, model: Type[BaseModel], fields: Any) -> Dict[str, Any]:
    changes = _validate(model, fields).model_dump(exclude_none=True)
    updated = update_document(RESERVATION, reservation_id, changes)
    if updated is None:
        raise errors.NotFound("Reservation not found")
    logger.info("Reservation %s updated: %s", reservation_id, ", ".join(changes) or "nothing")
    return updated


def update_reservation_status(reservation_id: str, fields: Any) -> Dict[str, Any]:
    return _update_reservation(reservation_id, StatusUpdate, fields)


def update_reservation_user_status(reservation_id: str, fields: Any) -> Dict[str, Any]:
    return _update_reservation(reservation_id, UserStatusUpdate, fields)


def update_reservation_review(reservation_id: str, fields: Any) -> Dict[str, Any]:
    return _update_reservation(reservation_id, ReviewUpdate, fields)
