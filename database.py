from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
from fastapi.encoders import jsonable_encoder
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection

import config

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None
_db = None


def get_db():
    global _client, _db
    if _db is None:
        _client = MongoClient(config.MONGODB_URI)
        _db = _client[config.DATABASE_NAME]
    return _db


def close_db() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def ping() -> None:
    get_db().command("ping")


def collection(name: str) -> Collection:
    return get_db()[name]


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except InvalidId:
        return None


def serialize(doc: Any) -> Any:
    # ObjectIds anywhere in the document (including reference lists) become strings
    if not doc:
        return doc
    return jsonable_encoder(doc, custom_encoder={ObjectId: str})


def create_document(collection_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
    col = collection(collection_name)
    now = datetime.utcnow()
    data = {
        **data,
        "created_at": now,
        "updated_at": now,
    }
    res = col.insert_one(data)
    return col.find_one({"_id": res.inserted_id})


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    return list(collection(collection_name).find(filter_dict or {}))


def find_last(collection_name: str, field: str) -> Optional[Dict[str, Any]]:
    # documents without the field are skipped
    sort: Sequence[Tuple[str, int]] = [(field, -1)]
    return collection(collection_name).find_one({field: {"$ne": None}}, sort=sort)


def update_document(collection_name: str, doc_id: Any, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    # None when the id does not resolve
    _id = to_object_id(doc_id)
    if _id is None:
        logger.debug("Malformed id %r for %s", doc_id, collection_name)
        return None
    return collection(collection_name).find_one_and_update(
        {"_id": _id},
        {"$set": {**changes, "updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
