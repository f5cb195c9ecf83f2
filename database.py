"""
Document store helpers.

Every entity lives in its own MongoDB collection, keyed by a string `_id`.
Documents leave this module with `_id` renamed to `id` and the internal
`version` counter removed.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database

from errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

# Collection names
ATHLETE = "athlete"
COACH = "coach"
SPONSOR = "sponsor"
ACCOUNT = "account"
CONNECTION = "connection"
PERFORMANCE = "performance"
HEALTHCARE = "healthcare"
DIETARY = "dietary"
VERIFICATION = "verification"
MESSAGE = "message"

ROLE_COLLECTIONS = {"Athlete": ATHLETE, "Coach": COACH, "Sponsor": SPONSOR}

CAS_ATTEMPTS = 3


def connect(url: str, name: str) -> Database:
    client = MongoClient(url)
    return client[name]


def get_db(request: Request) -> Database:
    return request.app.state.db


def collection_for_role(role: Optional[str]) -> Optional[str]:
    return ROLE_COLLECTIONS.get(role)


def to_public(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    out = {k: v for k, v in doc.items() if k not in ("_id", "version")}
    out["id"] = str(doc["_id"])
    return out


def _as_dict(data) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def create_document(db: Database, collection_name: str, data, doc_id: Optional[str] = None) -> str:
    """Insert a new document; a taken `doc_id` raises DuplicateKeyError."""
    payload = _as_dict(data)
    payload["version"] = 1
    if doc_id is not None:
        payload["_id"] = doc_id
    result = db[collection_name].insert_one(payload)
    return str(result.inserted_id)


def set_document(db: Database, collection_name: str, doc_id: str, data) -> Dict[str, Any]:
    """Replace (or create) the document at `doc_id`."""
    payload = _as_dict(data)
    current = db[collection_name].find_one({"_id": doc_id}, {"version": 1})
    payload["version"] = (current or {}).get("version", 0) + 1
    db[collection_name].replace_one({"_id": doc_id}, payload, upsert=True)
    return payload


def get_document(db: Database, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
    return to_public(db[collection_name].find_one({"_id": doc_id}))


def find_documents(db: Database, collection_name: str, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    return [to_public(doc) for doc in db[collection_name].find(query or {})]


def update_document(
    db: Database,
    collection_name: str,
    doc_id: str,
    mutate: Callable[[Dict[str, Any]], Dict[str, Any]],
    not_found: str = "Document not found",
) -> Dict[str, Any]:
    """
    Apply `mutate` to the stored document and write the result back.

    The write only lands if the document's `version` is unchanged since it was
    read; otherwise the read-mutate-write cycle is retried. `mutate` receives
    the public form of the document and returns the fields to set.
    """
    coll = db[collection_name]
    for _ in range(CAS_ATTEMPTS):
        raw = coll.find_one({"_id": doc_id})
        if raw is None:
            raise NotFoundError(not_found)
        version = raw.get("version", 0)
        changes = mutate(to_public(raw))
        changes.pop("id", None)
        updated = coll.find_one_and_update(
            {"_id": doc_id, "version": raw["version"]} if "version" in raw else {"_id": doc_id, "version": {"$exists": False}},
            {"$set": {**changes, "version": version + 1}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is not None:
            return to_public(updated)
        logger.info("Concurrent update on %s/%s, retrying", collection_name, doc_id)
    raise ConflictError("Document was modified concurrently, please retry")
