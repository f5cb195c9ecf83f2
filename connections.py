"""
Connection graph between platform users.

One document per unordered pair of users. The document id is the two user
ids sorted and joined with an underscore, so a request in either direction
lands on the same key and the insert alone decides whether it is a
duplicate. Sender and receiver are kept as payload fields to record who
asked.
"""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import CONNECTION, collection_for_role, create_document, get_db, to_public
from errors import ConflictError, NotFoundError, ValidationError
from schemas import Connection, ConnectionActionPayload, ConnectionRequestPayload, utcnow_iso
from security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

ACTION_STATUS = {"accept": "accepted", "reject": "rejected"}


def pair_key(user_a: str, user_b: str) -> str:
    return "_".join(sorted((user_a, user_b)))


def _public_connection(doc: dict) -> dict:
    out = to_public(doc)
    out["connectionId"] = out.pop("id")
    return out


class ConnectionGraph:
    def __init__(self, db: Database):
        self.db = db

    def send_request(self, sender_id: str, sender_role: str, receiver_id: str, receiver_role: str) -> dict:
        if not sender_id or not receiver_id or not sender_role or not receiver_role:
            raise ValidationError("Sender ID, Receiver ID, Sender Role, and Receiver Role are required.")
        if sender_id == receiver_id:
            raise ValidationError("Cannot send a connection request to yourself.")
        connection = Connection(
            senderId=sender_id,
            receiverId=receiver_id,
            senderRole=sender_role,
            receiverRole=receiver_role,
        )
        key = pair_key(sender_id, receiver_id)
        try:
            create_document(self.db, CONNECTION, connection, doc_id=key)
        except DuplicateKeyError:
            raise ConflictError("Connection request already exists.")
        logger.info("Connection request %s -> %s", sender_id, receiver_id)
        return {**connection.model_dump(), "connectionId": key}

    def resolve_request(self, sender_id: str, receiver_id: str, action: str) -> dict:
        if not sender_id or not receiver_id or not action:
            raise ValidationError("Sender ID, Receiver ID, and Action (accept/reject) are required.")
        if action not in ACTION_STATUS:
            raise ValidationError('Invalid action. Must be "accept" or "reject".')
        new_status = ACTION_STATUS[action]
        doc = self.db[CONNECTION].find_one_and_update(
            {"_id": pair_key(sender_id, receiver_id), "senderId": sender_id, "receiverId": receiver_id},
            {"$set": {"status": new_status, "updatedAt": utcnow_iso()}, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFoundError("Connection request not found.")
        logger.info("Connection %s -> %s %s", sender_id, receiver_id, new_status)
        return _public_connection(doc)

    def status_between(self, user_a: str, user_b: str) -> Optional[str]:
        doc = self.db[CONNECTION].find_one({"_id": pair_key(user_a, user_b)}, {"status": 1})
        return doc["status"] if doc else None

    def fetch_profile(self, role: str, user_id: str) -> Optional[dict]:
        collection = collection_for_role(role)
        if not collection:
            return None
        doc = self.db[collection].find_one({"_id": user_id})
        if doc is None:
            return None
        profile = to_public(doc)
        profile["role"] = role
        return profile

    def _query(self, field: str, user_id: str, accepted_only: bool = False) -> List[dict]:
        query = {field: user_id}
        if accepted_only:
            query["status"] = "accepted"
        return [_public_connection(doc) for doc in self.db[CONNECTION].find(query)]

    def list_for_user(self, user_id: str) -> Dict[str, List[dict]]:
        if not user_id:
            raise ValidationError("User ID is required.")
        sent = [
            {**c, "receiverData": self.fetch_profile(c["receiverRole"], c["receiverId"])}
            for c in self._query("senderId", user_id)
        ]
        received = [
            {**c, "senderData": self.fetch_profile(c["senderRole"], c["senderId"])}
            for c in self._query("receiverId", user_id)
        ]
        return {"sentConnections": sent, "receivedConnections": received}

    def _accepted_with_counterpart(self, user_id: str):
        for c in self._query("senderId", user_id, accepted_only=True):
            yield c, c["receiverRole"], c["receiverId"]
        for c in self._query("receiverId", user_id, accepted_only=True):
            yield c, c["senderRole"], c["senderId"]

    def list_all_accepted(self, user_id: str) -> List[dict]:
        if not user_id:
            raise ValidationError("User ID is required.")
        return [
            {**c, "user": self.fetch_profile(role, other_id)}
            for c, role, other_id in self._accepted_with_counterpart(user_id)
        ]

    def list_accepted(self, user_id: str) -> List[dict]:
        if not user_id:
            raise ValidationError("User ID is required.")
        users = (self.fetch_profile(role, other_id) for _, role, other_id in self._accepted_with_counterpart(user_id))
        return [u for u in users if u is not None]


def get_graph(db=Depends(get_db)) -> ConnectionGraph:
    return ConnectionGraph(db)


@router.post("/send-connection", status_code=status.HTTP_201_CREATED)
def send_connection(payload: ConnectionRequestPayload, graph: ConnectionGraph = Depends(get_graph), current=Depends(get_current_user)):
    connection = graph.send_request(payload.senderId, payload.senderRole, payload.receiverId, payload.receiverRole)
    return {"success": True, "message": "Connection request sent successfully.", "connection": connection}


@router.post("/handle-connection")
def handle_connection(payload: ConnectionActionPayload, graph: ConnectionGraph = Depends(get_graph), current=Depends(get_current_user)):
    connection = graph.resolve_request(payload.senderId, payload.receiverId, payload.action)
    return {
        "success": True,
        "message": f"Connection request {connection['status']} successfully.",
        "connection": connection,
    }


@router.get("/connections/{userId}")
def get_connections(userId: str, graph: ConnectionGraph = Depends(get_graph), current=Depends(get_current_user)):
    return {"success": True, **graph.list_for_user(userId)}


@router.get("/getAllConnections/{userId}")
def get_all_connections(userId: str, graph: ConnectionGraph = Depends(get_graph), current=Depends(get_current_user)):
    return {"success": True, "connections": graph.list_all_accepted(userId)}


@router.get("/getAcceptedConnections/{userId}")
def get_accepted_connections(userId: str, graph: ConnectionGraph = Depends(get_graph), current=Depends(get_current_user)):
    return {"success": True, "users": graph.list_accepted(userId)}
