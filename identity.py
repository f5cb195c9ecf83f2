"""
Identity gateway: account creation and credential checks.

Accounts live in their own collection keyed by the lowercased email, so the
insert itself rejects a second signup with the same address.
"""
import logging
import uuid
from typing import Optional

from fastapi import Request
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import ACCOUNT
from errors import ConflictError
from schemas import utcnow_iso
from security import hash_password, verify_password

logger = logging.getLogger(__name__)


class MongoIdentityGateway:
    def __init__(self, db: Database):
        self.db = db

    def create_account(self, email: str, password: str, display_name: str = "", phone: Optional[str] = None) -> str:
        uid = uuid.uuid4().hex
        try:
            self.db[ACCOUNT].insert_one({
                "_id": email.lower(),
                "uid": uid,
                "password_hash": hash_password(password),
                "displayName": display_name,
                "phoneNumber": phone,
                "createdAt": utcnow_iso(),
            })
        except DuplicateKeyError:
            raise ConflictError("Email already registered")
        logger.info("Created account %s", uid)
        return uid

    def delete_account(self, email: str) -> None:
        self.db[ACCOUNT].delete_one({"_id": email.lower()})

    def verify_password(self, email: str, password: str) -> Optional[dict]:
        account = self.db[ACCOUNT].find_one({"_id": email.lower()})
        if not account or not verify_password(password, account.get("password_hash", "")):
            return None
        return {
            "uid": account["uid"],
            "email": account["_id"],
            "displayName": account.get("displayName", ""),
            "phoneNumber": account.get("phoneNumber"),
        }


def get_identity(request: Request) -> MongoIdentityGateway:
    return request.app.state.identity
