import time

from fastapi import APIRouter, Depends, status
from pymongo import ASCENDING

from connections import pair_key
from database import MESSAGE, create_document, get_db, to_public
from schemas import Message, MessagePayload
from security import get_current_user

router = APIRouter()


@router.post("/send", status_code=status.HTTP_201_CREATED)
def send_message(payload: MessagePayload, db=Depends(get_db), current=Depends(get_current_user)):
    message = Message(
        chatId=pair_key(payload.senderId, payload.receiverId),
        senderId=payload.senderId,
        receiverId=payload.receiverId,
        message=payload.message,
        timestamp=int(time.time() * 1000),
    )
    message_id = create_document(db, MESSAGE, message)
    return {"success": True, "message": "Message sent successfully", "data": {**message.model_dump(), "id": message_id}}


@router.get("/{user1}/{user2}")
def get_messages(user1: str, user2: str, db=Depends(get_db), current=Depends(get_current_user)):
    cursor = db[MESSAGE].find({"chatId": pair_key(user1, user2)}).sort([("timestamp", ASCENDING), ("_id", ASCENDING)])
    return {"success": True, "messages": [to_public(doc) for doc in cursor]}
