from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import (
    ATHLETE, COACH, DIETARY, HEALTHCARE, PERFORMANCE, ROLE_COLLECTIONS, SPONSOR,
    collection_for_role, find_documents, get_db, get_document,
)
from errors import NotFoundError, ValidationError
from leaderboard import LeaderboardRanker
from schemas import LeaderboardPayload
from security import get_current_user

router = APIRouter()

SUB_RECORDS = {"dietary": DIETARY, "healthcare": HEALTHCARE, "performance": PERFORMANCE}


class ProfileAggregator:
    """Joins an athlete's profile with dietary, healthcare and performance documents."""

    def __init__(self, db: Database):
        self.db = db

    def fetch(self, athlete_id: str) -> Dict[str, Optional[dict]]:
        """Read the profile and all sub-records in parallel; any failed read aborts the whole fetch."""
        collections = {"athlete": ATHLETE, **SUB_RECORDS}
        with ThreadPoolExecutor(max_workers=len(collections)) as pool:
            futures = {
                key: pool.submit(get_document, self.db, collection, athlete_id)
                for key, collection in collections.items()
            }
            return {key: future.result() for key, future in futures.items()}

    def get_athlete(self, athlete_id: str) -> dict:
        if not athlete_id:
            raise ValidationError("Athlete ID is required")
        docs = self.fetch(athlete_id)
        if docs["athlete"] is None:
            raise NotFoundError("Athlete not found")
        result = {**docs["athlete"], "role": "Athlete"}
        for key in SUB_RECORDS:
            record = docs[key] or {}
            record.pop("id", None)
            result[key] = record
        return result


def _list_role(db: Database, role: str):
    return [{**doc, "role": role} for doc in find_documents(db, ROLE_COLLECTIONS[role])]


@router.get("/getAllUsers")
def get_all_users(db=Depends(get_db), current=Depends(get_current_user)):
    users = []
    for role in ROLE_COLLECTIONS:
        users.extend(_list_role(db, role))
    return {"success": True, "users": users}


@router.post("/getAllAthletes")
def get_all_athletes(db=Depends(get_db), current=Depends(get_current_user)):
    return {"success": True, "athletes": find_documents(db, ATHLETE)}


@router.post("/getAllCoaches")
def get_all_coaches(db=Depends(get_db), current=Depends(get_current_user)):
    return {"success": True, "coaches": find_documents(db, COACH)}


@router.post("/getAllSponsors")
def get_all_sponsors(db=Depends(get_db), current=Depends(get_current_user)):
    return {"success": True, "sponsors": find_documents(db, SPONSOR)}


@router.post("/getLeaderboardStats")
def get_leaderboard(payload: Optional[LeaderboardPayload] = None, db=Depends(get_db), current=Depends(get_current_user)):
    requester_id = payload.userId if payload and payload.userId else None
    leaderboard = LeaderboardRanker(db).rank(requester_id)
    return {"success": True, "leaderboard": leaderboard}


@router.get("/getAthlete/{athleteId}")
def get_athlete(athleteId: str, db=Depends(get_db), current=Depends(get_current_user)):
    return {"success": True, "athlete": ProfileAggregator(db).get_athlete(athleteId)}


@router.get("/user/{userId}/{role}")
def get_user_by_id(userId: str, role: str, db=Depends(get_db), current=Depends(get_current_user)):
    collection = collection_for_role(role)
    if not collection:
        raise ValidationError("Invalid role. Choose Athlete, Coach, or Sponsor")
    user = get_document(db, collection, userId)
    if not user:
        raise NotFoundError("User not found")
    return {"success": True, "user": {**user, "role": role}}
