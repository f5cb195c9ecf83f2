import logging

from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from config import get_settings
from database import ROLE_COLLECTIONS, create_document, get_db
from errors import AuthError, ForbiddenError
from identity import get_identity
from schemas import Athlete, Coach, LoginPayload, SignupPayload, Sponsor
from security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_MODELS = {"Athlete": Athlete, "Coach": Coach, "Sponsor": Sponsor}
COMMON_FIELDS = (
    "firstName", "lastName", "dob", "email", "phone", "bloodGroup",
    "address", "country", "gender", "latitude", "longitude",
)
ROLE_FIELDS = {
    "Athlete": ("sport", "position", "experienceLevel"),
    "Coach": ("sport",),
    "Sponsor": ("sponsorshipType", "companyName"),
}


def find_profile(db: Database, user_id: str):
    """Look the user up in each role collection; returns (role, raw doc) or (None, None)."""
    for role, collection in ROLE_COLLECTIONS.items():
        doc = db[collection].find_one({"_id": user_id})
        if doc:
            return role, doc
    return None, None


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupPayload, db=Depends(get_db), identity=Depends(get_identity)):
    auth_id = identity.create_account(
        email=payload.email,
        password=payload.password,
        display_name=f"{payload.firstName} {payload.lastName}",
        phone=payload.phone,
    )
    fields = {k: getattr(payload, k) for k in COMMON_FIELDS + ROLE_FIELDS[payload.role]}
    profile = PROFILE_MODELS[payload.role](authId=auth_id, **fields)
    try:
        create_document(db, ROLE_COLLECTIONS[payload.role], profile, doc_id=auth_id)
    except Exception:
        # keep the account and profile collections in step
        identity.delete_account(payload.email)
        raise
    logger.info("Registered %s %s", payload.role, auth_id)
    return {"success": True, "message": "User registered successfully", "authId": auth_id}


@router.post("/login")
def login(payload: LoginPayload, db=Depends(get_db), identity=Depends(get_identity), settings=Depends(get_settings)):
    account = identity.verify_password(payload.email, payload.password)
    if not account:
        raise AuthError("Invalid email or password")
    role, profile = find_profile(db, account["uid"])
    if not role:
        raise ForbiddenError("User role not found. Contact support.")
    user_data = {
        "id": account["uid"],
        "email": account["email"],
        "name": account.get("displayName") or "",
        "phoneNumber": profile.get("phone") or "",
        "role": role,
        "sport": profile.get("sport"),
        "isVerified": profile.get("isVerified", False),
    }
    token = create_access_token(user_data, settings)
    return {"success": True, "message": "Login successful", "token": token, "userData": user_data}
