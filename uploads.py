import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from config import get_settings
from database import collection_for_role, get_db, get_document, update_document
from errors import NotFoundError, ValidationError
from media import get_media, read_upload
from schemas import RolePayload
from security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _role_collection(role: str) -> str:
    collection = collection_for_role(role)
    if not collection:
        raise ValidationError("Invalid role. Choose Athlete, Coach, or Sponsor.")
    return collection


@router.post("/profilePic/{id}")
def upload_profile_pic(
    id: str,
    role: str = Form(...),
    photo: UploadFile = File(...),
    db=Depends(get_db),
    media=Depends(get_media),
    settings=Depends(get_settings),
    current=Depends(get_current_user),
):
    collection = _role_collection(role)
    content = read_upload(photo, settings.UPLOAD_MAX_BYTES, allowed=("image/jpeg", "image/png"))
    if get_document(db, collection, id) is None:
        raise NotFoundError("User not found")
    result = media.upload(content, "profile_photos", resource_type="image")
    url = result["secure_url"]
    update_document(db, collection, id, lambda doc: {"profilePhoto": url}, not_found="User not found")
    logger.info("Profile photo updated for %s", id)
    return {"success": True, "message": "Profile photo uploaded successfully", "profilePhoto": url}


@router.post("/getProfilePic/{id}")
def get_profile_pic(id: str, payload: RolePayload, db=Depends(get_db), current=Depends(get_current_user)):
    user = get_document(db, _role_collection(payload.role), id)
    if not user:
        raise NotFoundError("User not found")
    if not user.get("profilePhoto"):
        raise NotFoundError("Profile photo not found")
    return {"success": True, "profilePhoto": user["profilePhoto"]}
