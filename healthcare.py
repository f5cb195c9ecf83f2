from fastapi import APIRouter, Depends, status

from database import HEALTHCARE, get_db, get_document, set_document, update_document
from errors import NotFoundError
from metrics import bmi
from schemas import Healthcare, HealthcareInput, HealthcareUpdate
from security import get_current_user

router = APIRouter()

SCALAR_FIELDS = ("hydration_level", "sleep_hours", "height", "weight")


def merge_healthcare(existing: dict, update: HealthcareUpdate) -> dict:
    """Append new injuries, replace scalars that were sent, keep the rest, recompute BMI."""
    history = existing.get("injury_history")
    history = list(history) if isinstance(history, list) else []
    history.extend(update.injury_history)

    merged = {"injury_history": history}
    for field in SCALAR_FIELDS:
        value = getattr(update, field)
        merged[field] = value if value is not None else existing.get(field)
    if merged["height"] and merged["weight"]:
        merged["bmi"] = bmi(merged["height"], merged["weight"])
    else:
        merged["bmi"] = existing.get("bmi")
    return merged


@router.post("/addHealthcare/{id}", status_code=status.HTTP_201_CREATED)
def add_healthcare(id: str, payload: HealthcareInput, db=Depends(get_db), current=Depends(get_current_user)):
    record = Healthcare(**payload.model_dump(), bmi=bmi(payload.height, payload.weight))
    set_document(db, HEALTHCARE, id, record)
    return {"success": True, "message": "Healthcare data added successfully", "bmi": record.bmi}


@router.put("/editHealthcare/{id}")
def edit_healthcare(id: str, payload: HealthcareUpdate, db=Depends(get_db), current=Depends(get_current_user)):
    updated = update_document(
        db, HEALTHCARE, id,
        lambda doc: merge_healthcare(doc, payload),
        not_found="Healthcare data not found for this player",
    )
    updated.pop("id", None)
    return {"success": True, "message": "Healthcare data updated successfully", "healthcareDetails": updated}


@router.get("/getHealthcareDetails/{id}")
def get_healthcare(id: str, db=Depends(get_db), current=Depends(get_current_user)):
    doc = get_document(db, HEALTHCARE, id)
    if not doc:
        raise NotFoundError("Healthcare details not available in database")
    doc.pop("id", None)
    return {"success": True, "healthcareDetails": doc}
