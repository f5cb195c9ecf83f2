from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as PydanticValidationError

from database import DIETARY, get_db, get_document, set_document, update_document
from errors import NotFoundError, ValidationError
from metrics import merge_meal_plan
from schemas import DietaryPayload, DietaryPlan, DietaryUpdatePayload
from security import get_current_user

router = APIRouter()


def merge_dietary_plan(existing: dict, updates: dict) -> dict:
    """Shallow merge of plan fields; meal_plan is merged by meal name."""
    if not updates:
        raise ValidationError("No update data provided")
    merged = {**existing, **updates}
    if updates.get("meal_plan") is not None:
        merged["meal_plan"] = merge_meal_plan(existing.get("meal_plan") or [], updates["meal_plan"])
    try:
        return DietaryPlan(**merged).model_dump()
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ValidationError(f"Invalid {field}: {error['msg']}" if field else error["msg"])


@router.post("/addDietary/{id}", status_code=status.HTTP_201_CREATED)
def add_dietary(id: str, payload: DietaryPayload, db=Depends(get_db), current=Depends(get_current_user)):
    set_document(db, DIETARY, id, {"dietaryPlan": payload.dietaryPlan.model_dump()})
    return {"success": True, "message": "Dietary plan added successfully"}


@router.put("/editDietary/{id}")
def edit_dietary(id: str, payload: DietaryUpdatePayload, db=Depends(get_db), current=Depends(get_current_user)):
    updates = payload.dietaryPlan.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No update data provided")
    updated = update_document(
        db, DIETARY, id,
        lambda doc: {"dietaryPlan": merge_dietary_plan(doc.get("dietaryPlan") or {}, updates)},
        not_found="Dietary plan not found",
    )
    return {"success": True, "message": "Dietary plan updated successfully", "dietaryPlan": updated["dietaryPlan"]}


@router.get("/getDietary/{id}")
def get_dietary(id: str, db=Depends(get_db), current=Depends(get_current_user)):
    doc = get_document(db, DIETARY, id)
    if not doc:
        raise NotFoundError("Dietary plan not available in database")
    return {"success": True, "dietaryPlan": doc.get("dietaryPlan")}
