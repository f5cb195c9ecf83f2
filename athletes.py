"""
Athlete performance records and AI video analysis.

The performance document is keyed by athlete id. Its `win_rate` is computed
against total_matches at write time; video analysis fields are merged into
the same document.
"""
import logging

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from ai_client import get_ai, parse_model_json, to_prompt_json
from config import get_settings
from database import PERFORMANCE, get_db, get_document, set_document, update_document
from errors import NotFoundError, UpstreamError, ValidationError
from media import get_media, public_id_from_url, read_upload
from metrics import performance_status, win_rate
from schemas import Performance, PerformanceInput, PerformanceUpdate, utcnow_iso
from security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

ANALYSIS_FIELDS = ("strengths", "weaknesses", "performance_suggestions", "training_focus_areas")

VIDEO_PROMPT = """Analyze the player's performance based on the following video:
{video_url}
Athlete performance data: {performance}

Provide a detailed analysis including:
- Strengths
- Weaknesses
- Suggestions for improvement
- Recommended training areas

Respond with a single JSON object only, shaped like:
{{
  "strengths": "[List of strengths]",
  "weaknesses": "[List of weaknesses]",
  "performance_suggestions": "[Suggestions]",
  "training_focus_areas": "[Focus areas]"
}}"""


def build_performance(data: PerformanceInput) -> Performance:
    rate = win_rate(data.wins, data.total_matches)
    return Performance(**data.model_dump(), win_rate=rate, performance_status=performance_status(rate))


def _stats(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if k in Performance.model_fields}


@router.post("/addPerformance/{id}", status_code=status.HTTP_201_CREATED)
def add_performance(id: str, payload: PerformanceInput, db=Depends(get_db), current=Depends(get_current_user)):
    performance = build_performance(payload)
    existing = get_document(db, PERFORMANCE, id) or {}
    # keep any stored video analysis alongside the fresh statistics
    extras = {k: v for k, v in existing.items() if k not in Performance.model_fields and k != "id"}
    set_document(db, PERFORMANCE, id, {**extras, **performance.model_dump()})
    return {"success": True, "message": "Performance data added successfully", "data": performance.model_dump()}


@router.put("/editPerformance/{id}")
def edit_performance(id: str, payload: PerformanceUpdate, db=Depends(get_db), current=Depends(get_current_user)):
    changes = payload.model_dump(exclude_none=True)
    result = {}

    def merge(doc):
        merged = {**{k: doc.get(k) for k in PerformanceInput.model_fields}, **changes}
        try:
            performance = build_performance(PerformanceInput(**merged))
        except PydanticValidationError as e:
            raise ValidationError(e.errors()[0]["msg"])
        result.update(performance.model_dump())
        return performance.model_dump()

    update_document(db, PERFORMANCE, id, merge, not_found="Performance data not found for this athlete")
    return {"success": True, "message": "Performance data updated successfully", "data": result}


@router.get("/getPerformance/{id}")
def get_performance(id: str, db=Depends(get_db), current=Depends(get_current_user)):
    doc = get_document(db, PERFORMANCE, id)
    if not doc or "total_matches" not in doc:
        raise NotFoundError("Performance details not available in database")
    return {"success": True, "performanceDetails": _stats(doc)}


@router.post("/videoAnalysis/{athleteId}")
def analyze_video(
    athleteId: str,
    video: UploadFile = File(...),
    db=Depends(get_db),
    ai=Depends(get_ai),
    media=Depends(get_media),
    settings=Depends(get_settings),
    current=Depends(get_current_user),
):
    athlete_id = athleteId.strip()
    if not athlete_id:
        raise ValidationError("Invalid athlete ID provided")
    content = read_upload(video, settings.UPLOAD_MAX_BYTES, allowed=("video/mp4",))

    existing = get_document(db, PERFORMANCE, athlete_id) or {}
    uploaded = media.upload(content, "videos", resource_type="video")
    video_url = uploaded["secure_url"]

    previous = existing.get("videoUrl")
    if previous and previous != video_url:
        public_id = public_id_from_url(previous)
        if public_id:
            try:
                media.destroy(public_id, resource_type="video")
                logger.info("Deleted previous video %s", public_id)
            except UpstreamError:
                logger.warning("Previous video %s was not deleted", public_id)

    performance = {k: v for k, v in existing.items() if k != "id"}
    prompt = VIDEO_PROMPT.format(video_url=video_url, performance=to_prompt_json(performance))
    analysis = parse_model_json(ai.generate(prompt))
    analysis = {k: analysis.get(k) for k in ANALYSIS_FIELDS if k in analysis}

    record = {"videoUrl": video_url, **analysis, "analyzedAt": utcnow_iso()}
    if existing:
        update_document(db, PERFORMANCE, athlete_id, lambda doc: record)
    else:
        set_document(db, PERFORMANCE, athlete_id, record)
    return {"success": True, "analysis": analysis, "videoUrl": video_url}


@router.get("/getVideoPerformanceAnalysis/{athleteId}")
def get_video_analysis(athleteId: str, db=Depends(get_db), current=Depends(get_current_user)):
    doc = get_document(db, PERFORMANCE, athleteId.strip())
    if not doc:
        raise NotFoundError("Performance data not found")
    if not any(doc.get(k) for k in ANALYSIS_FIELDS + ("videoUrl",)):
        raise NotFoundError("Required performance fields not found")
    return {
        "success": True,
        "message": "Player performance data retrieved successfully",
        "data": {
            "strengths": doc.get("strengths") or "No strengths available",
            "weaknesses": doc.get("weaknesses") or "No weaknesses available",
            "performance_suggestions": doc.get("performance_suggestions") or "No performance suggestions available",
            "training_focus_areas": doc.get("training_focus_areas") or "No training focus areas available",
            "videoUrl": doc.get("videoUrl") or "No video",
        },
    }
