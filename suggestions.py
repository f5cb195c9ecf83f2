from fastapi import APIRouter, Depends

from ai_client import get_ai, parse_model_json, to_prompt_json
from database import get_db
from directory import ProfileAggregator
from errors import NotFoundError, ValidationError
from schemas import ChatbotPayload
from security import get_current_user

router = APIRouter()

CHAT_MAX_OUTPUT_TOKENS = 300
CHAT_MAX_CHARS = 500

JSON_INSTRUCTION = (
    "Respond with a single JSON object only, without commentary, using the keys: "
)

DIETARY_PROMPT = """Generate a dietary plan for an athlete with the following data. Focus on improvements and adjustments to the existing plan. Provide recommendations on calorie intake, macronutrient ratios, meal plan modifications (including specific food suggestions), and hydration strategies. Explain the rationale behind each recommendation.
{instruction}calorie_intake, macronutrient_ratios, meal_plan_modifications, hydration_strategy, rationale.

Athlete Data:
{{
  "dietaryPlan": {dietary},
  "healthcareDetails": {healthcare},
  "performanceDetails": {performance}
}}"""

PERFORMANCE_PROMPT = """Provide performance improvement suggestions for an athlete with the following data. Focus on training adjustments, mental performance strategies, strength and conditioning recommendations, and areas for improvement based on their wins/losses. Explain the reasoning behind each recommendation.
{instruction}training_adjustments, mental_strategies, strength_and_conditioning, improvement_areas, rationale.

Athlete Data:
{{
  "performanceDetails": {performance},
  "healthcareDetails": {healthcare}
}}"""

HEALTHCARE_PROMPT = """Generate healthcare and injury prevention recommendations for an athlete with the following data. Focus on managing existing injuries, optimizing sleep, monitoring hydration, and identifying potential risk factors. Include recommendations for specific therapies or interventions. Explain the rationale behind each recommendation.
{instruction}injury_management, sleep_optimization, hydration_monitoring, risk_factors, therapies, rationale.

Athlete Data:
{{
  "healthcareDetails": {healthcare},
  "performanceDetails": {performance}
}}"""

CHAT_PROMPT = (
    "As a sports health and performance advisor, answer the following question about "
    "athletic health, diet, and performance improvement concisely:\n\nQ: {question}\nA:"
)


def _load(db, athlete_id: str, required, kind: str) -> dict:
    docs = ProfileAggregator(db).fetch(athlete_id)
    if docs["athlete"] is None:
        raise NotFoundError("Athlete not found")
    if any(docs[key] is None for key in required):
        raise ValidationError(f"Incomplete data for {kind} suggestions")
    return {key: to_prompt_json({k: v for k, v in (docs[key] or {}).items() if k != "id"}) for key in required}


@router.get("/dietary/{athleteId}")
def dietary_suggestions(athleteId: str, db=Depends(get_db), ai=Depends(get_ai), current=Depends(get_current_user)):
    data = _load(db, athleteId, ("dietary", "healthcare", "performance"), "dietary")
    prompt = DIETARY_PROMPT.format(instruction=JSON_INSTRUCTION, **data)
    return {"success": True, "dietarySuggestion": parse_model_json(ai.generate(prompt))}


@router.get("/performance/{athleteId}")
def performance_suggestions(athleteId: str, db=Depends(get_db), ai=Depends(get_ai), current=Depends(get_current_user)):
    data = _load(db, athleteId, ("healthcare", "performance"), "performance")
    prompt = PERFORMANCE_PROMPT.format(instruction=JSON_INSTRUCTION, **data)
    return {"success": True, "performanceSuggestion": parse_model_json(ai.generate(prompt))}


@router.get("/healthcare/{athleteId}")
def healthcare_suggestions(athleteId: str, db=Depends(get_db), ai=Depends(get_ai), current=Depends(get_current_user)):
    data = _load(db, athleteId, ("healthcare", "performance"), "healthcare")
    prompt = HEALTHCARE_PROMPT.format(instruction=JSON_INSTRUCTION, **data)
    return {"success": True, "healthcareSuggestion": parse_model_json(ai.generate(prompt))}


@router.post("/chat")
def chatbot(payload: ChatbotPayload, ai=Depends(get_ai), current=Depends(get_current_user)):
    answer = ai.generate(CHAT_PROMPT.format(question=payload.question), max_output_tokens=CHAT_MAX_OUTPUT_TOKENS)
    if len(answer) > CHAT_MAX_CHARS:
        answer = answer[:CHAT_MAX_CHARS] + "..."
    return {"success": True, "response": answer}
