"""
Gemini client for athlete suggestions, certificate checks and video analysis.

The model is treated as an opaque text-completion function. Callers that
expect structured output ask for a JSON object in the prompt and run the
reply through `parse_model_json`.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

import google.generativeai as genai
from fastapi import Request

from errors import ParseError, UpstreamError

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```), if any."""
    match = FENCE_RE.match(text or "")
    if match:
        return match.group(1).strip()
    return (text or "").strip()


def parse_model_json(text: str) -> Dict[str, Any]:
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        raise ParseError("Failed to parse AI response")
    if not isinstance(data, dict):
        raise ParseError("AI response is not a JSON object")
    return data


def to_prompt_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)


class GeminiClient:
    """
    Thin wrapper around `genai.GenerativeModel`.

    Args:
        api_key: Gemini API key
        model: Model name
        temperature, top_p, top_k, max_output_tokens: default generation settings
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.7,
        top_p: float = 0.95,
        top_k: int = 40,
        max_output_tokens: int = 8192,
    ):
        self.model_name = model
        self.temperature = temperature
        self.top_p = top_p
        self.top_k = top_k
        self.max_output_tokens = max_output_tokens

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name=model)

    def generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        generation_config = genai.GenerationConfig(
            temperature=self.temperature,
            top_p=self.top_p,
            top_k=self.top_k,
            max_output_tokens=max_output_tokens or self.max_output_tokens,
        )
        try:
            response = self.model.generate_content(prompt, generation_config=generation_config)
            text = response.text if response else ""
        except Exception as e:
            logger.error("Gemini generation failed: %s", e)
            raise UpstreamError(f"Failed to generate response: {e}")
        if not text:
            raise UpstreamError("No valid response received from AI.")
        return text


def get_ai(request: Request) -> GeminiClient:
    return request.app.state.ai
