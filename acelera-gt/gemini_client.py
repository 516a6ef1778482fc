import os
from typing import Any, Dict, Optional

import httpx
import requests
from dotenv import load_dotenv

load_dotenv()

API_HOST = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiClientError(RuntimeError):
    pass


def _endpoint(model: Optional[str]) -> str:
    api_key = os.getenv("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise GeminiClientError("GEMINI_API_KEY is not set.")
    model_name = (model or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL).strip()
    return f"{API_HOST}/v1beta/models/{model_name}:generateContent?key={api_key}"


def _payload(prompt: str, temperature: float, max_output_tokens: int) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
            "responseMimeType": "application/json",
        },
        "safetySettings": SAFETY_SETTINGS,
    }


def _extract_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        raise GeminiClientError("Gemini returned no candidates.")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        raise GeminiClientError("Gemini returned no text.")
    text = parts[0].get("text")
    if not text:
        raise GeminiClientError("Gemini returned an empty response.")
    return str(text).strip()


# --- Synchronous Functions ---

def generate_text(
    prompt: str,
    *,
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_output_tokens: int = 4096,
    timeout_seconds: int = 30,
) -> str:
    url = _endpoint(model)
    try:
        response = requests.post(url, json=_payload(prompt, temperature, max_output_tokens), timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise GeminiClientError(f"Gemini request failed: {exc}") from exc

    if not response.ok:
        raise GeminiClientError(f"Gemini returned status {response.status_code}.")
    try:
        data = response.json() or {}
    except ValueError as exc:
        raise GeminiClientError("Gemini returned a non-JSON body.") from exc
    return _extract_text(data)


# --- Asynchronous Functions ---

async def generate_text_async(
    prompt: str,
    *,
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_output_tokens: int = 4096,
    timeout_seconds: float = 30.0,
) -> str:
    url = _endpoint(model)
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(url, json=_payload(prompt, temperature, max_output_tokens))
    except httpx.HTTPError as exc:
        raise GeminiClientError(f"Gemini request failed: {exc}") from exc

    if response.is_error:
        raise GeminiClientError(f"Gemini returned status {response.status_code}.")
    try:
        data = response.json() or {}
    except ValueError as exc:
        raise GeminiClientError("Gemini returned a non-JSON body.") from exc
    return _extract_text(data)
