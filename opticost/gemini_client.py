"""
Minimal Gemini REST client (generateContent).

Raises on any transport or payload error; callers decide the fallback.
"""

import json
import urllib.request
from typing import Optional

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/%s:generateContent?key=%s"


def call_gemini(prompt: str, api_key: str, model: str,
                use_search: bool = False, temperature: float = 0.2,
                timeout: int = 60) -> str:
    """Return the text of the first candidate."""
    body = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": temperature},
    }
    if use_search:
        body["tools"] = [{"googleSearch": {}}]

    req = urllib.request.Request(
        GEMINI_URL % (model, api_key),
        data=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(req, timeout=timeout) as response:
        result = json.loads(response.read())
        return result["candidates"][0]["content"]["parts"][0]["text"]


def extract_json_object(text: str) -> Optional[dict]:
    """Pull the outermost {...} out of a reply that may be wrapped in markdown."""
    if not text:
        return None
    cleaned = text.replace("```json", "").replace("```", "").strip()
    first, last = cleaned.find("{"), cleaned.rfind("}")
    if first == -1 or last == -1 or last < first:
        return None
    try:
        data = json.loads(cleaned[first:last + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
