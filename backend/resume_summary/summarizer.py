import json
import logging
import re

import requests
from pydantic import ValidationError

from .errors import SummaryGenerationError
from .models import ResumeSummary

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Extract and return ONLY a valid JSON object (no markdown, no code blocks, no extra text) with the following information from this resume:

Resume text:
{resume_text}

Return a JSON object with this exact structure:
{{
  "name": "Full name of the person",
  "currentRole": "Their current job title or target role",
  "experienceYears": <number of years of professional experience>,
  "skills": ["skill1", "skill2", "skill3", ...],
  "education": [
    {{
      "degree": "Degree name",
      "institution": "School/University name",
      "graduationYear": <year as number>
    }}
  ],
  "summary": "A 2-3 sentence professional summary"
}}

Important:
- Return ONLY the JSON object, no other text
- Use realistic estimates if exact information isn't available
- If a field cannot be determined, use reasonable defaults (e.g., empty arrays, "Not specified", 0)
- Ensure graduationYear is a number, not a string"""


def build_prompt(resume_text: str) -> str:
    return PROMPT_TEMPLATE.format(resume_text=resume_text)


def extract_error_message(response_data):
    try:
        err = response_data.get("error")
        if isinstance(err, dict):
            return err.get("message") or err.get("status") or str(err)
        if isinstance(err, str):
            return err
    except AttributeError:
        pass
    try:
        return response_data.get("message") or response_data.get("detail") or str(response_data)
    except AttributeError:
        return "Unknown error"


def mask_secret(text: str, secret: str = "") -> str:
    if not text:
        return text
    if secret:
        text = text.replace(secret, secret[:3] + "***")
    # Google keys are "AIza" + 35 url-safe chars
    return re.sub(r"AIza[0-9A-Za-z_\-]{10,}", lambda m: m.group(0)[:4] + "***", text)


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences a model may wrap its JSON in."""
    text = content.strip()
    if text.startswith("```json"):
        text = re.sub(r"```json\n?", "", text)
        text = re.sub(r"```\n?$", "", text).strip()
    elif text.startswith("```"):
        text = re.sub(r"```\n?", "", text).strip()
    return text


def parse_summary(content: str, resume_id: str) -> ResumeSummary:
    json_string = strip_code_fences(content)
    try:
        parsed = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise SummaryGenerationError(f"Model reply is not valid JSON: {e.msg}") from e
    if not isinstance(parsed, dict):
        raise SummaryGenerationError("Model reply is not a JSON object")
    try:
        return ResumeSummary.model_validate({**parsed, "id": resume_id})
    except ValidationError as e:
        raise SummaryGenerationError(f"Model reply does not match the summary shape: {e.error_count()} error(s)") from e


class GeminiSummarizer:
    """Summarizes resume text through the Gemini generateContent REST API."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-pro",
                 base_url: str = "https://generativelanguage.googleapis.com/v1beta", timeout: float = 60.0,
                 session: requests.Session | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings):
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.request_timeout,
        )

    def generate_text(self, prompt: str) -> str:
        if not self.api_key:
            raise SummaryGenerationError("GEMINI_API_KEY is not configured")

        api_url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"Content-Type": "application/json"}
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            res = self.session.post(api_url, headers=headers, params={"key": self.api_key}, json=payload,
                                    timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SummaryGenerationError(f"Upstream request failed: {mask_secret(str(e), self.api_key)}") from e

        try:
            response_data = res.json()
        except ValueError:
            response_data = {"message": res.text}

        if not res.ok:
            error_msg = mask_secret(extract_error_message(response_data), self.api_key)
            raise SummaryGenerationError(f"Gemini API error ({res.status_code}): {error_msg}")

        # First candidate, all text parts
        try:
            candidates = response_data.get("candidates") or []
            content = (candidates[0] or {}).get("content") or {}
            parts = content.get("parts") or []
            text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        except (AttributeError, IndexError):
            text = ""
        if not text.strip():
            raise SummaryGenerationError("Gemini API returned an empty reply")
        return text

    def summarize(self, resume_text: str, resume_id: str) -> ResumeSummary:
        content = self.generate_text(build_prompt(resume_text))
        logger.debug("Model reply for %s: %s", resume_id, content)
        summary = parse_summary(content, resume_id)
        logger.info("Parsed summary for %s (%s)", resume_id, summary.name)
        return summary
