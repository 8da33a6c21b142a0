"""Read round fields out of an uploaded screenshot with Gemini."""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from google import genai
from google.genai import types

from config import Settings
from llm.prompts import RawRoundScreenshot, build_screenshot_prompt

logger = logging.getLogger(__name__)

# --- Configuration ---

MIN_CONFIDENCE = 0.5
SUPPORTED_MIME_TYPES = {"image/jpeg", "image/png"}

# Inclusive bounds, matching the Round model
FIELD_RANGES = {
    "total_score": (18, 200),
    "course_rating": (55, 85),
    "slope_rating": (55, 155),
    "fairways_hit": (0, 14),
    "greens_in_regulation": (0, 18),
    "total_putts": (0, 100),
    "penalties": (0, 50),
}


class ExtractedRound(BaseModel):
    """Round fields read with enough confidence to pre-fill the round form."""
    course_name: Optional[str] = None
    date: Optional[datetime] = None
    total_score: Optional[int] = None
    course_rating: Optional[Decimal] = None
    slope_rating: Optional[int] = None
    fairways_hit: Optional[int] = None
    greens_in_regulation: Optional[int] = None
    total_putts: Optional[int] = None
    penalties: Optional[int] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


def _parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse a YYYY-MM-DD date string, returning None on failure."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        return None


def _in_range(name: str, value: Any) -> bool:
    bounds = FIELD_RANGES.get(name)
    if bounds is None:
        return True
    low, high = bounds
    return low <= value <= high


def _build_extracted_round(raw: RawRoundScreenshot) -> ExtractedRound:
    """Keep only confident, in-range values."""
    fields: Dict[str, Any] = {}
    for name in RawRoundScreenshot.model_fields:
        annotated = getattr(raw, name)
        if annotated.value is None or annotated.confidence < MIN_CONFIDENCE:
            continue
        value = annotated.value
        if name == "date":
            value = _parse_date(value)
            if value is None:
                continue
        elif name == "course_name":
            value = value.strip()
            if not value:
                continue
        elif not _in_range(name, value):
            logger.info("Dropping %s=%s from screenshot: out of range", name, value)
            continue
        if name == "course_rating":
            value = Decimal(str(value))
        fields[name] = value
    return ExtractedRound(**fields)


class ScreenshotExtractor:
    """Gemini-backed extraction of a single round from an image file."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_client(self) -> genai.Client:
        if not self._settings.google_api_key:
            raise EnvironmentError(
                "GOOGLE_API_KEY environment variable is not set. "
                "Get an API key at https://aistudio.google.com/apikey"
            )
        return genai.Client(api_key=self._settings.google_api_key)

    def _call_gemini(self, image_part: types.Part) -> RawRoundScreenshot:
        client = self._create_client()
        response = client.models.generate_content(
            model=self._settings.gemini_model,
            contents=[image_part, build_screenshot_prompt()],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_json_schema=RawRoundScreenshot.model_json_schema(),
            ),
        )
        return RawRoundScreenshot.model_validate_json(response.text)

    def extract_round_from_image(
        self, image_path: Union[str, Path], mime_type: str,
    ) -> Optional[ExtractedRound]:
        """Extract round fields from the image, then delete it.

        Returns None when the image could not be read or nothing usable was
        found. The file is removed whether or not extraction succeeds.
        """
        path = Path(image_path)
        try:
            if mime_type not in SUPPORTED_MIME_TYPES:
                logger.warning("Unsupported screenshot type: %s", mime_type)
                return None
            image_part = types.Part.from_bytes(data=path.read_bytes(), mime_type=mime_type)
            raw = self._call_gemini(image_part)
            extracted = _build_extracted_round(raw)
            if extracted.is_empty():
                logger.warning("No usable round data found in screenshot")
                return None
            return extracted
        except Exception as e:
            logger.warning("Screenshot analysis failed: %s", e)
            return None
        finally:
            path.unlink(missing_ok=True)
