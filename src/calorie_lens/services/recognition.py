"""Food recognition service using a vision-language model."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from calorie_lens.domain.foods import FoodRecord
from calorie_lens.domain.recognition import RecognizedFood
from calorie_lens.errors import ParseError, ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = frozenset({"image/jpeg", "image/png"})

RECOGNITION_PROMPT = """\
Identify every food in the image, its kind and its portion size. \
Estimate calories and macronutrients (carbohydrate, protein, fat).

Reply with a JSON array only, one object per food:

[
  {
    "name": "food name",
    "calories": calories (number),
    "quantity": "portion description",
    "grams": weight in grams (number),
    "carbs": carbohydrate grams (number),
    "protein": protein grams (number),
    "fat": fat grams (number),
    "confidence": confidence from 0 to 100 (number)
  }
]

Report every nutrient in grams. Do not include any text outside the JSON."""


class FoodRecognizer(Protocol):
    """Interface for the remote vision model."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return the model's raw text reply for an image."""


@dataclass
class RecognitionService:
    """Service that prompts the recognizer and validates its reply."""

    client: FoodRecognizer
    model: str
    max_tokens: int = 1500
    temperature: float = 0.1

    async def recognize(self, image_data_url: str) -> list[FoodRecord]:
        """Return the foods found in a base64 image data URL."""
        mime_type = _data_url_mime_type(image_data_url)
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise ValidationError("Unsupported image type. Upload a JPG or PNG file.")
        content = await self.client.complete(
            model=self.model,
            prompt=RECOGNITION_PROMPT,
            image_data_url=image_data_url,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        foods = parse_food_records(content)
        logger.info("Recognized foods", extra={"count": len(foods)})
        return foods

    async def recognize_bytes(self, image_bytes: bytes) -> list[FoodRecord]:
        """Return the foods found in raw image bytes."""
        return await self.recognize(_to_data_url(image_bytes))


def extract_json_array(content: str) -> str:
    """Return the substring from the first ``[`` to the last ``]``.

    The model may wrap its JSON in prose, so only the outermost array is kept.
    """
    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end < start:
        raise ParseError("The AI response did not contain a food list.")
    return content[start : end + 1]


def parse_food_records(content: str) -> list[FoodRecord]:
    """Decode the recognizer reply into food records with fresh ids."""
    try:
        payload = json.loads(extract_json_array(content))
    except json.JSONDecodeError as exc:
        raise ParseError("The AI response format was invalid. Please try again.") from exc
    if not isinstance(payload, list):
        raise ParseError("The AI response format was invalid. Please try again.")

    foods: list[FoodRecord] = []
    for entry in payload:
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object food entry", extra={"entry": entry})
            continue
        try:
            item = RecognizedFood.model_validate(entry)
        except PydanticValidationError:
            logger.warning("Skipping unreadable food entry", exc_info=True)
            continue
        foods.append(
            FoodRecord(
                id=str(uuid4()),
                name=item.name,
                calories=item.calories,
                quantity=item.quantity,
                grams=item.grams,
                carbs=item.carbs,
                protein=item.protein,
                fat=item.fat,
                confidence=item.confidence,
            )
        )
    return foods


def _data_url_mime_type(data_url: str) -> str | None:
    """Return the MIME type declared by a base64 data URL."""
    if not data_url.startswith("data:"):
        return None
    header, _, _ = data_url.partition(",")
    mime_type, _, encoding = header[len("data:") :].partition(";")
    if encoding != "base64":
        return None
    return mime_type.lower()


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
