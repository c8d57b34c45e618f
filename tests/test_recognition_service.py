"""Tests for food recognition service."""

import asyncio
import json

import pytest

from calorie_lens.domain.recognition import RecognizedFood
from calorie_lens.errors import ParseError, ValidationError
from calorie_lens.services.recognition import (
    RecognitionService,
    extract_json_array,
    parse_food_records,
)
from tests.conftest import JPEG_DATA_URL, FakeFoodRecognizer


def test_recognize_parses_reply_wrapped_in_prose() -> None:
    recognizer = FakeFoodRecognizer()
    service = RecognitionService(client=recognizer, model="gpt-4o")

    foods = asyncio.run(service.recognize(JPEG_DATA_URL))

    assert [food.name for food in foods] == ["rice", "kimchi"]
    assert foods[0].calories == 300
    assert foods[0].carbs == 65.5
    assert foods[1].confidence == 80
    assert len({food.id for food in foods}) == 2
    assert recognizer.calls == [
        {
            "model": "gpt-4o",
            "image_data_url": JPEG_DATA_URL,
            "max_tokens": 1500,
            "temperature": 0.1,
        }
    ]


def test_recognize_rejects_unsupported_image_type() -> None:
    recognizer = FakeFoodRecognizer()
    service = RecognitionService(client=recognizer, model="gpt-4o")

    with pytest.raises(ValidationError):
        asyncio.run(service.recognize("data:image/gif;base64,R0lGODlh"))
    with pytest.raises(ValidationError):
        asyncio.run(service.recognize("https://example.com/meal.jpg"))

    assert recognizer.calls == []


def test_recognize_bytes_builds_png_data_url() -> None:
    recognizer = FakeFoodRecognizer(reply="[]")
    service = RecognitionService(client=recognizer, model="gpt-4o")

    foods = asyncio.run(service.recognize_bytes(b"\x89PNG\r\n\x1a\nrest"))

    assert foods == []
    assert str(recognizer.calls[0]["image_data_url"]).startswith(
        "data:image/png;base64,"
    )


def test_extract_json_array_keeps_outermost_brackets() -> None:
    content = 'Sure! [{"name": "soup", "tags": ["hot"]}] Thanks'

    assert extract_json_array(content) == '[{"name": "soup", "tags": ["hot"]}]'


@pytest.mark.parametrize("content", ["I could not see any food.", "] backwards ["])
def test_extract_json_array_requires_array(content: str) -> None:
    with pytest.raises(ParseError):
        extract_json_array(content)


def test_parse_food_records_rejects_malformed_json() -> None:
    with pytest.raises(ParseError):
        parse_food_records("[{name: rice}]")


def test_parse_food_records_repairs_missing_fields() -> None:
    foods = parse_food_records(
        '[{"name": " toast ", "calories": "120.6", "fat": null}, 42, '
        '{"carbs": "lots", "confidence": 140}]'
    )

    assert len(foods) == 2
    toast, unnamed = foods
    assert toast.name == "toast"
    assert toast.calories == 121
    assert toast.quantity == ""
    assert toast.grams == 0
    assert toast.fat == 0.0
    assert unnamed.name == ""
    assert unnamed.carbs == 0.0
    assert unnamed.confidence == 100


def test_recognized_food_clamps_confidence_and_ignores_bools() -> None:
    food = RecognizedFood.model_validate(
        {"confidence": -20, "calories": True, "protein": float("nan")}
    )

    assert food.confidence == 0
    assert food.calories == 0
    assert food.protein == 0.0


def test_extract_json_array_from_reply_with_greeting() -> None:
    content = 'Here you go:\n[{"name": "apple", "calories": 95}]\nThanks'

    extracted = extract_json_array(content)

    assert extracted == '[{"name": "apple", "calories": 95}]'
    assert json.loads(extracted) == [{"name": "apple", "calories": 95}]
