"""OpenAI Chat Completions client for food recognition."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from calorie_lens.errors import ConfigError, NetworkError, ParseError
from calorie_lens.services.recognition import FoodRecognizer


@dataclass
class OpenAIFoodRecognizer(FoodRecognizer):
    """Food recognizer backed by an OpenAI-compatible chat completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str | None = None) -> "OpenAIFoodRecognizer":
        """Create a recognizer with its own OpenAI client."""
        if not api_key:
            raise ConfigError("The AI service is not configured.")
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send the prompt and image and return the reply text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                        ],
                    }
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise ConfigError("The AI service rejected its credentials.") from exc
        except openai.RateLimitError as exc:
            raise NetworkError("Too many requests. Please try again shortly.") from exc
        except openai.APIConnectionError as exc:
            raise NetworkError("Please check your network connection.") from exc
        except openai.APIStatusError as exc:
            raise NetworkError(
                f"The AI service failed with status {exc.status_code}."
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ParseError("The AI service returned an empty response.")
        return content
