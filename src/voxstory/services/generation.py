"""Story and narration generation via the Gemini REST API.

Two operations are exposed:
- generate_story: prompt (text, voice transcript or image) -> title + content
- generate_audio: story text -> base64 audio for a prebuilt voice

Uses httpx directly rather than an SDK so the transport can be swapped out in
tests with ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from voxstory.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

STORY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "content": {"type": "STRING"},
    },
    "required": ["title", "content"],
}


class GenerationMode(str, Enum):
    """Kind of input the story is generated from."""

    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"


class GenerationError(Exception):
    """The generation service failed or returned something unusable."""
    pass


@dataclass
class GeneratedStory:
    """Story text returned by the model."""

    title: str
    content: str


def build_story_prompt(input_text: str, mode: GenerationMode, genre: str) -> str:
    """Instruction text for each input mode."""
    if mode == GenerationMode.TEXT:
        return (
            f'Create a short audiobook story based on this prompt: "{input_text}".\n'
            f"Genre: {genre}.\n"
            "The story should be engaging, descriptive, and suitable for an audiobook.\n"
            'Return the response in JSON format with "title" and "content" fields.'
        )
    if mode == GenerationMode.VOICE:
        return (
            f'The following is a transcript of a user\'s voice input: "{input_text}".\n'
            "Expand this into a full, polished audiobook story.\n"
            f"Genre: {genre}.\n"
            'Return the response in JSON format with "title" and "content" fields.'
        )
    return (
        "Analyze this image and write a short audiobook story inspired by it.\n"
        f"Genre: {genre}.\n"
        'Return the response in JSON format with "title" and "content" fields.'
    )


def split_data_url(data: str) -> tuple[str, str]:
    """Split ``data:image/png;base64,XXXX`` into (mime type, payload).

    Bare base64 strings are assumed to be PNG.
    """
    if data.startswith("data:") and "," in data:
        header, payload = data.split(",", 1)
        mime_type = header[len("data:"):].split(";", 1)[0] or "image/png"
        return mime_type, payload
    return "image/png", data


class GenerationService:
    """Client for story and audio generation.

    Usage:
        async with GenerationService(settings) as service:
            story = await service.generate_story("a lost robot", GenerationMode.TEXT, "Fantasy")
            audio = await service.generate_audio(story.content, "Kore")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.gemini_api_base,
            timeout=self.settings.generation_timeout_seconds,
        )

    async def __aenter__(self) -> GenerationService:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def generate_story(
        self,
        input_text: str,
        mode: GenerationMode,
        genre: str,
    ) -> GeneratedStory:
        """Generate a story title and body.

        Args:
            input_text: Prompt text, voice transcript, or base64 image for IMAGE mode
            mode: How to interpret ``input_text``
            genre: Genre label passed to the model

        Returns:
            Generated story

        Raises:
            GenerationError: On transport errors or an unusable response
        """
        mode = GenerationMode(mode)
        prompt = build_story_prompt(input_text, mode, genre)

        if mode == GenerationMode.IMAGE:
            mime_type, payload = split_data_url(input_text)
            parts: list[dict[str, Any]] = [
                {"inlineData": {"mimeType": mime_type, "data": payload}},
                {"text": prompt},
            ]
        else:
            parts = [{"text": prompt}]

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": STORY_SCHEMA,
            },
        }
        data = await self._generate_content(self.settings.gemini_story_model, body)

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            story = json.loads(text)
            return GeneratedStory(title=str(story["title"]), content=str(story["content"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GenerationError("Story response could not be parsed") from e

    async def generate_audio(self, text: str, voice_name: str = "Kore") -> str | None:
        """Synthesize narration for ``text``.

        Returns:
            Base64 audio payload, or None if the response carried no audio

        Raises:
            GenerationError: On transport errors
        """
        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": voice_name},
                    },
                },
            },
        }
        data = await self._generate_content(self.settings.gemini_tts_model, body)

        try:
            audio = data["candidates"][0]["content"]["parts"][0]["inlineData"]["data"]
        except (KeyError, IndexError, TypeError):
            return None
        return audio or None

    async def _generate_content(self, model: str, body: dict[str, Any]) -> dict[str, Any]:
        headers = {"x-goog-api-key": self.settings.gemini_api_key}
        try:
            response = await self.client.post(
                f"/models/{model}:generateContent",
                json=body,
                headers=headers,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Gemini API error %s for model %s", e.response.status_code, model)
            raise GenerationError(f"Gemini API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Gemini request failed for model %s: %s", model, e)
            raise GenerationError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise GenerationError("Gemini returned invalid JSON") from e
