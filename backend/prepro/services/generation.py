# prepro/services/generation.py

from __future__ import annotations

from typing import Optional

from openai import OpenAI, OpenAIError

from prepro.core.config import settings
from prepro.core.exceptions import UpstreamGenerationError
from prepro.core.logging import get_logger

logger = get_logger("generation")


class GenerationClient:
    """
    Thin wrapper around the chat-completions endpoint.

    Every call runs in JSON-object mode and returns the raw response text.
    Decoding into a stage contract is the caller's job.
    """

    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.OPENAI_MODEL

    @property
    def client(self) -> OpenAI:
        # Built on first use so routes that never generate don't need a key
        if self._client is None:
            self._client = OpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.OPENAI_TIMEOUT_SECONDS,
            )
        return self._client

    def complete_json(self, system_prompt: str, user_prompt: str, *, temperature: float) -> str:
        """Run one completion and return its text. Empty content is an error."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except OpenAIError as e:
            logger.error(f"[OpenAI] API error: {e}")
            raise UpstreamGenerationError(f"OpenAI API error: {e}")

        content = None
        if response.choices:
            content = response.choices[0].message.content

        if not content:
            raise UpstreamGenerationError("Model returned no content")

        logger.debug(f"[OpenAI] {self.model} returned {len(content)} chars (temperature={temperature})")
        return content
