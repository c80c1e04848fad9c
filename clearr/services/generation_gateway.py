"""
Generation gateway: the single call into the external language model.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from google import genai
from google.genai import types

from clearr.config import GenerationSettings
from clearr.core.exceptions import GenerationError

logger = logging.getLogger(__name__)

SYSTEM_PERSONA = (
    "You are an expert communication coach. Transform messages to be "
    "constructive while preserving authentic intent."
)


class BaseGenerationGateway(ABC):
    """Abstract text generation capability"""

    @abstractmethod
    async def generate(self, prompt_text: str) -> List[str]:
        """Return at least one non-empty candidate for ``prompt_text``."""

    async def close(self) -> None:
        """Release client resources."""


class GeminiGenerationGateway(BaseGenerationGateway):
    """Google Gemini backed generation with a fixed coaching persona"""

    def __init__(self, config: GenerationSettings, client: Optional[genai.Client] = None):
        self.config = config
        self.client = client or (genai.Client(api_key=config.api_key) if config.api_key else None)

    async def generate(self, prompt_text: str) -> List[str]:
        if not self.client:
            logger.error("Generation requested but GENERATION_API_KEY is not configured")
            raise GenerationError("Translation service is not configured")

        try:
            # The client is synchronous; run it off the event loop
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.models.generate_content,
                    model=self.config.model,
                    contents=prompt_text,
                    config=types.GenerateContentConfig(
                        system_instruction=SYSTEM_PERSONA,
                        max_output_tokens=self.config.max_output_tokens,
                        temperature=self.config.temperature,
                    ),
                ),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Generation timed out",
                extra={"timeout_seconds": self.config.timeout_seconds, "model": self.config.model},
            )
            raise GenerationError("Translation timed out", details={"timeout_seconds": self.config.timeout_seconds})
        except Exception as e:
            logger.error(f"Generation call failed: {e}", exc_info=True, extra={"model": self.config.model})
            raise GenerationError("Failed to generate translation") from e

        text = (response.text or "").strip()
        if not text:
            logger.error("Generation returned no text", extra={"model": self.config.model})
            raise GenerationError("Failed to generate translation")

        return [text]

    async def close(self) -> None:
        self.client = None
