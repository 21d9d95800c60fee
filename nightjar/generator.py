"""
AI analysis generator.

Sends one extracted record plus an instruction prompt to an OpenAI chat
model and returns the prose answer. Optional: nothing in the extraction or
templated analysis paths depends on it.
"""

import json
from typing import Any, Dict, Optional

import openai

from nightjar.config import Settings
from nightjar.prompts import ANALYST_SYSTEM_PROMPT, build_user_message
from nightjar.utils.errors import BackendError, BackendUnavailableError
from nightjar.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

NO_ANALYSIS = "No analysis could be generated."


class AnalysisGenerator:
    """Generate prose analyses of Launch records with an LLM."""

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gpt-4",
        temperature: float = 0.5,
        client: Optional[openai.AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            api_key: OpenAI API key
            model_name: Chat model name
            temperature: Generation temperature
            client: Preconfigured client (tests inject a mock here)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self._llm_client = client

    def _ensure_llm_client(self) -> openai.AsyncOpenAI:
        """Ensure LLM client is initialized."""
        if self._llm_client is None:
            if not self.api_key:
                raise BackendUnavailableError()
            self._llm_client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._llm_client

    @log_performance
    async def analyze(self, data: Dict[str, Any], prompt: str) -> str:
        """
        Ask the model to analyze one record.

        Args:
            data: JSON-serializable record
            prompt: Instruction for this kind of record

        Returns:
            Model answer

        Raises:
            BackendUnavailableError: If no API key is configured
            BackendError: If the API call fails
        """
        client = self._ensure_llm_client()

        messages = [
            {"role": "system", "content": ANALYST_SYSTEM_PROMPT},
            {"role": "user", "content": build_user_message(prompt, json.dumps(data, indent=2, default=str))},
        ]

        try:
            completion = await client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=self.temperature,
            )
        except openai.OpenAIError as e:
            logger.error(f"Error with OpenAI API: {e}")
            raise BackendError(
                f"AI Analysis Error: {e}. Please check your OpenAI API key and try again.",
                {"model": self.model_name},
            ) from e

        return completion.choices[0].message.content or NO_ANALYSIS


def create_generator(settings: Settings) -> Optional[AnalysisGenerator]:
    """Build a generator when an API key is configured, else None."""
    if not settings.ai_enabled:
        logger.debug("No OpenAI API key configured; AI analysis disabled")
        return None
    return AnalysisGenerator(
        api_key=settings.openai_api_key,
        model_name=settings.openai_model,
        temperature=settings.temperature,
    )
