"""
OpenAI-compatible LLM Provider.

Talks to any endpoint that speaks the OpenAI chat completions API. The
default base URL points at Groq.
"""

import logging
from typing import Dict, List, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """
    Chat completion provider over the OpenAI SDK.

    Defaults match the LeadMaps analytics engine: llama-3.3-70b on Groq,
    temperature 0.6, top_p 0.95.
    """

    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model_id: str = DEFAULT_MODEL,
        max_tokens: int = 2000,
        temperature: float = 0.6,
        top_p: float = 0.95,
    ):
        """
        Initialize the provider.

        Args:
            api_key: Bearer credential for the endpoint
            base_url: OpenAI-compatible API root
            model_id: Model ID
            max_tokens: Maximum tokens
            temperature: Generation temperature
            top_p: Nucleus sampling mass
        """
        self._client = OpenAI(api_key=api_key, base_url=base_url)

        self.model_id = model_id
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.top_p = top_p

        logger.info(f"OpenAI-compatible provider initialized: {model_id} @ {base_url}")

    def generate_with_history(
        self,
        messages: List[Dict[str, str]],
        system: Optional[str] = None
    ) -> str:
        """
        Generate response with conversation history.

        Args:
            messages: List of {"role", "content"} messages, newest last
            system: System prompt

        Returns:
            Generated response (empty string when the endpoint returns no content)
        """
        try:
            formatted = []

            if system:
                formatted.append({"role": "system", "content": system})

            formatted.extend(messages)

            response = self._client.chat.completions.create(
                model=self.model_id,
                messages=formatted,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                top_p=self.top_p,
            )

            if not response.choices:
                return ""
            return (response.choices[0].message.content or "").strip()

        except Exception as e:
            logger.error(f"Completion with history failed: {e}")
            raise
