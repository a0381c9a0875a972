"""
OpenAI chat wrapper returning JSON objects.

Shared by topic extraction and idea generation. Callers receive the decoded
payload and decide how to interpret it.
"""

import json
import re
import logging
from typing import Any, Optional

from openai import OpenAI

from .config import Configuration
from .error_handling import EnrichmentFailure

logger = logging.getLogger(__name__)


def parse_llm_json(content: Optional[str]) -> Any:
    """
    Decode a JSON payload from model output.

    Tries the raw content first, then the content with a markdown fence
    removed, then the outermost {...} block.

    Args:
        content: Raw message content

    Returns:
        Decoded JSON value

    Raises:
        EnrichmentFailure: If no JSON can be decoded
    """
    if not content or not content.strip():
        raise EnrichmentFailure("No response from AI")

    cleaned = content.strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    if cleaned.startswith("```"):
        cleaned = re.sub(r'^```\w*\n?', '', cleaned)
        cleaned = re.sub(r'\n?```$', '', cleaned.strip())
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            pass

    match = re.search(r'\{[\s\S]*\}', content)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    raise EnrichmentFailure(f"Could not parse JSON from response: {content[:200]}")


class OpenAIJSONClient:
    """
    Thin OpenAI chat-completions client in JSON-object mode.
    """

    def __init__(self, config: Configuration, client: Optional[OpenAI] = None):
        """
        Initialize the client.

        Args:
            config: Configuration with the OpenAI key and model
            client: Optional pre-built OpenAI client
        """
        self.model = config.openai_model
        self.client = client or OpenAI(
            api_key=config.require_openai_api_key(),
            timeout=config.request_timeout,
            max_retries=0
        )

    def complete_json(self, system_prompt: str, prompt: str, temperature: float) -> Any:
        """
        Run one chat completion and decode its JSON payload.

        Args:
            system_prompt: System message
            prompt: User message
            temperature: Sampling temperature

        Returns:
            Decoded JSON value

        Raises:
            EnrichmentFailure: If the response is empty or not JSON
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"}
        )

        content = response.choices[0].message.content
        return parse_llm_json(content)
