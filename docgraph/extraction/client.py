"""
Extraction client: one LLM call turns a text into a partial graph.

Supports multiple LLM providers through LiteLLM.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol

from dotenv import load_dotenv
import litellm

from ..errors import ConfigurationError, MalformedResponse, TransportError
from ..schema import PartialGraph
from .prompts import build_system_prompt
from .response import parse_extraction_response

logger = logging.getLogger(__name__)

# Load .env file from the working directory
load_dotenv(Path.cwd() / ".env")

# Default model - can use any LiteLLM supported model
# Examples:
#   - "gemini/gemini-2.5-flash" (Google Gemini 2.5 Flash)
#   - "claude-sonnet-4-20250514" (Anthropic Claude)
#   - "gpt-4o" (OpenAI GPT-4)
DEFAULT_MODEL = "gemini/gemini-2.5-flash"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"


class ExtractionClient(Protocol):
    """Interface the pipeline consumes for semantic extraction."""

    def check_credentials(self) -> None:
        """Raise ConfigurationError if no credential is available."""
        ...

    def extract(self, text: str, instructions: Optional[str] = None) -> PartialGraph:
        """Return the partial graph for ``text``.

        Raises:
            MalformedResponse: The response failed schema validation.
            TransportError: The call itself failed.
        """
        ...


class LiteLLMExtractionClient:
    """
    Extraction client backed by ``litellm.completion``.

    The client holds no per-call state and is safe to share between the
    threads of one orchestrator run.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 8192,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        api_key: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize client.

        Args:
            model: LiteLLM model identifier (e.g., "gemini/gemini-2.5-flash")
            max_tokens: Max tokens in response
            api_key_env: Environment variable holding the API key
            api_key: Explicit API key, takes precedence over the environment
            **kwargs: Additional arguments for litellm.completion
        """
        self.model = model
        self.max_tokens = max_tokens
        self.api_key_env = api_key_env
        self._api_key = api_key
        self.extra_params = kwargs

    def _resolve_api_key(self) -> Optional[str]:
        return self._api_key or os.environ.get(self.api_key_env) or None

    def check_credentials(self) -> None:
        if not self._resolve_api_key():
            raise ConfigurationError(
                f"{self.api_key_env} environment variable not set. "
                "Please configure your API key to proceed."
            )

    def extract(self, text: str, instructions: Optional[str] = None) -> PartialGraph:
        api_key = self._resolve_api_key()
        if not api_key:
            raise ConfigurationError(f"{self.api_key_env} environment variable not set.")

        messages = [
            {"role": "system", "content": build_system_prompt(instructions)},
            {"role": "user", "content": f'Document Content to Analyze: "{text}"'},
        ]

        try:
            response = litellm.completion(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                api_key=api_key,
                response_format={"type": "json_object"},
                **self.extra_params,
            )
        except litellm.AuthenticationError as e:
            raise TransportError(
                "The provided API key is not valid. Please check your configuration."
            ) from e
        except Exception as e:
            raise TransportError(f"Extraction call failed: {e}") from e

        try:
            response_text = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise MalformedResponse("AI response contained no message content.") from e

        graph = parse_extraction_response(response_text)
        logger.debug(
            "Extracted %d nodes, %d links from %d chars",
            len(graph.nodes), len(graph.links), len(text),
        )
        return graph
