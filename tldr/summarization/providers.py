"""Completion backend abstraction for summary generation."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tldr.errors import BackendCallError, BackendInitializationError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_BASE_URL = "https://api.openai.com/v1"


class SamplingParams(BaseModel):
    """Sampling configuration sent with every completion request."""

    temperature: float = 0.7
    top_p: float = 0.9
    frequency_penalty: float = 0.5
    presence_penalty: float = 0.0


class Usage(BaseModel):
    """Token usage reported by the backend."""

    model_config = ConfigDict(extra="ignore")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: Optional[str] = None


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int = 0
    message: Optional[ChatMessage] = None
    finish_reason: Optional[str] = None


class ChatCompletion(BaseModel):
    """Chat completion response body."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    choices: List[ChatChoice] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)


class CompletionClient(ABC):
    """Abstract base class for chat completion backends.

    Clients handle the backend call (prompts in -> raw completion out).
    The Summarizer builds prompts and extracts the result.
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        assistant_prompt: str = "",
        model: Optional[str] = None,
    ) -> ChatCompletion:
        """Request a completion for a (system, user, assistant) prompt triple.

        Args:
            system_prompt: System message content
            user_prompt: User message content
            assistant_prompt: Assistant message content
            model: Model name; client default if omitted

        Returns:
            Raw completion response
        """
        pass

    async def aclose(self) -> None:
        """Release backend resources."""
        return None

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class HTTPCompletionClient(CompletionClient):
    """HTTP client for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        sampling: Optional[SamplingParams] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize HTTP completion client.

        Args:
            api_key: API credential sent as a bearer token
            base_url: API base URL (without the ``/chat/completions`` path)
            model: Default model name
            sampling: Sampling parameters; defaults to ``SamplingParams()``
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key is required for the completion client")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.sampling = sampling or SamplingParams()
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the shared HTTP session, creating it on first use."""
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                try:
                    self._client = httpx.AsyncClient(
                        base_url=self.base_url,
                        headers={
                            "Authorization": f"Bearer {self._api_key}",
                            "Content-Type": "application/json",
                        },
                        timeout=self.timeout,
                        transport=self._transport,
                    )
                except Exception as e:
                    logger.error("Failed to create HTTP session", exc_info=True)
                    raise BackendInitializationError(
                        f"Could not create completion session: {e}"
                    ) from e
        return self._client

    def build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        assistant_prompt: str = "",
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the JSON request body."""
        return {
            "model": model or self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
                {"role": "assistant", "content": assistant_prompt},
            ],
            **self.sampling.model_dump(),
        }

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        assistant_prompt: str = "",
        model: Optional[str] = None,
    ) -> ChatCompletion:
        """Request a completion via the HTTP API.

        Raises:
            BackendCallError: On transport errors, error statuses or a
                malformed response body
        """
        payload = self.build_payload(system_prompt, user_prompt, assistant_prompt, model)
        client = await self._get_client()

        try:
            response = await client.post("/chat/completions", json=payload)
            response.raise_for_status()
            return ChatCompletion.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Failed to process completion: {e}",
                extra={
                    "model": payload["model"],
                    "status_code": e.response.status_code,
                    "response_body": e.response.text[:500],
                },
            )
            raise BackendCallError(
                f"Completion request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to process completion: {e}",
                extra={"model": payload["model"]},
            )
            raise BackendCallError(f"Completion request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            logger.error(
                "Completion response could not be decoded",
                extra={"model": payload["model"]},
                exc_info=True,
            )
            raise BackendCallError(f"Malformed completion response: {e}") from e

    async def aclose(self) -> None:
        """Close the HTTP session if one was created."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
