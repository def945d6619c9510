"""
Chat-completions client for the generative model (OpenAI-compatible API).

Constructed once at process start and handed to the reconciliation
pipeline; the pipeline never builds its own client.
"""

from typing import Any, Dict, Optional

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config import Settings, get_settings

logger = structlog.get_logger()


class ModelCallError(Exception):
    """Custom exception for model API errors."""
    def __init__(self, message: str, status_code: int = 0, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    @property
    def retryable(self) -> bool:
        # 0 means transport failure or timeout
        return self.status_code == 0 or self.status_code >= 500 or self.status_code == 429


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ModelCallError) and exc.retryable


class ChatModelClient:
    """
    Client for an OpenAI-compatible /chat/completions endpoint.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = get_settings()
        self.api_key = api_key
        self.base_url = base_url or self.settings.openai_api_url
        self.model = model or self.settings.model_name
        self.temperature = (
            self.settings.model_temperature if temperature is None else temperature
        )
        self.timeout_seconds = timeout_seconds or self.settings.model_timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )
    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Make an authenticated POST to the model API."""
        client = await self._get_client()

        try:
            response = await client.post(endpoint, json=body)
        except httpx.TimeoutException:
            raise ModelCallError("Request timeout")
        except httpx.RequestError as e:
            raise ModelCallError(f"Request error: {str(e)}")

        if response.status_code == 401:
            raise ModelCallError(
                "Authentication failed. Check the model API key.",
                status_code=401,
            )

        if response.status_code >= 400:
            error_detail: Any = response.text
            try:
                error_detail = response.json()
            except ValueError:
                pass
            raise ModelCallError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                details=error_detail,
            )

        try:
            return response.json()
        except ValueError:
            raise ModelCallError(
                "Model API returned a non-JSON body",
                status_code=response.status_code,
                details=response.text,
            )

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Args:
            system_prompt: Instruction contract
            user_prompt: Request with the report summaries

        Returns:
            The assistant message content, stripped
        """
        body = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        logger.info("Calling model", model=self.model)
        data = await self._post("/chat/completions", body)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ModelCallError("Unexpected completion payload", details=data)

        return (content or "").strip()


def build_model_client(settings: Optional[Settings] = None) -> Optional[ChatModelClient]:
    """
    Build the process-wide model client.

    Returns None when no API key is configured; the pipeline reports that
    as an unavailable model instead of failing.
    """
    settings = settings or get_settings()
    if not settings.has_model_credentials:
        logger.warning("Model API key not configured; AI reconciliation disabled")
        return None

    return ChatModelClient(
        api_key=settings.openai_api_key.strip(),
        base_url=settings.openai_api_url,
        model=settings.model_name,
        temperature=settings.model_temperature,
        timeout_seconds=settings.model_timeout_seconds,
    )
