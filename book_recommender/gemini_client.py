from typing import Any, Dict

import httpx

from .errors import MissingCredentialError, ProviderError, ProviderTimeoutError
from .logger import logger
from .prompts import build_request_body, extract_text, provider_error_message


class GeminiClient:
    """
    Thin wrapper around the Gemini generateContent endpoint.
    One POST per call, no streaming and no retries.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings, transport: httpx.AsyncBaseTransport | None = None) -> "GeminiClient":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_BASE_URL,
            timeout=settings.REQUESTS_TIMEOUT,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_content(self, prompt: str) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingCredentialError()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=build_request_body(prompt),
                )
        except httpx.TimeoutException as e:
            logger.warning(f"Gemini call to model={self.model} timed out after {self.timeout}s: {e!r}")
            raise ProviderTimeoutError() from e

        try:
            data = r.json()
        except ValueError:
            data = {}

        if r.is_error:
            message = provider_error_message(data, ProviderError.default_message)
            logger.warning(f"Gemini returned {r.status_code} for model={self.model}: {message}")
            raise ProviderError(r.status_code, message)

        logger.info(f"Gemini returned {r.status_code} for model={self.model}")
        return data

    async def recommend(self, prompt: str) -> str:
        return extract_text(await self.generate_content(prompt))
