"""
Infrastructure layer: Generative-text API client for the culture advisor.
"""
from typing import Any, Dict, Optional, Protocol

import httpx

from spirulina_tracker.config import settings
from spirulina_tracker.infrastructure.api_constants import (
    ADVISOR_SYSTEM_INSTRUCTION,
    APIConstants,
    GeminiAPIEndpoints,
)


class AdvisorError(Exception):
    """Custom exception for generative-text API errors."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdvisorBackend(Protocol):
    """Anything able to answer a question given a context summary."""

    async def answer(self, question: str, context: str) -> str:
        ...


class GeminiAdvisorClient:
    """
    Client for the Generative Language API.

    One request per question: no retry and no streaming. The configured
    timeout bounds a hung call.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the API client with configuration."""
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.base_url = base_url or settings.gemini_base_url
        self.model = model or settings.gemini_model
        self.temperature = settings.advisor_temperature
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                APIConstants.API_KEY_HEADER: self.api_key,
                "content-type": APIConstants.CONTENT_TYPE_JSON,
                "accept": APIConstants.CONTENT_TYPE_JSON,
            },
            timeout=timeout or settings.advisor_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def __aenter__(self) -> "GeminiAdvisorClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            AdvisorError: If the request fails or times out
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise AdvisorError(
                f"Advisor request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise AdvisorError(f"Advisor request error: {str(e)}")
        except ValueError as e:
            raise AdvisorError(f"Advisor returned invalid JSON: {str(e)}")

    def build_request_body(self, question: str, context: str) -> Dict[str, Any]:
        """Request payload: persona plus context as system instruction, question as user turn."""
        return {
            "systemInstruction": {
                "parts": [{"text": f"{ADVISOR_SYSTEM_INSTRUCTION}\n{context}"}],
            },
            "contents": [
                {"role": "user", "parts": [{"text": question}]},
            ],
            "generationConfig": {"temperature": self.temperature},
        }

    @staticmethod
    def extract_text(data: Dict[str, Any]) -> str:
        """
        Concatenate the text parts of the first candidate.

        Returns:
            The reply text, or an empty string when the response has none
        """
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    async def answer(self, question: str, context: str) -> str:
        """
        Ask the model a question.

        Args:
            question: The user's raw question
            context: Summary of the user's ponds and logs

        Returns:
            Reply text, possibly empty

        Raises:
            AdvisorError: If the request fails
        """
        data = await self._make_request(
            "POST",
            GeminiAPIEndpoints.generate_content(self.model),
            json=self.build_request_body(question, context),
        )
        return self.extract_text(data)


# Singleton instance
_advisor_client: Optional[GeminiAdvisorClient] = None


def get_advisor_client() -> GeminiAdvisorClient:
    """
    Get or create the singleton advisor client instance.

    Returns:
        GeminiAdvisorClient instance
    """
    global _advisor_client
    if _advisor_client is None:
        _advisor_client = GeminiAdvisorClient()
    return _advisor_client
