"""Async client for the LUIS-style NLU endpoint."""

import json
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from extract_info.schemas.models import LuisResponse

logger = logging.getLogger(__name__)


class NluResponseParseError(Exception):
    """The NLU service returned a payload that does not match the expected shape."""


class LuisClient:
    """Wrapper around the NLU prediction endpoint."""

    def __init__(
        self,
        endpoint: str,
        subscription_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize NLU client.

        Args:
            endpoint: Prediction endpoint URL (may already carry query parameters)
            subscription_key: Key sent as the 'subscription-key' query parameter
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx.AsyncClient
        """
        if not endpoint:
            raise ValueError("NLU endpoint must be configured")
        self.endpoint = endpoint
        self.subscription_key = subscription_key
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def query(self, text: str) -> LuisResponse:
        """
        Submit text to the NLU service.

        Args:
            text: Evaluated transcript

        Returns:
            Decoded LuisResponse

        Raises:
            httpx.RequestError: Network failure
            httpx.HTTPStatusError: Non-success status from the service
            NluResponseParseError: Payload is not a valid NLU response
        """
        logger.info(f"Querying NLU service with {len(text)} characters")
        # Appended so parameters already on the endpoint are kept.
        url = httpx.URL(self.endpoint).copy_merge_params(
            {"subscription-key": self.subscription_key}
        )
        response = await self.client.post(
            url,
            content=json.dumps(text).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"NLU response is not JSON: {e}")
            raise NluResponseParseError(f"NLU response is not JSON: {e}")

        return self.parse_response(payload)

    @staticmethod
    def parse_response(payload: Any) -> LuisResponse:
        """Validate a decoded payload against the NLU response schema."""
        try:
            return LuisResponse.model_validate(payload)
        except ValidationError as e:
            logger.error(f"NLU response failed schema validation: {e}")
            raise NluResponseParseError(f"Invalid NLU response: {e}")

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
