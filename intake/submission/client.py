"""HTTP client for the incident write endpoint.

One authenticated JSON POST per call, no retries: every failed submission
is terminal for that attempt and the user resubmits explicitly. Transport
problems (connection errors, timeouts, a body that is not JSON) are raised
as ``TransportError`` so the pipeline can turn them into a single generic
message.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import aiohttp

from intake.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

USER_AGENT = "Incident-Intake/1.0 (barangay incident reporting)"


class TransportError(Exception):
    """The request did not produce a usable response.

    Attributes:
        url: The endpoint that was called.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Request to {url} failed: {reason}")


@dataclass(frozen=True)
class ApiResponse:
    """Status code and decoded JSON body of a completed request."""

    status: int
    body: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class IncidentApiClient:
    """Posts serialized incident drafts to the backend API.

    Args:
        config: Intake config dict; reads the "api" section. Missing keys
                fall back to ``DEFAULT_CONFIG``.
        token_provider: Callable returning the current bearer token (or
                        None). Supplied by the host's auth layer.
    """

    def __init__(
        self,
        config: dict | None = None,
        token_provider: Callable[[], str | None] | None = None,
    ):
        api = {**DEFAULT_CONFIG["api"], **(config or {}).get("api", {})}
        self.base_url = api["base_url"].rstrip("/")
        self.submit_path = api["submit_path"]
        self.request_timeout = aiohttp.ClientTimeout(total=api.get("request_timeout"))
        self._token_provider = token_provider or (lambda: None)
        self._headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}{self.submit_path}"

    def _create_session(self) -> aiohttp.ClientSession:
        """Create an aiohttp session with the intake User-Agent."""
        return aiohttp.ClientSession(headers=self._headers)

    def _auth_headers(self) -> dict:
        token = self._token_provider()
        if not token:
            logger.warning("No bearer token available; submitting unauthenticated")
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def post_incident(self, payload: dict) -> ApiResponse:
        """POST one incident payload and return the decoded response.

        Raises:
            TransportError: No response, timeout, or a body that is not JSON.
        """
        url = self.submit_url
        try:
            async with self._create_session() as session:
                async with session.post(
                    url,
                    json=payload,
                    headers=self._auth_headers(),
                    timeout=self.request_timeout,
                ) as resp:
                    body = await resp.json(content_type=None)
                    status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("POST %s failed: %s", url, e)
            raise TransportError(url, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error("POST %s returned a body that is not JSON: %s", url, e)
            raise TransportError(url, f"malformed response body ({e})") from e

        if body is not None and not isinstance(body, dict):
            logger.error("POST %s returned %s JSON, expected an object", url, type(body).__name__)
            raise TransportError(url, "malformed response body (not a JSON object)")

        logger.debug("POST %s -> %d", url, status)
        return ApiResponse(status=status, body=body or {})
