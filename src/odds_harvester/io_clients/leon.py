"""Leon betline API client."""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from ..config import AppSettings, get_settings
from ..errors import MalformedPayloadError, RemoteCallError
from ..harvest_logging import get_logger
from ..http import build_client
from ..models import Betline, LeonModel, Match
from ..resilience import RetryPolicy, raise_for_retryable_status

logger = get_logger(__name__)

ModelT = TypeVar('ModelT', bound=LeonModel)

C_TAG = "ctag"
FLAGS = "flags"
EVENT_ID = "eventId"
LEAGUE_ID = "league_id"
HIDE_CLOSED = "hideClosed"
ALL_EVENTS_FLAGS = "reg,urlv2,mm2,rrc,nodup"
EVENT_FLAGS = "reg,urlv2,mm2,rrc,nodup,smg,outv2"


class LeonClient:
    """Async client for the Leon betline endpoints.

    Each HTTP exchange runs under the retry policy. Decoding and validation
    happen afterwards, so a malformed body is never retried.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_http_client = http_client is None
        self.http_client = http_client or build_client(self.settings)
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)

    async def __aenter__(self) -> "LeonClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def _exchange(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        try:
            response = await self.http_client.get(path, params=params)
        except httpx.RequestError as e:
            raise RemoteCallError(f"Request to {path} failed: {e}", url=path) from e

        logger.debug(
            "HTTP response received",
            path=path,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return raise_for_retryable_status(response)

    async def _get(self, path: str, params: Dict[str, Any], model: Type[ModelT]) -> ModelT:
        response = await self.retry_policy.call(self._exchange, path, params)
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Response from {path} is not JSON: {e}", url=path) from e
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise MalformedPayloadError(
                f"Response from {path} is not a valid {model.__name__}: {e}", url=path
            ) from e

    async def fetch_league_events(self, league_id: str) -> Betline:
        """Fetch the open events of a league.

        Args:
            league_id: Leon league ID

        Returns:
            Betline with the league's events in API order
        """
        params = {
            C_TAG: self.settings.LEON_LOCALE,
            LEAGUE_ID: league_id,
            HIDE_CLOSED: "true",
            FLAGS: ALL_EVENTS_FLAGS,
        }
        return await self._get(self.settings.LEON_EVENTS_PATH, params, Betline)

    async def fetch_event_detail(self, event_id: str) -> Match:
        """Fetch markets and runners of a single event.

        Args:
            event_id: Leon event ID

        Returns:
            Match with kickoff normalized to UTC
        """
        params = {
            C_TAG: self.settings.LEON_LOCALE,
            EVENT_ID: event_id,
            FLAGS: EVENT_FLAGS,
        }
        return await self._get(self.settings.LEON_EVENT_PATH, params, Match)
