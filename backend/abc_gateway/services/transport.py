"""
Bank Transport

Posts signed payloads to the bank transaction endpoint over a shared
httpx.AsyncClient. The payload is treated as an opaque body.
"""
import logging
from typing import Optional

import httpx

from ..exceptions import GatewayError, TransportError
from ..models.credentials import BankEndpoint
from ..models.results import SignedPayload
from .response_parser import RESPONSE_FIELD_ALIASES, load_reply

logger = logging.getLogger(__name__)


class BankTransport:
    """
    Stateless forwarding step.

    The client's connection pool is the only shared resource and is safe
    for concurrent requests. No retries.
    """

    def __init__(self, client: httpx.AsyncClient, endpoint: BankEndpoint):
        self._client = client
        self._endpoint = endpoint

    async def send(self, payload: SignedPayload, endpoint: Optional[BankEndpoint] = None) -> str:
        """
        Deliver a payload and return the raw reply text.

        Raises:
            TransportError: Connection failure, timeout, or HTTP error status
                without a JSON reply document
        """
        url = (endpoint or self._endpoint).url
        logger.debug(f"Sending request to: {url}")

        try:
            response = await self._client.post(
                url,
                content=payload.body,
                headers={"Content-Type": f"{payload.content_type}; charset=utf-8"}
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to bank timed out: {e}", details={"url": url}) from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, details={"url": url}) from e

        if response.is_error:
            if _has_reply_document(response.text):
                logger.warning(f"Bank endpoint returned HTTP {response.status_code} with a reply document")
                return response.text
            raise TransportError(
                f"Bank endpoint returned HTTP {response.status_code}",
                details={"url": url, "status_code": response.status_code}
            )

        text = response.text
        logger.debug(f"Received response: {text}")
        return text


def _has_reply_document(text: str) -> bool:
    """True when an error-status body still carries the bank's own response code."""
    try:
        document = load_reply(text)
    except GatewayError:
        return False
    return any(document.get(name) is not None for name in RESPONSE_FIELD_ALIASES["response_code"])


def create_http_client(timeout_seconds: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Build the shared client; pass a transport to route requests in-process."""
    return httpx.AsyncClient(timeout=timeout_seconds, transport=transport)
