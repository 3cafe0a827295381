"""
Bridge Shutdown Trigger

Sends the shutdown command to the migrated bridge's REST API on its own
asyncio task, so that connectivity probing proceeds while the call is in
flight.

Failure policy:
- HTTP / I-O errors are recorded in an error slot as ShutdownCallFailure
  and surfaced by raise_if_failed(); they are never swallowed
- Cancellation of the in-flight call is logged, not retried and not
  recorded as a failure
- Nothing is retried: the bridge may already be shutting down

Usage:
    trigger = ShutdownTrigger(BridgeRestClient(shutdown_path="/colibri/shutdown"))
    trigger.trigger(ShutdownRequest(endpoint="http://localhost:8080", graceful=True))
    ...  # probe participants meanwhile
    trigger.raise_if_failed()
    await trigger.aclose()
"""

import asyncio
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from bridge_migration.config.logging_config import get_logger
from bridge_migration.config.scenario import DEFAULT_SHUTDOWN_PATH
from bridge_migration.types.errors import ShutdownCallFailure

logger = get_logger(__name__)


class ShutdownRequest(BaseModel):
    """Shutdown command for one bridge, built once per run."""

    endpoint: str = Field(..., min_length=1, description="Bridge REST base URL")
    graceful: bool = Field(default=True, description="Drain before terminating")

    class Config:
        frozen = True  # Immutable


class BridgeRestClient:
    """Async HTTP client for a bridge's shutdown resource."""

    def __init__(
        self,
        shutdown_path: str = DEFAULT_SHUTDOWN_PATH,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            shutdown_path: Resource path appended to the request endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests mount a mock bridge app here)
        """
        self.shutdown_path = shutdown_path
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def shutdown_payload(graceful: bool) -> dict:
        if graceful:
            return {"graceful-shutdown": "true"}
        return {"force-shutdown": "true"}

    async def shutdown(self, request: ShutdownRequest) -> int:
        """
        POST the shutdown command.

        Returns:
            HTTP status code of the accepted request

        Raises:
            httpx.HTTPError: Connection problems or a non-2xx response
        """
        client = await self._get_client()
        url = f"{request.endpoint.rstrip('/')}{self.shutdown_path}"
        payload = self.shutdown_payload(request.graceful)

        logger.debug(f"📤 POST {url} {payload}")
        response = await client.post(url, json=payload)
        response.raise_for_status()
        return response.status_code


class ShutdownTrigger:
    """
    Fire-and-forget shutdown with a shared error slot.

    The caller never awaits the task; it checks the slot instead.
    """

    def __init__(self, client: BridgeRestClient):
        self.client = client
        self.request: Optional[ShutdownRequest] = None
        self.task: Optional[asyncio.Task] = None
        self.error: Optional[ShutdownCallFailure] = None
        self.status_code: Optional[int] = None

    def trigger(self, request: ShutdownRequest) -> asyncio.Task:
        """
        Spawn the shutdown call and return immediately.

        Raises:
            RuntimeError: A shutdown was already issued by this trigger
        """
        if self.task is not None:
            raise RuntimeError("Shutdown already issued for this run")

        self.request = request
        mode = "graceful" if request.graceful else "forced"
        logger.info(f"🛑 Issuing {mode} shutdown to {request.endpoint}")
        self.task = asyncio.create_task(self._run(request), name="bridge-shutdown")
        return self.task

    async def _run(self, request: ShutdownRequest) -> None:
        try:
            self.status_code = await self.client.shutdown(request)
            logger.info(f"✅ Bridge accepted shutdown (HTTP {self.status_code})")
        except asyncio.CancelledError:
            logger.warning("⚠️ Shutdown call interrupted before completion (not retried)")
            raise
        except httpx.HTTPError as e:
            logger.error(f"❌ Shutdown call to {request.endpoint} failed: {e}")
            self.error = ShutdownCallFailure(f"Bridge shutdown call failed: {e}")
        except Exception as e:
            logger.error(f"❌ Unexpected error during shutdown call: {e}")
            self.error = ShutdownCallFailure(
                f"Bridge shutdown call failed: {type(e).__name__}: {e}"
            )

    @property
    def issued(self) -> bool:
        return self.task is not None

    @property
    def pending(self) -> bool:
        return self.task is not None and not self.task.done()

    def raise_if_failed(self) -> None:
        """Re-raise the recorded shutdown failure, if any."""
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        """Cancel a still-pending call and release the HTTP client."""
        if self.pending:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        await self.client.close()
