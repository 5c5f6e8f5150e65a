"""Callbacks: URLs MindsDB Cloud notifies when a model changes status."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import RestResourceClient, path_segment
from ..utils import setup_logger

logger = setup_logger(__name__)

CALLBACKS_URI = "/cloud/callback/model_status"


@dataclass
class Callback:
    """A registered callback."""

    id: Optional[int] = None
    url: Optional[str] = None
    created_at: Optional[str] = None
    client: Optional["CallbacksClient"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any], client: Optional["CallbacksClient"] = None) -> "Callback":
        return cls(
            id=data.get("id"),
            url=data.get("url"),
            created_at=data.get("created_at"),
            client=client,
        )

    async def update(self, url: str) -> "Callback":
        """Point this callback at a new URL."""
        return await self.client.update_callback(self.id, url)

    async def delete(self) -> None:
        """Delete this callback."""
        await self.client.delete_callback(self.id)


class CallbacksClient(RestResourceClient):
    """Registers, lists, updates and deletes callbacks."""

    def _callback_path(self, callback_id: int) -> str:
        return f"{CALLBACKS_URI}/{path_segment(callback_id)}"

    async def create_callback(self, url: str) -> Callback:
        """Register a URL to be called when a model changes status.

        Raises:
            MindsDbError: If the request fails
        """
        data = await self._request("POST", CALLBACKS_URI, json={"url": url})
        logger.info(f"Created callback for {url}")
        if not data:
            return Callback(url=url, client=self)
        return Callback.from_json(data, self)

    async def list_callbacks(self) -> List[Callback]:
        """Get all callbacks of the authenticated user."""
        data = await self._request("GET", CALLBACKS_URI)
        return [Callback.from_json(item, self) for item in data or []]

    async def update_callback(self, callback_id: int, url: str) -> Callback:
        """Point an existing callback at a new URL."""
        data = await self._request("PUT", self._callback_path(callback_id), json={"url": url})
        logger.info(f"Updated callback {callback_id}")
        if not data:
            return Callback(id=callback_id, url=url, client=self)
        return Callback.from_json(data, self)

    async def delete_callback(self, callback_id: int) -> None:
        """Delete a callback by id."""
        await self._request("DELETE", self._callback_path(callback_id))
        logger.info(f"Deleted callback {callback_id}")
