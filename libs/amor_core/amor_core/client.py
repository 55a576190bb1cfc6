import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from .schemas import Group, Notification, Session

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ApiError(Exception):
    """The API answered with an error status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class Unauthorized(ApiError):
    """Missing session or insufficient role."""


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text

    if response.status_code in (401, 403):
        raise Unauthorized(response.status_code, str(detail))
    raise ApiError(response.status_code, str(detail))


class AmorClient:
    """
    Async client for the Amor HTTP API.

    Transport failures surface as httpx.HTTPError; error statuses as
    ApiError (Unauthorized for 401/403).
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api/v1",
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "AmorClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._http.request(method, url, **kwargs)
        _raise_for_status(response)
        return response.json()

    # --- Groups ---

    async def get_random_group(
        self,
        previous_id: Optional[int] = None,
        include_unapproved: bool = False,
    ) -> Optional[Group]:
        params: Dict[str, Any] = {"include_unapproved": include_unapproved}
        if previous_id is not None:
            params["previous_id"] = previous_id

        data = await self._request("GET", "/groups/random", params=params)
        return Group.model_validate(data) if data else None

    async def get_group(self, group_id: int) -> Optional[Group]:
        """A specific group, or None if it no longer exists."""
        try:
            data = await self._request("GET", f"/groups/{group_id}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return Group.model_validate(data)

    async def get_unapproved_groups(self) -> List[Group]:
        data = await self._request("GET", "/groups/unapproved")
        return [Group.model_validate(item) for item in data]

    async def create_group(
        self,
        name: str,
        tags: Sequence[str],
        files: Sequence[Tuple[str, bytes]],
    ) -> bool:
        """Submit a new group. files are (filename, content) pairs."""
        data = await self._request(
            "POST",
            "/groups",
            data={"name": name, "tags": list(tags)},
            files=[("files", (filename, content)) for filename, content in files],
        )
        return bool(data["success"])

    async def approve_group(self, group_id: int) -> str:
        data = await self._request("POST", f"/groups/{group_id}/approve")
        return data["outcome"]

    async def deny_group(self, group_id: int) -> str:
        data = await self._request("POST", f"/groups/{group_id}/deny")
        return data["outcome"]

    # --- Notifications ---

    async def get_notifications(self) -> List[Notification]:
        data = await self._request("GET", "/notifications")
        return [Notification.model_validate(item) for item in data]

    async def mark_notifications_read(self) -> int:
        data = await self._request("DELETE", "/notifications")
        return data["cleared"]

    # --- Session ---

    async def get_session(self) -> Optional[Session]:
        data = await self._request("GET", "/auth/session")
        return Session.model_validate(data) if data else None
